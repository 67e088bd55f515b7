"""
Data access layer.

One repository per aggregate; repositories never commit.
"""

from hostel_allocator.repositories.base import BaseRepository
from hostel_allocator.repositories.hostel import HostelRepository
from hostel_allocator.repositories.registration import RegistrationRepository
from hostel_allocator.repositories.room import BedRepository, RoomRepository

__all__ = [
    "BaseRepository",
    "HostelRepository",
    "RoomRepository",
    "BedRepository",
    "RegistrationRepository",
]

"""
Database models for the hostel allocation service.

Importing this package registers every table with the declarative base.
"""

from hostel_allocator.models.base import Base, BaseModel, TimestampModel
from hostel_allocator.models.hostel import Hostel
from hostel_allocator.models.registration import Registration
from hostel_allocator.models.room import Bed, Room

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "Hostel",
    "Room",
    "Bed",
    "Registration",
]

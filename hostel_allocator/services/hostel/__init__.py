"""Hostel, room and bed inventory services."""

from hostel_allocator.services.hostel.hostel_service import HostelService
from hostel_allocator.services.hostel.room_service import RoomService

__all__ = ["HostelService", "RoomService"]

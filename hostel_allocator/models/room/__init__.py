"""Room and bed models."""

from hostel_allocator.models.room.bed import Bed
from hostel_allocator.models.room.room import Room, room_number_sort_key

__all__ = ["Bed", "Room", "room_number_sort_key"]

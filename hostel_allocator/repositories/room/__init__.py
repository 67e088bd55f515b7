from hostel_allocator.repositories.room.bed_repository import BedRepository
from hostel_allocator.repositories.room.room_repository import RoomRepository

__all__ = ["BedRepository", "RoomRepository"]

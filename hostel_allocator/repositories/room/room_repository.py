# hostel_allocator/repositories/room/room_repository.py
"""
Room repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hostel_allocator.models.room import Bed, Room, room_number_sort_key
from hostel_allocator.repositories.base.base_repository import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """Repository for Room entities."""

    def __init__(self, session: Session):
        super().__init__(Room, session)

    def list_for_hostel(self, hostel_id: str) -> List[Room]:
        """Rooms of a hostel with beds loaded, ordered by numeric room number."""
        rooms = self._scalars(
            select(Room)
            .where(Room.hostel_id == hostel_id)
            .options(selectinload(Room.beds))
            .execution_options(populate_existing=True)
        )
        return sorted(rooms, key=lambda room: room_number_sort_key(room.room_number))

    def max_room_number(self, hostel_id: str) -> int:
        """Highest integer room number in the hostel, 0 when it has none."""
        numbers = self._scalars(select(Room.room_number).where(Room.hostel_id == hostel_id))
        highest = 0
        for number in numbers:
            kind, value, _ = room_number_sort_key(number)
            if kind == 0 and value > highest:
                highest = value
        return highest

    def find_empty_rooms(self, hostel_id: str) -> List[Room]:
        """Rooms in which no bed has an occupant, highest room number first."""
        occupied_rooms = select(Bed.room_id).where(Bed.registration_id.is_not(None))
        rooms = self._scalars(
            select(Room)
            .where(Room.hostel_id == hostel_id, Room.id.not_in(occupied_rooms))
            .options(selectinload(Room.beds))
            .execution_options(populate_existing=True)
        )
        return sorted(
            rooms,
            key=lambda room: room_number_sort_key(room.room_number),
            reverse=True,
        )

    def find_with_beds(self, room_id: str) -> Optional[Room]:
        return self._scalar(
            select(Room)
            .where(Room.id == room_id)
            .options(selectinload(Room.beds))
            .execution_options(populate_existing=True)
        )

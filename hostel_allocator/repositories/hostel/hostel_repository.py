# hostel_allocator/repositories/hostel/hostel_repository.py
"""
Hostel repository: lookups and occupancy aggregates.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from hostel_allocator.models.hostel import Hostel
from hostel_allocator.models.room import Bed, Room
from hostel_allocator.repositories.base.base_repository import BaseRepository


class HostelRepository(BaseRepository[Hostel]):
    """Repository for Hostel entities."""

    def __init__(self, session: Session):
        super().__init__(Hostel, session)

    def name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(Hostel.id).where(Hostel.name == name)
        if exclude_id:
            stmt = stmt.where(Hostel.id != exclude_id)
        return self._scalar(stmt) is not None

    def list_ordered(self) -> List[Hostel]:
        return self._scalars(select(Hostel).order_by(Hostel.name))

    def find_with_layout(self, hostel_id: str) -> Optional[Hostel]:
        """Load a hostel together with its rooms, beds and bed occupants."""
        stmt = (
            select(Hostel)
            .where(Hostel.id == hostel_id)
            .options(
                selectinload(Hostel.rooms)
                .selectinload(Room.beds)
                .selectinload(Bed.registration)
            )
            .execution_options(populate_existing=True)
        )
        return self._scalar(stmt)

    def occupancy_counts(self) -> Dict[str, Dict[str, int]]:
        """
        Room, bed and occupied-bed counts for every hostel.

        Hostels with no rooms are still present with zero counts.
        """
        room_rows = self._rows(
            select(Room.hostel_id, func.count(Room.id)).group_by(Room.hostel_id)
        )
        bed_rows = self._rows(
            select(
                Room.hostel_id,
                func.count(Bed.id),
                func.count(Bed.registration_id),
            )
            .join(Bed, Bed.room_id == Room.id)
            .group_by(Room.hostel_id)
        )

        counts: Dict[str, Dict[str, int]] = {}
        for hostel_id in self._scalars(select(Hostel.id)):
            counts[hostel_id] = {"rooms": 0, "beds": 0, "occupied": 0}
        for hostel_id, rooms in room_rows:
            counts.setdefault(hostel_id, {"rooms": 0, "beds": 0, "occupied": 0})["rooms"] = rooms
        for hostel_id, beds, occupied in bed_rows:
            entry = counts.setdefault(hostel_id, {"rooms": 0, "beds": 0, "occupied": 0})
            entry["beds"] = beds
            entry["occupied"] = occupied
        return counts

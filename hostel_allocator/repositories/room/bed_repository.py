# hostel_allocator/repositories/room/bed_repository.py
"""
Bed repository: bed slots and their occupant references.
"""

from typing import List, Optional, Set, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from hostel_allocator.core.exceptions import DuplicateEntryError, StorageError
from hostel_allocator.models.hostel import Hostel
from hostel_allocator.models.room import Bed, Room
from hostel_allocator.repositories.base.base_repository import BaseRepository


class BedRepository(BaseRepository[Bed]):
    """Repository for Bed entities."""

    def __init__(self, session: Session):
        super().__init__(Bed, session)

    def find_with_location(self, bed_id: str) -> Optional[Bed]:
        """Load a bed with its room, hostel and occupant."""
        stmt = (
            select(Bed)
            .where(Bed.id == bed_id)
            .options(
                selectinload(Bed.room).selectinload(Room.hostel),
                selectinload(Bed.registration),
            )
        )
        return self._scalar(stmt)

    def max_bed_number(self, room_id: str) -> int:
        return self._scalar(select(func.max(Bed.bed_number)).where(Bed.room_id == room_id)) or 0

    def find_empty_in_room(self, room_id: str) -> List[Bed]:
        """Unoccupied beds of a room, highest bed number first."""
        return self._scalars(
            select(Bed)
            .where(Bed.room_id == room_id, Bed.registration_id.is_(None))
            .order_by(Bed.bed_number.desc())
        )

    def find_by_registration(self, registration_id: str) -> Optional[Bed]:
        return self._scalar(select(Bed).where(Bed.registration_id == registration_id))

    def assigned_registration_ids(self) -> Set[str]:
        """Ids of every registration currently occupying a bed."""
        return set(
            self._scalars(select(Bed.registration_id).where(Bed.registration_id.is_not(None)))
        )

    def occupant_hostel_names(self) -> List[Tuple[str, str]]:
        """(registration id, hostel name) for every occupied bed."""
        stmt = (
            select(Bed.registration_id, Hostel.name)
            .join(Room, Bed.room_id == Room.id)
            .join(Hostel, Room.hostel_id == Hostel.id)
            .where(Bed.registration_id.is_not(None))
        )
        return [(registration_id, name) for registration_id, name in self._rows(stmt)]

    def occupied_in_hostel(self, hostel_id: str) -> List[Bed]:
        return self._scalars(
            select(Bed)
            .join(Room, Bed.room_id == Room.id)
            .where(Room.hostel_id == hostel_id, Bed.registration_id.is_not(None))
            .options(selectinload(Bed.registration))
        )

    def set_occupant(self, bed: Bed, registration_id: Optional[str], flush: bool = True) -> Bed:
        """
        Set or clear a bed's occupant reference.

        Does not check whether the registration already holds another bed;
        the storage constraint rejects that on flush.
        """
        bed.registration_id = registration_id
        if flush:
            self.flush()
            # Reload the occupant relationship from the new column value
            self.db.expire(bed, ["registration"])
        return bed

    def claim(self, bed: Bed, registration_id: str) -> bool:
        """
        Occupy ``bed`` only if it is still empty in storage.

        Returns False when another transaction filled the bed after it was
        read. Raises DuplicateEntryError when the registration already holds
        a bed.
        """
        stmt = (
            update(Bed)
            .where(Bed.id == bed.id, Bed.registration_id.is_(None))
            .values(registration_id=registration_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except IntegrityError as e:
            raise DuplicateEntryError(
                "Registration already occupies a bed", field="registration_id", table=Bed.__tablename__
            ) from e
        except SQLAlchemyError as e:
            raise StorageError(f"Claim failed: {e}", operation="update", table=Bed.__tablename__) from e
        self.db.expire(bed, ["registration_id", "registration"])
        return result.rowcount == 1

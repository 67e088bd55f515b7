# hostel_allocator/repositories/registration/registration_repository.py
"""
Registration repository.

Read access to registrations plus writes to the denormalized hostel name.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_allocator.models.registration import Registration
from hostel_allocator.models.room import Bed
from hostel_allocator.repositories.base.base_repository import BaseRepository


class RegistrationRepository(BaseRepository[Registration]):
    """Repository for Registration entities."""

    def __init__(self, session: Session):
        super().__init__(Registration, session)

    def list_eligible(self, status: str, stay_type: str) -> List[Registration]:
        """Registrations eligible for housing, in application id order."""
        return self._scalars(
            select(Registration)
            .where(
                Registration.registration_status == status,
                Registration.stay_type == stay_type,
            )
            .order_by(Registration.application_id)
        )

    def list_available(self, status: str, stay_type: str) -> List[Registration]:
        """Eligible registrations that do not occupy any bed."""
        occupied = select(Bed.registration_id).where(Bed.registration_id.is_not(None))
        return self._scalars(
            select(Registration)
            .where(
                Registration.registration_status == status,
                Registration.stay_type == stay_type,
                Registration.id.not_in(occupied),
            )
            .order_by(Registration.application_id)
        )

    def list_with_hostel_name(self) -> List[Registration]:
        return self._scalars(
            select(Registration).where(Registration.hostel_name.is_not(None))
        )

    def set_hostel_name(
        self,
        registration: Registration,
        hostel_name: Optional[str],
        flush: bool = True,
    ) -> Registration:
        registration.hostel_name = hostel_name
        if flush:
            self.flush()
        return registration

# hostel_allocator/models/registration/registration.py
"""
Registration model.

Registrations are owned by the review workflow; this service only reads them
and writes the denormalized ``hostel_name``.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_allocator.models.base.base_model import TimestampModel
from hostel_allocator.models.base.enums import RegistrationStatus

if TYPE_CHECKING:
    from hostel_allocator.models.room.bed import Bed

__all__ = ["Registration"]


class Registration(TimestampModel):
    """An alumni or dependent attendee application."""

    __tablename__ = "registrations"

    application_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )
    parent_application_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        index=True,
        comment="Application id of the primary applicant, for dependents",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    registration_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RegistrationStatus.PENDING.value,
        index=True,
    )
    stay_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    hostel_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Cached name of the hostel holding this registrant's bed",
    )

    bed: Mapped[Optional["Bed"]] = relationship(
        "Bed",
        back_populates="registration",
        uselist=False,
    )

    @property
    def is_primary(self) -> bool:
        return not self.parent_application_id

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, application_id={self.application_id})>"

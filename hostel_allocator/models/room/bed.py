# hostel_allocator/models/room/bed.py
"""
Bed model.

Stored in the ``bed_assignments`` table. The unique constraint on
``registration_id`` keeps a registration in at most one bed even when two
operators allocate concurrently.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_allocator.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from hostel_allocator.models.registration.registration import Registration
    from hostel_allocator.models.room.room import Room

__all__ = ["Bed"]


class Bed(TimestampModel):
    """Smallest housing unit; holds at most one occupant."""

    __tablename__ = "bed_assignments"
    __table_args__ = (
        UniqueConstraint("room_id", "bed_number", name="uq_bed_room_number"),
        UniqueConstraint("registration_id", name="uq_bed_registration"),
    )

    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bed_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    registration_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("registrations.id", ondelete="SET NULL"),
        nullable=True,
    )

    room: Mapped["Room"] = relationship("Room", back_populates="beds")
    registration: Mapped[Optional["Registration"]] = relationship(
        "Registration",
        back_populates="bed",
    )

    @property
    def is_occupied(self) -> bool:
        return self.registration_id is not None

    def __repr__(self) -> str:
        return (
            f"<Bed(id={self.id}, room_id={self.room_id}, "
            f"number={self.bed_number}, occupant={self.registration_id})>"
        )

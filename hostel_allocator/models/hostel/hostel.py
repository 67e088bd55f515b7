# hostel_allocator/models/hostel/hostel.py
"""
Hostel model.

A hostel owns its rooms; deleting a hostel removes its rooms and beds.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_allocator.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from hostel_allocator.models.room.room import Room

__all__ = ["Hostel"]


class Hostel(TimestampModel):
    """Top-level housing facility containing rooms."""

    __tablename__ = "hostels"
    __table_args__ = (
        CheckConstraint("total_rooms >= 0", name="ck_hostel_total_rooms_non_negative"),
        CheckConstraint("beds_per_room >= 1", name="ck_hostel_beds_per_room_positive"),
        CheckConstraint("washrooms >= 0", name="ck_hostel_washrooms_non_negative"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Unique display label",
    )
    total_rooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Declared room count",
    )
    beds_per_room: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Default bed count for newly added rooms",
    )
    washrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="hostel",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Hostel(id={self.id}, name={self.name!r})>"

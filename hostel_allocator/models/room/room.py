# hostel_allocator/models/room/room.py
"""
Room model.

Room numbers are strings in storage but are always assigned from an integer
sequence within a hostel.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_allocator.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from hostel_allocator.models.hostel.hostel import Hostel
    from hostel_allocator.models.room.bed import Bed

__all__ = ["Room", "room_number_sort_key"]


def room_number_sort_key(room_number: str):
    """Order room numbers numerically, falling back to text for odd labels."""
    try:
        return (0, int(room_number), "")
    except (TypeError, ValueError):
        return (1, 0, str(room_number))


class Room(TimestampModel):
    """Subdivision of a hostel with a fixed bed capacity."""

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("hostel_id", "room_number", name="uq_room_hostel_number"),
    )

    hostel_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    beds_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Always equal to the number of bed rows for this room",
    )
    next_bed_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Number the next added bed gets; only ever increases",
    )

    hostel: Mapped["Hostel"] = relationship("Hostel", back_populates="rooms")
    beds: Mapped[List["Bed"]] = relationship(
        "Bed",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="Bed.bed_number",
    )

    @property
    def occupied_count(self) -> int:
        return sum(1 for bed in self.beds if bed.is_occupied)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, hostel_id={self.hostel_id}, number={self.room_number})>"

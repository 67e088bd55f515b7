"""
Room and bed schemas, including the hostel layout view.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, model_validator

from hostel_allocator.schemas.common.base import BaseCreateSchema, BaseSchema
from hostel_allocator.schemas.hostel.hostel import HostelSummary

__all__ = [
    "AddRoomsRequest",
    "AddBedsRequest",
    "RemoveEmptyRequest",
    "BedResponse",
    "RoomStats",
    "RoomResponse",
    "RoomsAdded",
    "BedsAdded",
    "HostelLayout",
]


class AddRoomsRequest(BaseCreateSchema):
    """
    Append rooms to a hostel.

    ``bed_counts`` optionally gives the bed count of each new room in order;
    otherwise every new room gets the hostel's default beds-per-room.
    """

    count: int = Field(..., ge=1)
    bed_counts: Optional[List[int]] = None

    @model_validator(mode="after")
    def validate_bed_counts(self) -> "AddRoomsRequest":
        if self.bed_counts is not None:
            if len(self.bed_counts) != self.count:
                raise ValueError("bed_counts must list one entry per new room")
            if any(beds < 1 for beds in self.bed_counts):
                raise ValueError("Every room needs at least one bed")
        return self


class AddBedsRequest(BaseCreateSchema):
    count: int = Field(..., ge=1)


class RemoveEmptyRequest(BaseCreateSchema):
    count: int = Field(..., ge=1)


class BedResponse(BaseSchema):
    id: str
    bed_number: int
    registration_id: Optional[str] = None
    occupant_name: Optional[str] = None
    occupant_application_id: Optional[str] = None
    is_occupied: bool = False
    is_selected: bool = False


class RoomStats(BaseSchema):
    total: int = 0
    occupied: int = 0
    free: int = 0
    selected: int = 0


class RoomResponse(BaseSchema):
    id: str
    hostel_id: str
    room_number: str
    beds_count: int
    stats: RoomStats = Field(default_factory=RoomStats)
    beds: List[BedResponse] = Field(default_factory=list)


class RoomsAdded(BaseSchema):
    hostel_id: str
    rooms: List[RoomResponse] = Field(default_factory=list)
    beds_created: int = 0


class BedsAdded(BaseSchema):
    room_id: str
    bed_ids: List[str] = Field(default_factory=list)
    bed_numbers: List[int] = Field(default_factory=list)


class HostelLayout(BaseSchema):
    """A hostel's rooms in numeric order with their beds and occupants."""

    hostel: HostelSummary
    rooms: List[RoomResponse] = Field(default_factory=list)

"""
Hostel request and response schemas.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from hostel_allocator.schemas.common.base import (
    BaseCreateSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "HostelCreate",
    "HostelUpdate",
    "HostelSummary",
    "OccupancySummary",
    "OccupantRef",
    "DeletionPreview",
    "HostelDeleteResult",
]


class HostelCreate(BaseCreateSchema):
    """
    Payload for creating a hostel with its rooms and beds.

    ``room_bed_counts`` overrides the bed count of individual rooms, keyed by
    1-based room number; rooms without an override get ``beds_per_room``.
    """

    name: str = Field(..., max_length=255)
    room_count: int = Field(default=0, ge=0)
    beds_per_room: Optional[int] = Field(default=None, ge=1)
    room_bed_counts: Dict[int, int] = Field(default_factory=dict)
    washrooms: int = Field(default=0, ge=0)

    @field_validator("room_bed_counts")
    @classmethod
    def validate_bed_counts(cls, v: Dict[int, int]) -> Dict[int, int]:
        for room_number, beds in v.items():
            if beds < 1:
                raise ValueError(f"Room {room_number} must have at least one bed")
        return v

    @model_validator(mode="after")
    def validate_override_rooms(self) -> "HostelCreate":
        unknown = [n for n in self.room_bed_counts if n < 1 or n > self.room_count]
        if unknown:
            raise ValueError(
                f"Bed count overrides reference rooms outside 1..{self.room_count}: {sorted(unknown)}"
            )
        return self


class HostelUpdate(BaseUpdateSchema):
    """Rename a hostel or change its descriptive counts."""

    name: Optional[str] = Field(default=None, max_length=255)
    beds_per_room: Optional[int] = Field(default=None, ge=1)
    washrooms: Optional[int] = Field(default=None, ge=0)


class HostelSummary(BaseSchema):
    """Hostel with live occupancy counts."""

    id: str
    name: str
    total_rooms: int
    beds_per_room: int
    washrooms: int
    room_count: int = 0
    total_beds: int = 0
    occupied_beds: int = 0
    free_beds: int = 0


class OccupancySummary(BaseSchema):
    """Totals across every hostel."""

    hostel_count: int = 0
    total_rooms: int = 0
    total_beds: int = 0
    occupied_beds: int = 0
    free_beds: int = 0
    hostels: List[HostelSummary] = Field(default_factory=list)


class OccupantRef(BaseSchema):
    registration_id: str
    application_id: str
    name: str
    bed_id: str


class DeletionPreview(BaseSchema):
    """What deleting a hostel would remove."""

    hostel_id: str
    hostel_name: str
    rooms: int
    beds: int
    occupied_beds: int
    occupants: List[OccupantRef] = Field(default_factory=list)
    requires_force: bool = False


class HostelDeleteResult(BaseSchema):
    hostel_id: str
    hostel_name: str
    rooms_deleted: int
    beds_deleted: int
    occupants_released: int

"""
Builders that turn ORM rows into hostel, room and bed response schemas.
"""

from typing import Dict, Iterable, Optional

from hostel_allocator.models.hostel import Hostel
from hostel_allocator.models.room import Bed, Room
from hostel_allocator.schemas.hostel import HostelSummary
from hostel_allocator.schemas.room import BedResponse, RoomResponse, RoomStats


def bed_view(bed: Bed, selected_bed_ids: Iterable[str] = ()) -> BedResponse:
    occupant = bed.registration if bed.registration_id else None
    return BedResponse(
        id=bed.id,
        bed_number=bed.bed_number,
        registration_id=bed.registration_id,
        occupant_name=occupant.name if occupant else None,
        occupant_application_id=occupant.application_id if occupant else None,
        is_occupied=bed.is_occupied,
        is_selected=bed.id in set(selected_bed_ids),
    )


def room_stats(room: Room, selected_bed_ids: Iterable[str] = ()) -> RoomStats:
    """Total, occupied, free and selected beds of one room."""
    selected = set(selected_bed_ids)
    total = len(room.beds)
    occupied = room.occupied_count
    return RoomStats(
        total=total,
        occupied=occupied,
        free=total - occupied,
        selected=sum(1 for bed in room.beds if bed.id in selected),
    )


def room_view(room: Room, selected_bed_ids: Iterable[str] = ()) -> RoomResponse:
    selected = set(selected_bed_ids)
    return RoomResponse(
        id=room.id,
        hostel_id=room.hostel_id,
        room_number=room.room_number,
        beds_count=room.beds_count,
        stats=room_stats(room, selected),
        beds=[bed_view(bed, selected) for bed in sorted(room.beds, key=lambda b: b.bed_number)],
    )


def hostel_summary(hostel: Hostel, counts: Optional[Dict[str, int]] = None) -> HostelSummary:
    counts = counts or {"rooms": 0, "beds": 0, "occupied": 0}
    return HostelSummary(
        id=hostel.id,
        name=hostel.name,
        total_rooms=hostel.total_rooms,
        beds_per_room=hostel.beds_per_room,
        washrooms=hostel.washrooms,
        room_count=counts["rooms"],
        total_beds=counts["beds"],
        occupied_beds=counts["occupied"],
        free_beds=counts["beds"] - counts["occupied"],
    )

"""
Hostel, room and bed inventory routes.
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status

from hostel_allocator.api import deps
from hostel_allocator.schemas.common import RemovalResult
from hostel_allocator.schemas.hostel import (
    DeletionPreview,
    HostelCreate,
    HostelDeleteResult,
    HostelSummary,
    HostelUpdate,
    OccupancySummary,
)
from hostel_allocator.schemas.room import (
    AddBedsRequest,
    AddRoomsRequest,
    BedsAdded,
    HostelLayout,
    RemoveEmptyRequest,
    RoomsAdded,
)
from hostel_allocator.services.hostel import HostelService, RoomService

router = APIRouter(tags=["Hostels"])


@router.get("/summary", response_model=OccupancySummary)
def occupancy_summary(service: HostelService = Depends(deps.get_hostel_service)):
    """Room, bed and occupancy totals per hostel and overall."""
    return deps.unwrap(service.get_occupancy_summary())


@router.get("/hostels", response_model=List[HostelSummary])
def list_hostels(service: HostelService = Depends(deps.get_hostel_service)):
    return deps.unwrap(service.list_hostels())


@router.post("/hostels", response_model=HostelSummary, status_code=status.HTTP_201_CREATED)
def create_hostel(
    data: HostelCreate,
    service: HostelService = Depends(deps.get_hostel_service),
):
    """Create a hostel together with its rooms and beds."""
    return deps.unwrap(service.create_hostel(data))


@router.get("/hostels/{hostel_id}", response_model=HostelSummary)
def get_hostel(hostel_id: str, service: HostelService = Depends(deps.get_hostel_service)):
    return deps.unwrap(service.get_hostel(hostel_id))


@router.patch("/hostels/{hostel_id}", response_model=HostelSummary)
def update_hostel(
    hostel_id: str,
    data: HostelUpdate,
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.update_hostel(hostel_id, data))


@router.get("/hostels/{hostel_id}/deletion-preview", response_model=DeletionPreview)
def preview_hostel_deletion(
    hostel_id: str,
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.preview_deletion(hostel_id))


@router.delete("/hostels/{hostel_id}", response_model=HostelDeleteResult)
def delete_hostel(
    hostel_id: str,
    confirm: bool = Query(False, description="Acknowledge that deletion is irreversible"),
    force: bool = Query(False, description="Delete even if beds are occupied"),
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.delete_hostel(hostel_id, confirm=confirm, force=force))


@router.get("/hostels/{hostel_id}/layout", response_model=HostelLayout)
def hostel_layout(
    hostel_id: str,
    selected: List[str] = Query(default=[], description="Currently selected bed ids"),
    service: HostelService = Depends(deps.get_hostel_service),
):
    """Rooms with beds and occupants, with per-room stats for the given selection."""
    return deps.unwrap(service.get_layout(hostel_id, selected))


@router.post(
    "/hostels/{hostel_id}/rooms",
    response_model=RoomsAdded,
    status_code=status.HTTP_201_CREATED,
)
def add_rooms(
    hostel_id: str,
    data: AddRoomsRequest,
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.add_rooms(hostel_id, data))


@router.post("/hostels/{hostel_id}/rooms/remove-empty", response_model=RemovalResult)
def remove_empty_rooms(
    hostel_id: str,
    data: RemoveEmptyRequest,
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.remove_empty_rooms(hostel_id, data.count))


@router.post(
    "/rooms/{room_id}/beds",
    response_model=BedsAdded,
    status_code=status.HTTP_201_CREATED,
)
def add_beds(
    room_id: str,
    data: AddBedsRequest,
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.add_beds(room_id, data.count))


@router.post("/rooms/{room_id}/beds/remove-empty", response_model=RemovalResult)
def remove_empty_beds(
    room_id: str,
    data: RemoveEmptyRequest,
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.remove_empty_beds(room_id, data.count))

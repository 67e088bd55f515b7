from hostel_allocator.schemas.room.room import (
    AddBedsRequest,
    AddRoomsRequest,
    BedResponse,
    BedsAdded,
    HostelLayout,
    RemoveEmptyRequest,
    RoomResponse,
    RoomsAdded,
    RoomStats,
)

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

from hostel_allocator.schemas.hostel.hostel import (
    DeletionPreview,
    HostelCreate,
    HostelDeleteResult,
    HostelSummary,
    HostelUpdate,
    OccupancySummary,
    OccupantRef,
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

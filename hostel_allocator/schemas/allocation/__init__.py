from hostel_allocator.schemas.allocation.allocation import (
    AllocationPair,
    AllocationPlanResponse,
    AllocationRequest,
    ApplicantGroupResponse,
    GroupListResponse,
    GroupMemberResponse,
    HostelNameSyncReport,
    UnassignRequest,
)

__all__ = [
    "GroupMemberResponse",
    "ApplicantGroupResponse",
    "GroupListResponse",
    "AllocationRequest",
    "AllocationPair",
    "AllocationPlanResponse",
    "UnassignRequest",
    "HostelNameSyncReport",
]

"""
Allocation, grouping and unassignment schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from hostel_allocator.schemas.common.base import BaseCreateSchema, BaseSchema

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


class GroupMemberResponse(BaseSchema):
    registration_id: str
    application_id: str
    name: str
    is_primary: bool
    is_assigned: bool = False
    is_selected: bool = False
    hostel_name: Optional[str] = None


class ApplicantGroupResponse(BaseSchema):
    """
    A primary applicant and their dependents.

    ``selection_state`` is ``none``, ``partial`` or ``full`` relative to the
    unassigned members, or ``disabled`` when every member is housed.
    """

    primary_application_id: str
    members: List[GroupMemberResponse] = Field(default_factory=list)
    unassigned_count: int = 0
    selection_state: str = "none"
    is_selectable: bool = True


class GroupListResponse(BaseSchema):
    query: Optional[str] = None
    total_groups: int = 0
    total_members: int = 0
    groups: List[ApplicantGroupResponse] = Field(default_factory=list)


class AllocationRequest(BaseCreateSchema):
    """
    Applicant and bed selections in the order the operator made them.

    Applicants are paired positionally with beds; duplicates are ignored.
    """

    applicant_ids: List[str] = Field(..., min_length=1)
    bed_ids: List[str] = Field(..., min_length=1)


class AllocationPair(BaseSchema):
    registration_id: str
    application_id: str
    name: str
    bed_id: str
    bed_number: int
    room_id: str
    room_number: str
    hostel_id: str
    hostel_name: str


class AllocationPlanResponse(BaseSchema):
    pairs: List[AllocationPair] = Field(default_factory=list)
    unused_bed_ids: List[str] = Field(default_factory=list)


class UnassignRequest(BaseCreateSchema):
    bed_ids: List[str] = Field(..., min_length=1)


class HostelNameSyncReport(BaseSchema):
    """Outcome of recomputing every cached hostel name from bed assignments."""

    checked: int = 0
    corrected: int = 0
    set_count: int = 0
    cleared_count: int = 0

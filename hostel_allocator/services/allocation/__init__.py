"""Grouping, selection, planning, allocation and unassignment."""

from hostel_allocator.services.allocation.allocation_service import AllocationService
from hostel_allocator.services.allocation.grouping import (
    Applicant,
    ApplicantGroup,
    build_groups,
    search_groups,
)
from hostel_allocator.services.allocation.planner import (
    AllocationPlan,
    PlannedPair,
    plan_allocation,
)
from hostel_allocator.services.allocation.selection import (
    Selection,
    toggle_bed,
    toggle_group,
    toggle_member,
    toggle_room_empty_beds,
)
from hostel_allocator.services.allocation.unassignment_service import UnassignmentService

__all__ = [
    "AllocationService",
    "UnassignmentService",
    "Applicant",
    "ApplicantGroup",
    "build_groups",
    "search_groups",
    "AllocationPlan",
    "PlannedPair",
    "plan_allocation",
    "Selection",
    "toggle_bed",
    "toggle_group",
    "toggle_member",
    "toggle_room_empty_beds",
]

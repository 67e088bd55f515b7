"""
Applicant grouping, allocation and unassignment routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from hostel_allocator.api import deps
from hostel_allocator.schemas.allocation import (
    AllocationPlanResponse,
    AllocationRequest,
    GroupListResponse,
    HostelNameSyncReport,
    UnassignRequest,
)
from hostel_allocator.schemas.common import BulkItemResult, BulkOperationReport
from hostel_allocator.services.allocation import AllocationService, UnassignmentService
from hostel_allocator.services.registration import RegistrationDirectoryService

router = APIRouter(tags=["Allocations"])


@router.get("/allocations/groups", response_model=GroupListResponse)
def list_groups(
    q: Optional[str] = Query(None, description="Name or application id substring"),
    include_assigned: bool = Query(False),
    selected: List[str] = Query(default=[], description="Currently selected registration ids"),
    directory: RegistrationDirectoryService = Depends(deps.get_registration_directory),
):
    """Eligible applicants grouped by primary application."""
    return deps.unwrap(directory.list_groups(q, include_assigned=include_assigned, selected_ids=selected))


@router.post("/allocations/plan", response_model=AllocationPlanResponse)
def plan_allocation(
    data: AllocationRequest,
    service: AllocationService = Depends(deps.get_allocation_service),
):
    """Validate a selection and preview its pairs without writing anything."""
    return deps.unwrap(service.preview(data.applicant_ids, data.bed_ids))


@router.post("/allocations", response_model=BulkOperationReport)
def allocate(
    data: AllocationRequest,
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return deps.unwrap(service.allocate(data.applicant_ids, data.bed_ids))


@router.post("/allocations/unassign", response_model=BulkOperationReport)
def unassign_beds(
    data: UnassignRequest,
    service: UnassignmentService = Depends(deps.get_unassignment_service),
):
    return deps.unwrap(service.unassign_beds(data.bed_ids))


@router.delete("/beds/{bed_id}/occupant", response_model=BulkItemResult)
def unassign_bed(
    bed_id: str,
    service: UnassignmentService = Depends(deps.get_unassignment_service),
):
    return deps.unwrap(service.unassign_bed(bed_id))


@router.post("/allocations/sync-hostel-names", response_model=HostelNameSyncReport)
def sync_hostel_names(
    directory: RegistrationDirectoryService = Depends(deps.get_registration_directory),
):
    """Recompute every cached hostel name from current bed assignments."""
    return deps.unwrap(directory.sync_hostel_names())

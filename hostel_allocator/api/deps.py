# hostel_allocator/api/deps.py
"""
FastAPI dependencies: database session, services and result unwrapping.

Example usage in a router:
    @router.get("/hostels")
    def list_hostels(service: HostelService = Depends(deps.get_hostel_service)):
        return deps.unwrap(service.list_hostels())
"""

from typing import TypeVar

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings, get_settings
from hostel_allocator.db.session import get_db
from hostel_allocator.services.allocation import AllocationService, UnassignmentService
from hostel_allocator.services.audit import ActivityDispatcher, get_activity_dispatcher
from hostel_allocator.services.base import ServiceResult
from hostel_allocator.services.hostel import HostelService, RoomService
from hostel_allocator.services.registration import RegistrationDirectoryService

T = TypeVar("T")


def unwrap(result: ServiceResult[T]) -> T:
    """Return a successful result's data or raise an HTTPException for a failure."""
    if result.is_success:
        return result.data
    raise HTTPException(status_code=result.error.status_code, detail=result.error.to_dict())


# --- Services ------------------------------------------------------------------

def get_hostel_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> HostelService:
    return HostelService(db, settings)


def get_room_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RoomService:
    return RoomService(db, settings)


def get_registration_directory(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RegistrationDirectoryService:
    return RegistrationDirectoryService(db, settings)


def get_allocation_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    dispatcher: ActivityDispatcher = Depends(get_activity_dispatcher),
) -> AllocationService:
    return AllocationService(db, settings, dispatcher)


def get_unassignment_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    dispatcher: ActivityDispatcher = Depends(get_activity_dispatcher),
) -> UnassignmentService:
    return UnassignmentService(db, settings, dispatcher)


__all__ = [
    "get_db",
    "unwrap",
    "get_hostel_service",
    "get_room_service",
    "get_registration_directory",
    "get_allocation_service",
    "get_unassignment_service",
]

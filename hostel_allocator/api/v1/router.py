"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the hostel allocation service
"""
from fastapi import APIRouter

from hostel_allocator.api.v1 import allocations, hostels
from hostel_allocator.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        503: {"description": "Storage Unavailable"},
    }
)

router.include_router(hostels.router)
router.include_router(allocations.router)

logger.debug("API v1 routers registered", extra={"routers": ["hostels", "allocations"]})

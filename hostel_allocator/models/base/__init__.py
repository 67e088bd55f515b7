"""Base model classes and enums."""

from hostel_allocator.models.base.base_model import Base, BaseModel, TimestampModel
from hostel_allocator.models.base.enums import (
    ActivityAction,
    ItemOutcome,
    RegistrationStatus,
    StayType,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "ActivityAction",
    "ItemOutcome",
    "RegistrationStatus",
    "StayType",
]

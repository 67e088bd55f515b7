"""
Enumerations shared by models and schemas.
"""

from enum import Enum


class RegistrationStatus(str, Enum):
    """Review state of a registration."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StayType(str, Enum):
    """Where a registrant intends to stay during the event."""
    ON_CAMPUS = "on-campus"
    OFF_CAMPUS = "off-campus"


class ActivityAction(str, Enum):
    """Activity event types emitted by allocation and unassignment."""
    BED_ASSIGNMENT = "bed_assignment"
    BED_UNASSIGNMENT = "bed_unassignment"


class ItemOutcome(str, Enum):
    """Per-item result of a bulk mutation."""
    SUCCEEDED = "succeeded"
    UNCHANGED = "unchanged"
    FAILED = "failed"

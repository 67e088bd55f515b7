"""
Domain exceptions for hostel, room, bed and allocation operations.

Each carries an ErrorCode and the HTTP status the API answers with.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    HOSTEL_NOT_FOUND = "HOSTEL_NOT_FOUND"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    BED_NOT_FOUND = "BED_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"

    STORAGE_ERROR = "STORAGE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    NO_ELIGIBLE_TARGET = "NO_ELIGIBLE_TARGET"
    ALLOCATION_CONFLICT = "ALLOCATION_CONFLICT"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    HOSTEL_OCCUPIED = "HOSTEL_OCCUPIED"


class BaseAppException(Exception):
    """Root of every domain error; rendered by the API exception handler."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Input rejected before any change was made"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class ResourceNotFoundError(BaseAppException):
    """A hostel, room, bed or registration id that does not exist"""

    def __init__(self, resource_type: str, resource_id: Optional[str], error_code: ErrorCode):
        message = f"{resource_type} {resource_id} does not exist" if resource_id else f"{resource_type} does not exist"
        details = {"resource_type": resource_type, "resource_id": resource_id}
        super().__init__(message, error_code, details, 404)


class HostelNotFoundError(ResourceNotFoundError):
    """No hostel with the given id"""

    def __init__(self, hostel_id: Optional[str] = None):
        super().__init__("Hostel", hostel_id, error_code=ErrorCode.HOSTEL_NOT_FOUND)


class RoomNotFoundError(ResourceNotFoundError):
    """No room with the given id"""

    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room", room_id, error_code=ErrorCode.ROOM_NOT_FOUND)


class BedNotFoundError(ResourceNotFoundError):
    """No bed with the given id"""

    def __init__(self, bed_id: Optional[str] = None):
        super().__init__("Bed", bed_id, error_code=ErrorCode.BED_NOT_FOUND)


class RegistrationNotFoundError(ResourceNotFoundError):
    """No registration with the given id"""

    def __init__(self, registration_id: Optional[str] = None):
        super().__init__(
            "Registration",
            registration_id,
            error_code=ErrorCode.REGISTRATION_NOT_FOUND,
        )


class StorageError(BaseAppException):
    """The database rejected or failed a statement"""

    def __init__(
        self,
        message: str = "Storage operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.STORAGE_ERROR,
        status_code: int = 503
    ):
        details = {
            "operation": operation,
            "table": table
        }
        super().__init__(message, error_code, details, status_code)


class DuplicateEntryError(StorageError):
    """A uniqueness constraint was violated, e.g. a second hostel with the same name"""

    def __init__(
        self,
        message: str = "Duplicate entry",
        field: Optional[str] = None,
        value: Optional[str] = None,
        table: Optional[str] = None
    ):
        super().__init__(
            message,
            operation="insert",
            table=table,
            error_code=ErrorCode.DUPLICATE_ENTRY,
            status_code=409,
        )
        self.details.update({"field": field, "value": value})


class InsufficientCapacityError(BaseAppException):
    """More applicants were selected than beds"""

    def __init__(
        self,
        message: str = "Insufficient capacity",
        requested: Optional[int] = None,
        available: Optional[int] = None
    ):
        details = {
            "requested": requested,
            "available": available,
            "shortfall": (requested - available)
            if requested is not None and available is not None else None,
        }
        super().__init__(message, ErrorCode.INSUFFICIENT_CAPACITY, details, 409)


class NoEligibleTargetError(BaseAppException):
    """
    Raised when a removal finds nothing it is allowed to remove.

    Callers report this as a notice; it is not a hard failure.
    """

    def __init__(
        self,
        message: str = "Nothing eligible for removal",
        target: Optional[str] = None,
        requested: Optional[int] = None
    ):
        details = {"target": target, "requested": requested}
        super().__init__(message, ErrorCode.NO_ELIGIBLE_TARGET, details, 200)


class AllocationConflictError(BaseAppException):
    """The bed is occupied or the registration already holds a bed"""

    def __init__(
        self,
        message: str = "Allocation conflict",
        bed_id: Optional[str] = None,
        registration_id: Optional[str] = None
    ):
        details = {"bed_id": bed_id, "registration_id": registration_id}
        super().__init__(message, ErrorCode.ALLOCATION_CONFLICT, details, 409)


class ConfirmationRequiredError(BaseAppException):
    """An irreversible operation was requested without confirm=true"""

    def __init__(
        self,
        message: str = "This operation is irreversible and must be confirmed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.CONFIRMATION_REQUIRED, details, 409)


class HostelOccupiedError(BaseAppException):
    """Deleting a hostel that still houses someone, without force"""

    def __init__(
        self,
        hostel_id: Optional[str] = None,
        occupied_beds: int = 0
    ):
        message = (
            f"Hostel has {occupied_beds} occupied bed(s); "
            "unassign them first or force the deletion"
        )
        details = {"hostel_id": hostel_id, "occupied_beds": occupied_beds}
        super().__init__(message, ErrorCode.HOSTEL_OCCUPIED, details, 409)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "HostelNotFoundError",
    "RoomNotFoundError",
    "BedNotFoundError",
    "RegistrationNotFoundError",
    "StorageError",
    "DuplicateEntryError",
    "InsufficientCapacityError",
    "NoEligibleTargetError",
    "AllocationConflictError",
    "ConfirmationRequiredError",
    "HostelOccupiedError",
]

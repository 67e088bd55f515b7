"""
Outcome wrapper returned by every service call.

Services never raise domain errors at the API layer; they hand back a
``ServiceResult`` that either carries data or a ``ServiceError`` with the
HTTP status the router should answer with.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from hostel_allocator.core.exceptions import BaseAppException, ErrorCode


class ErrorSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ServiceError:
    """Why a service call was refused, and how the API should report it."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    status_code: int = 500
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "field": self.field,
            "timestamp": self.timestamp.isoformat(),
        }


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Success-or-failure envelope.

    ``metadata`` carries side information for the caller, e.g. a notice that a
    removal found nothing to remove.
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[TData]":
        return cls(is_success=False, error=error, message=error.message)

    @classmethod
    def from_app_exception(
        cls,
        exception: BaseAppException,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> "ServiceResult[TData]":
        """Failure carrying a domain exception's code, details and status."""
        return cls.failure(
            ServiceError(
                code=exception.error_code,
                message=exception.message,
                severity=severity,
                details=exception.details,
                status_code=exception.status_code,
            )
        )

    @classmethod
    def internal_error(
        cls,
        operation: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        """Failure for an unexpected error while performing ``operation``."""
        return cls.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details=details,
                severity=ErrorSeverity.CRITICAL,
            )
        )

    def unwrap(self) -> TData:
        """
        Return the data of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.is_success:
            reason = self.error.message if self.error else "unknown error"
            raise ValueError(f"Cannot unwrap failed result: {reason}")
        return self.data

    def unwrap_or(self, default: TData) -> TData:
        return self.data if self.is_success else default

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        state = "ok" if self.is_success else f"failed {self.error.code.value}"
        return f"<ServiceResult {state}>"


__all__ = [
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]

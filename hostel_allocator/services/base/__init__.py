from hostel_allocator.services.base.base_service import BaseService
from hostel_allocator.services.base.service_result import (
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = ["BaseService", "ErrorSeverity", "ServiceError", "ServiceResult"]

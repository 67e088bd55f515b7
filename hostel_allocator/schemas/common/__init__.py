from hostel_allocator.schemas.common.base import (
    BaseCreateSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from hostel_allocator.schemas.common.bulk import (
    BulkItemResult,
    BulkOperationReport,
    RemovalResult,
)

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BulkItemResult",
    "BulkOperationReport",
    "RemovalResult",
]

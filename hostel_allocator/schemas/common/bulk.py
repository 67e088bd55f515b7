"""
Aggregate reports for bulk mutations and removal notices.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from hostel_allocator.models.base.enums import ItemOutcome
from hostel_allocator.schemas.common.base import BaseSchema

__all__ = ["BulkItemResult", "BulkOperationReport", "RemovalResult"]


class BulkItemResult(BaseSchema):
    """Outcome of one item of a bulk mutation."""

    bed_id: str
    registration_id: Optional[str] = None
    outcome: ItemOutcome
    message: Optional[str] = None
    error_code: Optional[str] = None


class BulkOperationReport(BaseSchema):
    """Continue-on-failure summary of a bulk mutation."""

    total: int = 0
    succeeded: int = 0
    unchanged: int = 0
    failed: int = 0
    items: List[BulkItemResult] = Field(default_factory=list)

    def record(self, item: BulkItemResult) -> None:
        self.items.append(item)
        self.total += 1
        if item.outcome == ItemOutcome.SUCCEEDED:
            self.succeeded += 1
        elif item.outcome == ItemOutcome.UNCHANGED:
            self.unchanged += 1
        else:
            self.failed += 1

    @property
    def has_failures(self) -> bool:
        return self.failed > 0


class RemovalResult(BaseSchema):
    """Result of removing empty rooms or beds."""

    requested: int
    removed: int
    removed_ids: List[str] = Field(default_factory=list)
    removed_numbers: List[str] = Field(default_factory=list)
    notice: Optional[str] = None

# hostel_allocator/services/allocation/unassignment_service.py
"""
Release occupied beds.

Clearing a bed also clears the occupant's cached hostel name in the same
transaction. The unassignment event is emitted only after that commit.
"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings
from hostel_allocator.core.exceptions import (
    BaseAppException,
    BedNotFoundError,
    ErrorCode,
    ValidationError,
)
from hostel_allocator.models.base.enums import ItemOutcome
from hostel_allocator.repositories.registration import RegistrationRepository
from hostel_allocator.repositories.room import BedRepository
from hostel_allocator.schemas.common import BulkItemResult, BulkOperationReport
from hostel_allocator.services.allocation.selection import Selection
from hostel_allocator.services.audit import ActivityDispatcher, ActivityEvent, get_activity_dispatcher
from hostel_allocator.services.base import BaseService, ServiceResult


class UnassignmentService(BaseService):
    """Single and bulk bed release."""

    def __init__(
        self,
        db_session: Session,
        settings: Optional[Settings] = None,
        dispatcher: Optional[ActivityDispatcher] = None,
    ):
        super().__init__(db_session, settings)
        self.beds = BedRepository(db_session)
        self.registrations = RegistrationRepository(db_session)
        self.dispatcher = dispatcher or get_activity_dispatcher()

    def unassign_bed(self, bed_id: str) -> ServiceResult[BulkItemResult]:
        """
        Clear one bed's occupant.

        An already-empty bed is a no-op reported as unchanged.
        """
        try:
            item = self._release(bed_id)
            return ServiceResult.success(item, message=item.message)
        except Exception as e:
            return self._handle_exception(e, "unassign bed", bed_id)

    def unassign_beds(self, bed_ids: Iterable[str]) -> ServiceResult[BulkOperationReport]:
        """
        Clear several beds independently.

        A failure on one bed is recorded and does not undo or stop the others.
        """
        selection = Selection.of(bed_ids)
        if not selection:
            return self._handle_exception(
                ValidationError("Select at least one bed to unassign"), "unassign beds"
            )
        if len(selection) > self.settings.MAX_BULK_OPERATION_SIZE:
            return self._handle_exception(
                ValidationError(
                    f"At most {self.settings.MAX_BULK_OPERATION_SIZE} beds can be unassigned at once"
                ),
                "unassign beds",
            )

        report = BulkOperationReport()
        for bed_id in selection:
            try:
                report.record(self._release(bed_id))
            except BaseAppException as e:
                self._logger.warning(
                    f"Unassignment failed: {e.message}", extra={"bed_id": bed_id}
                )
                report.record(
                    BulkItemResult(
                        bed_id=bed_id,
                        outcome=ItemOutcome.FAILED,
                        message=e.message,
                        error_code=e.error_code.value,
                    )
                )
            except Exception as e:
                self._logger.error(
                    f"Unassignment failed: {e}", exc_info=True, extra={"bed_id": bed_id}
                )
                report.record(
                    BulkItemResult(
                        bed_id=bed_id,
                        outcome=ItemOutcome.FAILED,
                        message=str(e),
                        error_code=ErrorCode.INTERNAL_ERROR.value,
                    )
                )

        self._logger.info(
            "Bulk unassignment finished",
            extra={
                "total": report.total,
                "succeeded": report.succeeded,
                "unchanged": report.unchanged,
                "failed": report.failed,
            },
        )
        return ServiceResult.success(
            report,
            message=f"Unassigned {report.succeeded} of {report.total} bed(s)",
        )

    def _release(self, bed_id: str) -> BulkItemResult:
        bed = self.beds.find_with_location(bed_id)
        if bed is None:
            raise BedNotFoundError(bed_id)
        if bed.registration_id is None:
            return BulkItemResult(
                bed_id=bed_id,
                outcome=ItemOutcome.UNCHANGED,
                message="Bed is already empty",
            )

        registration = bed.registration
        with self.transaction():
            self.beds.set_occupant(bed, None)
            self.registrations.set_hostel_name(registration, None)

        self._logger.info(
            "Bed unassigned",
            extra={"bed_id": bed_id, "registration_id": registration.id},
        )
        self.dispatcher.dispatch(
            ActivityEvent.bed_unassignment(
                registration_id=registration.id,
                application_id=registration.application_id,
                name=registration.name,
            )
        )
        return BulkItemResult(
            bed_id=bed_id,
            registration_id=registration.id,
            outcome=ItemOutcome.SUCCEEDED,
            message="Bed unassigned",
        )

# hostel_allocator/services/allocation/allocation_service.py
"""
Bulk bed allocation.

The whole selection is validated before any write. Each (applicant, bed)
pair is then committed in its own transaction; a failing pair is reported
and the remaining pairs still run.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings
from hostel_allocator.core.exceptions import (
    AllocationConflictError,
    BaseAppException,
    BedNotFoundError,
    DuplicateEntryError,
    ErrorCode,
    RegistrationNotFoundError,
    ValidationError,
)
from hostel_allocator.models.base.enums import ItemOutcome
from hostel_allocator.models.registration import Registration
from hostel_allocator.models.room import Bed
from hostel_allocator.repositories.registration import RegistrationRepository
from hostel_allocator.repositories.room import BedRepository
from hostel_allocator.schemas.allocation import AllocationPair, AllocationPlanResponse
from hostel_allocator.schemas.common import BulkItemResult, BulkOperationReport
from hostel_allocator.services.allocation.planner import (
    AllocationPlan,
    PlannedPair,
    plan_allocation,
)
from hostel_allocator.services.audit import ActivityDispatcher, ActivityEvent, get_activity_dispatcher
from hostel_allocator.services.base import BaseService, ServiceResult


class AllocationService(BaseService):
    """Validate, preview and commit bulk allocations."""

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

    # =========================================================================
    # Planning
    # =========================================================================

    def preview(
        self,
        applicant_ids: Iterable[str],
        bed_ids: Iterable[str],
    ) -> ServiceResult[AllocationPlanResponse]:
        """Validate a selection and return the pairs it would produce, writing nothing."""
        try:
            plan = plan_allocation(
                applicant_ids, bed_ids, max_size=self.settings.MAX_BULK_OPERATION_SIZE
            )
            beds, registrations = self._load(plan)
            return ServiceResult.success(
                AllocationPlanResponse(
                    pairs=[
                        self._describe(pair, beds[pair.bed_id], registrations[pair.registration_id])
                        for pair in plan.pairs
                    ],
                    unused_bed_ids=list(plan.unused_bed_ids),
                )
            )
        except Exception as e:
            return self._handle_exception(e, "plan allocation")

    # =========================================================================
    # Commit
    # =========================================================================

    def allocate(
        self,
        applicant_ids: Iterable[str],
        bed_ids: Iterable[str],
    ) -> ServiceResult[BulkOperationReport]:
        """
        Assign the Nth selected applicant to the Nth selected bed.

        Rejected as a whole, with nothing written, when the selection is
        empty, has more applicants than beds, or names unknown ids. Otherwise
        every pair is attempted and the report lists each outcome. Re-running
        a pair that is already in place is reported as unchanged.
        """
        try:
            plan = plan_allocation(
                applicant_ids, bed_ids, max_size=self.settings.MAX_BULK_OPERATION_SIZE
            )
            beds, registrations = self._load(plan)
        except Exception as e:
            return self._handle_exception(e, "allocate beds")

        report = BulkOperationReport()
        for pair in plan.pairs:
            report.record(
                self._commit_pair(pair, beds[pair.bed_id], registrations[pair.registration_id])
            )

        self._logger.info(
            "Bulk allocation finished",
            extra={
                "total": report.total,
                "succeeded": report.succeeded,
                "unchanged": report.unchanged,
                "failed": report.failed,
            },
        )
        message = (
            f"Assigned {report.succeeded} applicant(s) to beds"
            if not report.has_failures
            else f"Assigned {report.succeeded} of {report.total} applicant(s); {report.failed} failed"
        )
        return ServiceResult.success(report, message=message)

    def _commit_pair(self, pair: PlannedPair, bed: Bed, registration: Registration) -> BulkItemResult:
        try:
            with self.transaction():
                self.db.refresh(bed, with_for_update=True)
                hostel_name = bed.room.hostel.name
                outcome = self._apply_pair(bed, registration, hostel_name)
        except BaseAppException as e:
            self._logger.warning(
                f"Allocation pair failed: {e.message}",
                extra={"bed_id": pair.bed_id, "registration_id": pair.registration_id},
            )
            return BulkItemResult(
                bed_id=pair.bed_id,
                registration_id=pair.registration_id,
                outcome=ItemOutcome.FAILED,
                message=e.message,
                error_code=e.error_code.value,
            )
        except Exception as e:
            self._logger.error(
                f"Allocation pair failed: {e}",
                exc_info=True,
                extra={"bed_id": pair.bed_id, "registration_id": pair.registration_id},
            )
            return BulkItemResult(
                bed_id=pair.bed_id,
                registration_id=pair.registration_id,
                outcome=ItemOutcome.FAILED,
                message=str(e),
                error_code=ErrorCode.INTERNAL_ERROR.value,
            )

        if outcome == ItemOutcome.SUCCEEDED:
            self.dispatcher.dispatch(
                ActivityEvent.bed_assignment(
                    registration_id=registration.id,
                    application_id=registration.application_id,
                    name=registration.name,
                    hostel=hostel_name,
                )
            )
        return BulkItemResult(
            bed_id=pair.bed_id,
            registration_id=pair.registration_id,
            outcome=outcome,
            message=f"Assigned to {hostel_name}" if outcome == ItemOutcome.SUCCEEDED else "Already assigned",
        )

    def _apply_pair(self, bed: Bed, registration: Registration, hostel_name: str) -> ItemOutcome:
        if bed.registration_id == registration.id:
            if registration.hostel_name != hostel_name:
                self.registrations.set_hostel_name(registration, hostel_name)
            return ItemOutcome.UNCHANGED

        if bed.registration_id is not None:
            raise AllocationConflictError(
                "Bed is already occupied",
                bed_id=bed.id,
                registration_id=bed.registration_id,
            )
        held = self.beds.find_by_registration(registration.id)
        if held is not None:
            raise AllocationConflictError(
                f"{registration.name} already occupies another bed",
                bed_id=held.id,
                registration_id=registration.id,
            )
        self._require_eligible(registration)

        try:
            claimed = self.beds.claim(bed, registration.id)
        except DuplicateEntryError as e:
            raise AllocationConflictError(
                f"{registration.name} already occupies another bed",
                bed_id=bed.id,
                registration_id=registration.id,
            ) from e
        if not claimed:
            raise AllocationConflictError(
                "Bed was taken by another allocation",
                bed_id=bed.id,
                registration_id=registration.id,
            )
        self.registrations.set_hostel_name(registration, hostel_name)
        return ItemOutcome.SUCCEEDED

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load(self, plan: AllocationPlan):
        """Load every bed and registration in the plan; unknown ids reject the whole plan."""
        beds: Dict[str, Bed] = {bed.id: bed for bed in self.beds.find_by_ids(plan.bed_ids)}
        registrations: Dict[str, Registration] = {
            reg.id: reg for reg in self.registrations.find_by_ids(plan.registration_ids)
        }
        missing_beds = [bed_id for bed_id in plan.bed_ids if bed_id not in beds]
        if missing_beds:
            raise BedNotFoundError(", ".join(missing_beds))
        missing_regs = [rid for rid in plan.registration_ids if rid not in registrations]
        if missing_regs:
            raise RegistrationNotFoundError(", ".join(missing_regs))
        return beds, registrations

    def _require_eligible(self, registration: Registration) -> None:
        problems: List[str] = []
        if registration.registration_status != self.settings.ELIGIBLE_REGISTRATION_STATUS:
            problems.append(f"status is {registration.registration_status}")
        if registration.stay_type != self.settings.ELIGIBLE_STAY_TYPE:
            problems.append(f"stay type is {registration.stay_type}")
        if problems:
            raise ValidationError(
                f"{registration.name} is not eligible for housing: {', '.join(problems)}",
                field_errors={"applicant_ids": problems},
            )

    @staticmethod
    def _describe(pair: PlannedPair, bed: Bed, registration: Registration) -> AllocationPair:
        room = bed.room
        return AllocationPair(
            registration_id=registration.id,
            application_id=registration.application_id,
            name=registration.name,
            bed_id=bed.id,
            bed_number=bed.bed_number,
            room_id=room.id,
            room_number=room.room_number,
            hostel_id=room.hostel_id,
            hostel_name=room.hostel.name,
        )

# hostel_allocator/services/registration/registration_directory.py
"""
Registration directory.

Read-only view of housing-eligible registrations, the grouped applicant list
built from it, and the repair pass that recomputes every cached hostel name
from the actual bed assignments.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings
from hostel_allocator.models.registration import Registration
from hostel_allocator.repositories.registration import RegistrationRepository
from hostel_allocator.repositories.room import BedRepository
from hostel_allocator.schemas.allocation import (
    ApplicantGroupResponse,
    GroupListResponse,
    GroupMemberResponse,
    HostelNameSyncReport,
)
from hostel_allocator.services.allocation.grouping import (
    Applicant,
    ApplicantGroup,
    build_groups,
    search_groups,
)
from hostel_allocator.services.base import BaseService, ServiceResult


class RegistrationDirectoryService(BaseService):
    """Eligible and available registrants, grouped for selection."""

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session, settings)
        self.registrations = RegistrationRepository(db_session)
        self.beds = BedRepository(db_session)

    def list_eligible(self) -> ServiceResult[List[Registration]]:
        """Approved, on-campus registrations, housed or not."""
        try:
            return ServiceResult.success(
                self.registrations.list_eligible(
                    self.settings.ELIGIBLE_REGISTRATION_STATUS,
                    self.settings.ELIGIBLE_STAY_TYPE,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list eligible registrations")

    def list_available(self) -> ServiceResult[List[Registration]]:
        """Eligible registrations that do not yet occupy a bed."""
        try:
            return ServiceResult.success(
                self.registrations.list_available(
                    self.settings.ELIGIBLE_REGISTRATION_STATUS,
                    self.settings.ELIGIBLE_STAY_TYPE,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list available registrations")

    def list_groups(
        self,
        query: Optional[str] = None,
        include_assigned: bool = False,
        selected_ids: Iterable[str] = (),
    ) -> ServiceResult[GroupListResponse]:
        """
        Group registrants for selection and filter by ``query``.

        By default only unhoused registrants are grouped. With
        ``include_assigned`` housed members are listed too, and a group whose
        members are all housed is shown as disabled.
        """
        try:
            status = self.settings.ELIGIBLE_REGISTRATION_STATUS
            stay_type = self.settings.ELIGIBLE_STAY_TYPE
            if include_assigned:
                registrations = self.registrations.list_eligible(status, stay_type)
            else:
                registrations = self.registrations.list_available(status, stay_type)
            assigned_ids = self.beds.assigned_registration_ids()

            groups = build_groups([Applicant.from_registration(r) for r in registrations])
            groups = search_groups(groups, query)
            selected = set(selected_ids)
            responses = [self._group_view(group, selected, assigned_ids) for group in groups]

            return ServiceResult.success(
                GroupListResponse(
                    query=query,
                    total_groups=len(responses),
                    total_members=sum(len(g.members) for g in responses),
                    groups=responses,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list applicant groups", query)

    def sync_hostel_names(self) -> ServiceResult[HostelNameSyncReport]:
        """
        Recompute every registration's cached hostel name from bed assignments.

        Occupants get their bed's hostel name; everyone else gets none.
        Returns how many rows were corrected.
        """
        try:
            expected = dict(self.beds.occupant_hostel_names())
            candidates = {r.id: r for r in self.registrations.list_with_hostel_name()}
            missing = [rid for rid in expected if rid not in candidates]
            for registration in self.registrations.find_by_ids(missing):
                candidates[registration.id] = registration

            report = HostelNameSyncReport(checked=len(candidates))
            with self.transaction():
                for registration_id, registration in candidates.items():
                    wanted = expected.get(registration_id)
                    if registration.hostel_name == wanted:
                        continue
                    self.registrations.set_hostel_name(registration, wanted, flush=False)
                    report.corrected += 1
                    if wanted is None:
                        report.cleared_count += 1
                    else:
                        report.set_count += 1
                self.registrations.flush()

            self._logger.info("Hostel names synchronized", extra=report.model_dump())
            return ServiceResult.success(
                report, message=f"Corrected {report.corrected} registration(s)"
            )
        except Exception as e:
            return self._handle_exception(e, "synchronize hostel names")

    @staticmethod
    def _group_view(
        group: ApplicantGroup,
        selected: set,
        assigned_ids: set,
    ) -> ApplicantGroupResponse:
        state = group.selection_state(selected, assigned_ids)
        return ApplicantGroupResponse(
            primary_application_id=group.key,
            members=[
                GroupMemberResponse(
                    registration_id=member.registration_id,
                    application_id=member.application_id,
                    name=member.name,
                    is_primary=member is group.primary,
                    is_assigned=member.registration_id in assigned_ids,
                    is_selected=member.registration_id in selected,
                    hostel_name=member.hostel_name,
                )
                for member in group.members
            ],
            unassigned_count=len(group.unassigned_ids(assigned_ids)),
            selection_state=state,
            is_selectable=group.is_selectable(assigned_ids),
        )

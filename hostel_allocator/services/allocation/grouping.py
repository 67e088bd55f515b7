"""
Applicant grouping.

A group is a primary registration plus the dependents whose
``parent_application_id`` names it. Groups are derived on every request and
never stored.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from hostel_allocator.models.registration import Registration

SELECTION_NONE = "none"
SELECTION_PARTIAL = "partial"
SELECTION_FULL = "full"
SELECTION_DISABLED = "disabled"


@dataclass(frozen=True)
class Applicant:
    """Read-only snapshot of the registration fields grouping needs."""

    registration_id: str
    application_id: str
    name: str
    parent_application_id: Optional[str] = None
    hostel_name: Optional[str] = None

    @property
    def is_primary(self) -> bool:
        return not self.parent_application_id

    @classmethod
    def from_registration(cls, registration: Registration) -> "Applicant":
        return cls(
            registration_id=registration.id,
            application_id=registration.application_id,
            name=registration.name,
            parent_application_id=registration.parent_application_id or None,
            hostel_name=registration.hostel_name,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name or application id."""
        needle = query.casefold()
        return needle in self.name.casefold() or needle in self.application_id.casefold()


@dataclass(frozen=True)
class ApplicantGroup:
    """A primary applicant followed by their dependents."""

    primary: Applicant
    dependents: Tuple[Applicant, ...] = ()

    @property
    def key(self) -> str:
        return self.primary.application_id

    @property
    def members(self) -> Tuple[Applicant, ...]:
        return (self.primary,) + self.dependents

    @property
    def member_ids(self) -> Tuple[str, ...]:
        return tuple(member.registration_id for member in self.members)

    def unassigned_ids(self, assigned_ids: Iterable[str] = ()) -> Tuple[str, ...]:
        assigned = set(assigned_ids)
        return tuple(rid for rid in self.member_ids if rid not in assigned)

    def is_selectable(self, assigned_ids: Iterable[str] = ()) -> bool:
        """False once every member is housed."""
        return bool(self.unassigned_ids(assigned_ids))

    def selection_state(
        self,
        selected_ids: Iterable[str] = (),
        assigned_ids: Iterable[str] = (),
    ) -> str:
        """
        How much of the group's unassigned membership is selected.

        Housed members count toward neither side of the comparison.
        """
        unassigned = self.unassigned_ids(assigned_ids)
        if not unassigned:
            return SELECTION_DISABLED
        selected = set(selected_ids)
        chosen = sum(1 for rid in unassigned if rid in selected)
        if chosen == 0:
            return SELECTION_NONE
        if chosen == len(unassigned):
            return SELECTION_FULL
        return SELECTION_PARTIAL

    def matches(self, query: str) -> bool:
        return any(member.matches(query) for member in self.members)


def build_groups(applicants: Sequence[Applicant]) -> List[ApplicantGroup]:
    """
    Partition applicants into groups.

    Every applicant lands in exactly one group. A dependent whose parent is
    not among ``applicants`` becomes a group of its own. Groups are ordered
    by their primary's application id; dependents keep input order.
    """
    primaries = {}
    for applicant in applicants:
        if applicant.is_primary and applicant.application_id not in primaries:
            primaries[applicant.application_id] = (applicant, [])

    standalone: List[ApplicantGroup] = []
    for applicant in applicants:
        if applicant.is_primary:
            if primaries[applicant.application_id][0] is not applicant:
                # Second registration under an application id already seen
                standalone.append(ApplicantGroup(primary=applicant))
            continue
        parent = primaries.get(applicant.parent_application_id)
        if parent is None:
            standalone.append(ApplicantGroup(primary=applicant))
        else:
            parent[1].append(applicant)

    groups = [
        ApplicantGroup(primary=primary, dependents=tuple(dependents))
        for primary, dependents in primaries.values()
    ]
    groups.extend(standalone)
    groups.sort(key=lambda group: (group.key, group.primary.registration_id))
    return groups


def search_groups(groups: Sequence[ApplicantGroup], query: Optional[str]) -> List[ApplicantGroup]:
    """Groups with at least one member whose name or application id contains ``query``."""
    query = (query or "").strip()
    if not query:
        return list(groups)
    return [group for group in groups if group.matches(query)]

"""
Allocation planning.

Turns applicant and bed selections into positional (applicant, bed) pairs
without touching storage, so a plan can be previewed and validated before
anything is written.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from hostel_allocator.core.exceptions import InsufficientCapacityError, ValidationError
from hostel_allocator.services.allocation.selection import Selection


@dataclass(frozen=True)
class PlannedPair:
    registration_id: str
    bed_id: str


@dataclass(frozen=True)
class AllocationPlan:
    pairs: Tuple[PlannedPair, ...]
    unused_bed_ids: Tuple[str, ...] = ()

    @property
    def registration_ids(self) -> Tuple[str, ...]:
        return tuple(pair.registration_id for pair in self.pairs)

    @property
    def bed_ids(self) -> Tuple[str, ...]:
        return tuple(pair.bed_id for pair in self.pairs)


def plan_allocation(
    applicant_ids: Iterable[str],
    bed_ids: Iterable[str],
    max_size: Optional[int] = None,
) -> AllocationPlan:
    """
    Pair the Nth selected applicant with the Nth selected bed.

    Raises:
        ValidationError: either selection is empty or larger than ``max_size``
        InsufficientCapacityError: more applicants than beds
    """
    applicants = applicant_ids if isinstance(applicant_ids, Selection) else Selection.of(applicant_ids)
    beds = bed_ids if isinstance(bed_ids, Selection) else Selection.of(bed_ids)

    if not applicants or not beds:
        raise ValidationError(
            "Select at least one applicant and one bed",
            field_errors={
                key: ["Selection is empty"]
                for key, chosen in (("applicant_ids", applicants), ("bed_ids", beds))
                if not chosen
            },
        )
    if max_size is not None and max(len(applicants), len(beds)) > max_size:
        raise ValidationError(f"At most {max_size} applicants or beds can be allocated at once")
    if len(applicants) > len(beds):
        raise InsufficientCapacityError(
            f"Selected {len(applicants)} applicants but only {len(beds)} beds",
            requested=len(applicants),
            available=len(beds),
        )

    pairs = tuple(
        PlannedPair(registration_id=registration_id, bed_id=bed_id)
        for registration_id, bed_id in zip(applicants, beds)
    )
    return AllocationPlan(pairs=pairs, unused_bed_ids=beds.ids[len(pairs):])

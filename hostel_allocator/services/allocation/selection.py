"""
Operator selections of applicants and beds.

Selections are immutable and remember the order ids were picked in, which is
the order allocation pairs them.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, Tuple

from hostel_allocator.services.allocation.grouping import Applicant, ApplicantGroup


class BedSlot(Protocol):
    id: str

    @property
    def is_occupied(self) -> bool: ...


@dataclass(frozen=True)
class Selection:
    """Ordered set of ids."""

    ids: Tuple[str, ...] = ()

    @classmethod
    def of(cls, ids: Iterable[str]) -> "Selection":
        """Build from any iterable, dropping repeats but keeping first-seen order."""
        return cls(tuple(dict.fromkeys(ids)))

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, item: object) -> bool:
        return item in self.ids

    def add(self, *ids: str) -> "Selection":
        return Selection.of(self.ids + ids)

    def remove(self, *ids: str) -> "Selection":
        dropped = set(ids)
        return Selection(tuple(i for i in self.ids if i not in dropped))

    def toggle(self, item: str) -> "Selection":
        return self.remove(item) if item in self else self.add(item)

    def clear(self) -> "Selection":
        return Selection()


def toggle_bed(selection: Selection, bed: BedSlot) -> Selection:
    """Select or deselect one bed; occupied beds are never selectable."""
    if bed.is_occupied:
        return selection
    return selection.toggle(bed.id)


def toggle_room_empty_beds(selection: Selection, beds: Iterable[BedSlot]) -> Selection:
    """
    Select every empty bed of a room, or deselect them all if they already
    are all selected.
    """
    empty = [bed.id for bed in beds if not bed.is_occupied]
    if not empty:
        return selection
    if all(bed_id in selection for bed_id in empty):
        return selection.remove(*empty)
    return selection.add(*empty)


def toggle_member(
    selection: Selection,
    applicant: Applicant,
    assigned_ids: Iterable[str] = (),
) -> Selection:
    """Select or deselect one applicant; housed applicants cannot be toggled."""
    if applicant.registration_id in set(assigned_ids):
        return selection
    return selection.toggle(applicant.registration_id)


def toggle_group(
    selection: Selection,
    group: ApplicantGroup,
    assigned_ids: Iterable[str] = (),
) -> Selection:
    """
    Select all unassigned members of a group, or deselect them if every one
    is already selected.
    """
    unassigned = group.unassigned_ids(assigned_ids)
    if not unassigned:
        return selection
    if all(rid in selection for rid in unassigned):
        return selection.remove(*unassigned)
    return selection.add(*unassigned)

"""
Allocation planner tests.
"""
import pytest

from hostel_allocator.core.exceptions import InsufficientCapacityError, ValidationError
from hostel_allocator.services.allocation import PlannedPair, Selection, plan_allocation


def test_pairs_positionally():
    plan = plan_allocation(["r1", "r2"], ["b1", "b2", "b3"])

    assert plan.pairs == (PlannedPair("r1", "b1"), PlannedPair("r2", "b2"))
    assert plan.unused_bed_ids == ("b3",)
    assert plan.registration_ids == ("r1", "r2")
    assert plan.bed_ids == ("b1", "b2")


def test_selection_order_is_kept():
    applicants = Selection().add("r2").add("r1")
    beds = Selection().add("b9").add("b1")

    plan = plan_allocation(applicants, beds)

    assert plan.pairs == (PlannedPair("r2", "b9"), PlannedPair("r1", "b1"))


def test_duplicates_are_ignored():
    plan = plan_allocation(["r1", "r1", "r2"], ["b1", "b2"])

    assert plan.registration_ids == ("r1", "r2")


def test_more_applicants_than_beds():
    with pytest.raises(InsufficientCapacityError) as exc:
        plan_allocation(["r1", "r2", "r3"], ["b1"])

    assert exc.value.details == {"requested": 3, "available": 1, "shortfall": 2}


@pytest.mark.parametrize("applicants,beds", [([], ["b1"]), (["r1"], []), ([], [])])
def test_empty_selection_rejected(applicants, beds):
    with pytest.raises(ValidationError):
        plan_allocation(applicants, beds)


def test_oversized_selection_rejected():
    with pytest.raises(ValidationError):
        plan_allocation(["r1", "r2", "r3"], ["b1", "b2", "b3"], max_size=2)

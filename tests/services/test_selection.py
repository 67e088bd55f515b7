"""
Selection toggling tests.
"""
from dataclasses import dataclass

from hostel_allocator.services.allocation import (
    Applicant,
    Selection,
    build_groups,
    toggle_bed,
    toggle_group,
    toggle_member,
    toggle_room_empty_beds,
)


@dataclass
class FakeBed:
    id: str
    registration_id: str = None

    @property
    def is_occupied(self) -> bool:
        return self.registration_id is not None


def test_selection_keeps_first_seen_order():
    selection = Selection.of(["b2", "b1", "b2"])

    assert list(selection) == ["b2", "b1"]
    assert len(selection) == 2
    assert "b1" in selection


def test_toggle_bed():
    bed = FakeBed("b1")

    selected = toggle_bed(Selection(), bed)
    assert list(selected) == ["b1"]
    assert list(toggle_bed(selected, bed)) == []


def test_occupied_bed_is_not_selectable():
    assert list(toggle_bed(Selection(), FakeBed("b1", registration_id="r1"))) == []


def test_room_toggle_selects_only_empty_beds():
    beds = [FakeBed("b1"), FakeBed("b2", registration_id="r1"), FakeBed("b3")]

    selected = toggle_room_empty_beds(Selection(), beds)
    assert list(selected) == ["b1", "b3"]

    assert list(toggle_room_empty_beds(selected, beds)) == []


def test_room_toggle_completes_partial_selection():
    beds = [FakeBed("b1"), FakeBed("b2")]

    selected = toggle_room_empty_beds(Selection.of(["b2"]), beds)

    assert list(selected) == ["b2", "b1"]


def test_member_toggle_skips_assigned():
    member = Applicant("r1", "A-1", "Asha")

    assert list(toggle_member(Selection(), member)) == ["r1"]
    assert list(toggle_member(Selection(), member, assigned_ids={"r1"})) == []


def test_group_toggle():
    group = build_groups([
        Applicant("r1", "A-1", "Asha"),
        Applicant("r2", "A-1-1", "Vikram", parent_application_id="A-1"),
        Applicant("r3", "A-1-2", "Meera", parent_application_id="A-1"),
    ])[0]

    selected = toggle_group(Selection(), group, assigned_ids={"r2"})
    assert list(selected) == ["r1", "r3"]

    assert list(toggle_group(selected, group, assigned_ids={"r2"})) == []


def test_fully_assigned_group_toggle_is_noop():
    group = build_groups([Applicant("r1", "A-1", "Asha")])[0]

    assert list(toggle_group(Selection(), group, assigned_ids={"r1"})) == []

"""
Bulk allocation tests.
"""
from sqlalchemy.orm import sessionmaker

from hostel_allocator.core.exceptions import ErrorCode
from hostel_allocator.core.logging import actor_email
from hostel_allocator.models import Bed, Registration
from hostel_allocator.models.base.enums import ItemOutcome
from hostel_allocator.schemas.hostel import HostelCreate
from hostel_allocator.services.allocation import AllocationService
from hostel_allocator.services.audit import ActivityDispatcher
from hostel_allocator.services.hostel import HostelService


def occupants(db_session):
    db_session.expire_all()
    return {
        bed.id: bed.registration_id
        for bed in db_session.query(Bed).all()
        if bed.registration_id is not None
    }


class TestPreview:

    def test_preview_writes_nothing(self, db_session, make_hostel, make_registration, bed_ids, dispatcher):
        hostel = make_hostel(name="North Block", room_count=1, beds_per_room=3)
        alice = make_registration(name="Alice")
        beds = bed_ids(hostel.id)

        result = AllocationService(db_session, dispatcher=dispatcher).preview([alice.id], beds)

        assert result.is_success
        pair = result.data.pairs[0]
        assert (pair.name, pair.bed_id, pair.hostel_name, pair.room_number) == (
            "Alice", beds[0], "North Block", "1",
        )
        assert result.data.unused_bed_ids == beds[1:]
        assert occupants(db_session) == {}


class TestAllocate:

    def test_allocates_in_selection_order(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher, recorder
    ):
        hostel = make_hostel(name="North Block", room_count=1, beds_per_room=2)
        alice = make_registration(name="Alice")
        bob = make_registration(name="Bob")
        first, second = bed_ids(hostel.id)

        result = AllocationService(db_session, dispatcher=dispatcher).allocate(
            [bob.id, alice.id], [first, second]
        )

        report = result.unwrap()
        assert (report.total, report.succeeded, report.failed) == (2, 2, 0)
        assert occupants(db_session) == {first: bob.id, second: alice.id}
        assert db_session.get(Registration, alice.id).hostel_name == "North Block"
        assert db_session.get(Registration, bob.id).hostel_name == "North Block"
        assert recorder.actions() == ["bed_assignment", "bed_assignment"]
        assert recorder.events[0].target_registration_id == bob.id
        assert recorder.events[0].details == {"name": "Bob", "hostel": "North Block"}

    def test_insufficient_capacity_writes_nothing(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher, recorder
    ):
        hostel = make_hostel(room_count=1, beds_per_room=2)
        applicants = [make_registration().id for _ in range(3)]

        result = AllocationService(db_session, dispatcher=dispatcher).allocate(
            applicants, bed_ids(hostel.id)
        )

        assert not result.is_success
        assert result.error.code == ErrorCode.INSUFFICIENT_CAPACITY
        assert result.error.details["shortfall"] == 1
        assert occupants(db_session) == {}
        assert recorder.events == []

    def test_empty_selection_rejected(self, db_session, make_hostel, bed_ids, dispatcher):
        hostel = make_hostel()

        result = AllocationService(db_session, dispatcher=dispatcher).allocate([], bed_ids(hostel.id))

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert result.error.status_code == 422

    def test_unknown_bed_rejects_whole_batch(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(room_count=1, beds_per_room=1)
        alice = make_registration()
        bob = make_registration()

        result = AllocationService(db_session, dispatcher=dispatcher).allocate(
            [alice.id, bob.id], [bed_ids(hostel.id)[0], "missing"]
        )

        assert result.error.code == ErrorCode.BED_NOT_FOUND
        assert occupants(db_session) == {}

    def test_occupied_bed_fails_only_that_pair(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher, recorder
    ):
        hostel = make_hostel(room_count=1, beds_per_room=3)
        beds = bed_ids(hostel.id)
        service = AllocationService(db_session, dispatcher=dispatcher)
        carol = make_registration(name="Carol")
        service.allocate([carol.id], [beds[1]])
        recorder.events.clear()
        alice = make_registration(name="Alice")
        bob = make_registration(name="Bob")

        report = service.allocate([alice.id, bob.id], [beds[1], beds[2]]).unwrap()

        assert (report.succeeded, report.failed) == (1, 1)
        failed = report.items[0]
        assert failed.outcome == ItemOutcome.FAILED
        assert failed.error_code == ErrorCode.ALLOCATION_CONFLICT.value
        assert occupants(db_session) == {beds[1]: carol.id, beds[2]: bob.id}
        assert db_session.get(Registration, alice.id).hostel_name is None
        assert [e.target_registration_id for e in recorder.events] == [bob.id]

    def test_applicant_already_housed_fails(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(room_count=1, beds_per_room=2)
        first, second = bed_ids(hostel.id)
        alice = make_registration(name="Alice")
        service = AllocationService(db_session, dispatcher=dispatcher)
        service.allocate([alice.id], [first])

        report = service.allocate([alice.id], [second]).unwrap()

        assert report.failed == 1
        assert report.items[0].error_code == ErrorCode.ALLOCATION_CONFLICT.value
        assert occupants(db_session) == {first: alice.id}

    def test_repeat_allocation_is_unchanged(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher, recorder
    ):
        hostel = make_hostel(room_count=1, beds_per_room=1)
        bed = bed_ids(hostel.id)[0]
        alice = make_registration()
        service = AllocationService(db_session, dispatcher=dispatcher)
        service.allocate([alice.id], [bed])

        report = service.allocate([alice.id], [bed]).unwrap()

        assert (report.succeeded, report.unchanged, report.failed) == (0, 1, 0)
        assert len(recorder.events) == 1

    def test_repeat_allocation_repairs_hostel_name(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(name="North Block", room_count=1, beds_per_room=1)
        bed = bed_ids(hostel.id)[0]
        alice = make_registration()
        service = AllocationService(db_session, dispatcher=dispatcher)
        service.allocate([alice.id], [bed])
        alice.hostel_name = "Stale"
        db_session.commit()

        report = service.allocate([alice.id], [bed]).unwrap()

        assert report.unchanged == 1
        db_session.expire_all()
        assert db_session.get(Registration, alice.id).hostel_name == "North Block"

    def test_ineligible_applicant_fails(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(room_count=1, beds_per_room=2)
        pending = make_registration(name="Pending", registration_status="pending")
        offsite = make_registration(name="Offsite", stay_type="off-campus")

        report = AllocationService(db_session, dispatcher=dispatcher).allocate(
            [pending.id, offsite.id], bed_ids(hostel.id)
        ).unwrap()

        assert report.failed == 2
        assert {item.error_code for item in report.items} == {ErrorCode.VALIDATION_ERROR.value}
        assert occupants(db_session) == {}

    def test_each_registration_holds_at_most_one_bed(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(room_count=2, beds_per_room=2)
        beds = bed_ids(hostel.id)
        regs = [make_registration().id for _ in range(3)]
        service = AllocationService(db_session, dispatcher=dispatcher)

        service.allocate(regs, beds[:3])
        service.allocate(regs[:1], beds[3:])

        held = list(occupants(db_session).values())
        assert len(held) == len(set(held)) == 3

    def test_event_carries_actor(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher, recorder
    ):
        hostel = make_hostel(room_count=1, beds_per_room=1)
        alice = make_registration()
        token = actor_email.set("warden@example.org")
        try:
            AllocationService(db_session, dispatcher=dispatcher).allocate(
                [alice.id], bed_ids(hostel.id)
            )
        finally:
            actor_email.reset(token)

        assert recorder.events[0].actor == "warden@example.org"

    def test_failing_handler_does_not_undo_allocation(
        self, db_session, make_hostel, make_registration, bed_ids
    ):
        def broken(event):
            raise RuntimeError("activity store down")

        hostel = make_hostel(room_count=1, beds_per_room=1)
        alice = make_registration()
        bed = bed_ids(hostel.id)[0]

        report = AllocationService(
            db_session, dispatcher=ActivityDispatcher(handlers=[broken])
        ).allocate([alice.id], [bed]).unwrap()

        assert report.succeeded == 1
        assert occupants(db_session) == {bed: alice.id}


class TestConcurrentAllocation:

    def test_bed_filled_by_another_session_is_not_overwritten(self, file_engine, monkeypatch):
        SessionLocal = sessionmaker(bind=file_engine, autoflush=False, expire_on_commit=False)
        first, second = SessionLocal(), SessionLocal()
        try:
            HostelService(first).create_hostel(
                HostelCreate(name="North Block", room_count=1, beds_per_room=1)
            ).unwrap()
            bed_id = first.query(Bed).one().id
            alice, bob = (
                Registration(
                    application_id=f"APP-00{n}",
                    name=name,
                    email=f"{name.lower()}@example.org",
                    registration_status="approved",
                    stay_type="on-campus",
                )
                for n, name in ((1, "Alice"), (2, "Bob"))
            )
            first.add_all([alice, bob])
            first.commit()

            service = AllocationService(first, dispatcher=ActivityDispatcher())
            find_held_bed = service.beds.find_by_registration

            def other_operator_takes_bed(registration_id):
                AllocationService(second, dispatcher=ActivityDispatcher()).allocate(
                    [bob.id], [bed_id]
                ).unwrap()
                return find_held_bed(registration_id)

            monkeypatch.setattr(service.beds, "find_by_registration", other_operator_takes_bed)
            report = service.allocate([alice.id], [bed_id]).unwrap()

            assert (report.succeeded, report.failed) == (0, 1)
            assert report.items[0].error_code == ErrorCode.ALLOCATION_CONFLICT.value
            first.expire_all()
            assert first.get(Bed, bed_id).registration_id == bob.id
            assert first.get(Registration, alice.id).hostel_name is None
            assert first.get(Registration, bob.id).hostel_name == "North Block"
        finally:
            first.close()
            second.close()

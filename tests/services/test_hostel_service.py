"""
Hostel service tests: creation, rename, layout, summary and guarded deletion.
"""
from hostel_allocator.core.exceptions import ErrorCode
from hostel_allocator.models import Bed, Registration, Room
from hostel_allocator.schemas.hostel import HostelCreate, HostelUpdate
from hostel_allocator.services.allocation import AllocationService
from hostel_allocator.services.hostel import HostelService


class TestCreateHostel:

    def test_creates_rooms_and_beds(self, db_session):
        result = HostelService(db_session).create_hostel(
            HostelCreate(name="North Block", room_count=3, beds_per_room=2, washrooms=4)
        )

        assert result.is_success
        summary = result.data
        assert summary.name == "North Block"
        assert summary.room_count == 3
        assert summary.total_beds == 6
        assert summary.free_beds == 6
        assert db_session.query(Room).count() == 3
        assert db_session.query(Bed).count() == 6

    def test_room_numbers_start_at_one(self, make_hostel, layout):
        hostel = make_hostel(room_count=3, beds_per_room=1)

        rooms = layout(hostel.id).rooms
        assert [room.room_number for room in rooms] == ["1", "2", "3"]
        assert all([bed.bed_number for bed in room.beds] == [1] for room in rooms)

    def test_per_room_bed_overrides(self, make_hostel, layout):
        hostel = make_hostel(room_count=3, beds_per_room=2, room_bed_counts={2: 4})

        rooms = layout(hostel.id).rooms
        assert [room.beds_count for room in rooms] == [2, 4, 2]
        assert [len(room.beds) for room in rooms] == [2, 4, 2]

    def test_duplicate_name_rejected(self, db_session, make_hostel):
        make_hostel(name="North Block")

        result = HostelService(db_session).create_hostel(
            HostelCreate(name="North Block", room_count=1, beds_per_room=1)
        )

        assert not result.is_success
        assert result.error.code == ErrorCode.DUPLICATE_ENTRY
        assert result.error.status_code == 409

    def test_blank_name_rejected(self, db_session):
        result = HostelService(db_session).create_hostel(
            HostelCreate(name="   ", room_count=1, beds_per_room=1)
        )

        assert not result.is_success
        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert db_session.query(Room).count() == 0

    def test_default_beds_per_room_from_settings(self, db_session):
        result = HostelService(db_session).create_hostel(
            HostelCreate(name="Annex", room_count=2)
        )

        assert result.is_success
        assert result.data.beds_per_room == 1
        assert result.data.total_beds == 2


class TestUpdateHostel:

    def test_rename_propagates_to_occupants(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(name="North Block", room_count=1, beds_per_room=2)
        alice = make_registration(name="Alice")
        AllocationService(db_session, dispatcher=dispatcher).allocate(
            [alice.id], bed_ids(hostel.id)[:1]
        )

        result = HostelService(db_session).rename_hostel(hostel.id, "South Block")

        assert result.is_success
        assert result.data.name == "South Block"
        db_session.expire_all()
        assert db_session.get(Registration, alice.id).hostel_name == "South Block"

    def test_rename_to_existing_name_rejected(self, db_session, make_hostel):
        make_hostel(name="North Block")
        other = make_hostel(name="South Block")

        result = HostelService(db_session).update_hostel(other.id, HostelUpdate(name="North Block"))

        assert not result.is_success
        assert result.error.code == ErrorCode.DUPLICATE_ENTRY

    def test_update_washrooms(self, db_session, make_hostel):
        hostel = make_hostel(washrooms=1)

        result = HostelService(db_session).update_hostel(hostel.id, HostelUpdate(washrooms=6))

        assert result.is_success
        assert result.data.washrooms == 6
        assert result.data.name == hostel.name

    def test_unknown_hostel(self, db_session):
        result = HostelService(db_session).update_hostel("missing", HostelUpdate(washrooms=2))

        assert not result.is_success
        assert result.error.code == ErrorCode.HOSTEL_NOT_FOUND
        assert result.error.status_code == 404


class TestLayoutAndSummary:

    def test_layout_orders_rooms_numerically(self, db_session, make_hostel, layout):
        hostel = make_hostel(room_count=11, beds_per_room=1)

        numbers = [room.room_number for room in layout(hostel.id).rooms]
        assert numbers == [str(n) for n in range(1, 12)]

    def test_layout_stats_reflect_selection(self, db_session, make_hostel, bed_ids):
        hostel = make_hostel(room_count=1, beds_per_room=3)
        selected = bed_ids(hostel.id)[:2]

        result = HostelService(db_session).get_layout(hostel.id, selected)

        room = result.data.rooms[0]
        assert room.stats.total == 3
        assert room.stats.free == 3
        assert room.stats.selected == 2
        assert [bed.is_selected for bed in room.beds] == [True, True, False]

    def test_summary_totals(self, db_session, make_hostel, make_registration, bed_ids, dispatcher):
        north = make_hostel(name="North Block", room_count=2, beds_per_room=2)
        make_hostel(name="South Block", room_count=1, beds_per_room=3)
        alice = make_registration(name="Alice")
        AllocationService(db_session, dispatcher=dispatcher).allocate(
            [alice.id], bed_ids(north.id)[:1]
        )

        summary = HostelService(db_session).get_occupancy_summary().unwrap()

        assert summary.hostel_count == 2
        assert summary.total_rooms == 3
        assert summary.total_beds == 7
        assert summary.occupied_beds == 1
        assert summary.free_beds == 6
        by_name = {h.name: h for h in summary.hostels}
        assert by_name["North Block"].occupied_beds == 1
        assert by_name["South Block"].occupied_beds == 0

    def test_list_hostels_includes_empty_hostel(self, db_session, make_hostel):
        make_hostel(name="Annex", room_count=0)

        hostels = HostelService(db_session).list_hostels().unwrap()

        assert [(h.name, h.room_count, h.total_beds) for h in hostels] == [("Annex", 0, 0)]


class TestDeleteHostel:

    def test_requires_confirmation(self, db_session, make_hostel):
        hostel = make_hostel()

        result = HostelService(db_session).delete_hostel(hostel.id)

        assert not result.is_success
        assert result.error.code == ErrorCode.CONFIRMATION_REQUIRED
        assert result.error.details["rooms"] == 2
        assert db_session.query(Room).count() == 2

    def test_deletes_rooms_and_beds(self, db_session, make_hostel):
        hostel = make_hostel(room_count=2, beds_per_room=2)

        result = HostelService(db_session).delete_hostel(hostel.id, confirm=True)

        assert result.is_success
        assert result.data.rooms_deleted == 2
        assert result.data.beds_deleted == 4
        assert db_session.query(Room).count() == 0
        assert db_session.query(Bed).count() == 0

    def test_occupied_hostel_needs_force(
        self, db_session, make_hostel, make_registration, bed_ids, dispatcher
    ):
        hostel = make_hostel(room_count=1, beds_per_room=2)
        alice = make_registration(name="Alice")
        AllocationService(db_session, dispatcher=dispatcher).allocate(
            [alice.id], bed_ids(hostel.id)[:1]
        )
        service = HostelService(db_session)

        preview = service.preview_deletion(hostel.id).unwrap()
        assert preview.requires_force
        assert [o.name for o in preview.occupants] == ["Alice"]

        refused = service.delete_hostel(hostel.id, confirm=True)
        assert refused.error.code == ErrorCode.HOSTEL_OCCUPIED
        assert db_session.query(Bed).count() == 2

        forced = service.delete_hostel(hostel.id, confirm=True, force=True)
        assert forced.is_success
        assert forced.data.occupants_released == 1
        db_session.expire_all()
        assert db_session.get(Registration, alice.id).hostel_name is None
        assert db_session.query(Bed).count() == 0

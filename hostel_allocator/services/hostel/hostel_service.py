# hostel_allocator/services/hostel/hostel_service.py
"""
Core hostel service: create, rename, list, occupancy summary, layout and
guarded deletion.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings
from hostel_allocator.core.exceptions import (
    ConfirmationRequiredError,
    DuplicateEntryError,
    HostelNotFoundError,
    HostelOccupiedError,
    ValidationError,
)
from hostel_allocator.models.hostel import Hostel
from hostel_allocator.models.room import Bed, Room
from hostel_allocator.repositories.hostel import HostelRepository
from hostel_allocator.repositories.room import BedRepository, RoomRepository
from hostel_allocator.schemas.hostel import (
    DeletionPreview,
    HostelCreate,
    HostelDeleteResult,
    HostelSummary,
    HostelUpdate,
    OccupancySummary,
    OccupantRef,
)
from hostel_allocator.schemas.room import HostelLayout
from hostel_allocator.services.base import BaseService, ServiceResult
from hostel_allocator.services.hostel.constants import (
    ERROR_HOSTEL_NAME_REQUIRED,
    ERROR_HOSTEL_NAME_TAKEN,
    SUCCESS_HOSTEL_CREATED,
    SUCCESS_HOSTEL_DELETED,
    SUCCESS_HOSTEL_UPDATED,
)
from hostel_allocator.services.hostel.views import hostel_summary, room_view


class HostelService(BaseService):
    """
    Hostel-level inventory operations.

    Creating a hostel creates its rooms and beds in the same transaction, so
    a failure leaves nothing half-built.
    """

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session, settings)
        self.hostels = HostelRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.beds = BedRepository(db_session)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_hostels(self) -> ServiceResult[List[HostelSummary]]:
        try:
            counts = self.hostels.occupancy_counts()
            summaries = [
                hostel_summary(hostel, counts.get(hostel.id))
                for hostel in self.hostels.list_ordered()
            ]
            return ServiceResult.success(summaries)
        except Exception as e:
            return self._handle_exception(e, "list hostels")

    def get_hostel(self, hostel_id: str) -> ServiceResult[HostelSummary]:
        try:
            hostel = self._require_hostel(hostel_id)
            counts = self.hostels.occupancy_counts().get(hostel.id)
            return ServiceResult.success(hostel_summary(hostel, counts))
        except Exception as e:
            return self._handle_exception(e, "get hostel", hostel_id)

    def get_occupancy_summary(self) -> ServiceResult[OccupancySummary]:
        """Per-hostel and global room, bed and occupancy totals."""
        try:
            counts = self.hostels.occupancy_counts()
            summaries = [
                hostel_summary(hostel, counts.get(hostel.id))
                for hostel in self.hostels.list_ordered()
            ]
            total_beds = sum(s.total_beds for s in summaries)
            occupied = sum(s.occupied_beds for s in summaries)
            return ServiceResult.success(
                OccupancySummary(
                    hostel_count=len(summaries),
                    total_rooms=sum(s.room_count for s in summaries),
                    total_beds=total_beds,
                    occupied_beds=occupied,
                    free_beds=total_beds - occupied,
                    hostels=summaries,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "summarize occupancy")

    def get_layout(
        self,
        hostel_id: str,
        selected_bed_ids: Iterable[str] = (),
    ) -> ServiceResult[HostelLayout]:
        """Rooms in numeric order, each with beds in bed-number order and occupants."""
        try:
            hostel = self._require_hostel(hostel_id, with_layout=True)
            selected = set(selected_bed_ids)
            counts = self.hostels.occupancy_counts().get(hostel.id)
            rooms = self.rooms.list_for_hostel(hostel.id)
            return ServiceResult.success(
                HostelLayout(
                    hostel=hostel_summary(hostel, counts),
                    rooms=[room_view(room, selected) for room in rooms],
                )
            )
        except Exception as e:
            return self._handle_exception(e, "load hostel layout", hostel_id)

    # =========================================================================
    # Create / Update
    # =========================================================================

    def create_hostel(self, request: HostelCreate) -> ServiceResult[HostelSummary]:
        """
        Create a hostel with rooms numbered 1..room_count.

        Each room gets ``beds_per_room`` beds unless ``room_bed_counts``
        overrides it.
        """
        try:
            name = self._validated_name(request.name)
            if self.hostels.name_taken(name):
                raise DuplicateEntryError(
                    ERROR_HOSTEL_NAME_TAKEN, field="name", value=name, table="hostels"
                )
            beds_per_room = request.beds_per_room or self.settings.DEFAULT_BEDS_PER_ROOM

            with self.transaction():
                hostel = self.hostels.add(
                    Hostel(
                        name=name,
                        total_rooms=request.room_count,
                        beds_per_room=beds_per_room,
                        washrooms=request.washrooms,
                    )
                )
                bed_total = 0
                for number in range(1, request.room_count + 1):
                    bed_count = request.room_bed_counts.get(number, beds_per_room)
                    room = Room(
                        hostel_id=hostel.id,
                        room_number=str(number),
                        beds_count=bed_count,
                        next_bed_number=bed_count + 1,
                        beds=[Bed(bed_number=n) for n in range(1, bed_count + 1)],
                    )
                    self.rooms.add(room, flush=False)
                    bed_total += bed_count
                self.rooms.flush()

            self._logger.info(
                "Hostel created",
                extra={
                    "hostel_id": hostel.id,
                    "hostel_name": hostel.name,
                    "rooms": request.room_count,
                    "beds": bed_total,
                },
            )
            counts = {"rooms": request.room_count, "beds": bed_total, "occupied": 0}
            return ServiceResult.success(
                hostel_summary(hostel, counts), message=SUCCESS_HOSTEL_CREATED
            )
        except Exception as e:
            return self._handle_exception(e, "create hostel", request.name)

    def update_hostel(self, hostel_id: str, request: HostelUpdate) -> ServiceResult[HostelSummary]:
        """
        Rename a hostel or change its washroom count or default beds-per-room.

        A rename is written through to the cached hostel name of every
        registrant housed there.
        """
        try:
            hostel = self._require_hostel(hostel_id)
            renamed_occupants = 0

            with self.transaction():
                if request.name is not None:
                    name = self._validated_name(request.name)
                    if name != hostel.name:
                        if self.hostels.name_taken(name, exclude_id=hostel.id):
                            raise DuplicateEntryError(
                                ERROR_HOSTEL_NAME_TAKEN, field="name", value=name, table="hostels"
                            )
                        hostel.name = name
                        for bed in self.beds.occupied_in_hostel(hostel.id):
                            bed.registration.hostel_name = name
                            renamed_occupants += 1
                if request.washrooms is not None:
                    hostel.washrooms = request.washrooms
                if request.beds_per_room is not None:
                    hostel.beds_per_room = request.beds_per_room
                self.hostels.flush()

            self._logger.info(
                "Hostel updated",
                extra={
                    "hostel_id": hostel.id,
                    "fields": sorted(request.model_dump(exclude_none=True)),
                    "occupants_renamed": renamed_occupants,
                },
            )
            counts = self.hostels.occupancy_counts().get(hostel.id)
            return ServiceResult.success(
                hostel_summary(hostel, counts), message=SUCCESS_HOSTEL_UPDATED
            )
        except Exception as e:
            return self._handle_exception(e, "update hostel", hostel_id)

    def rename_hostel(self, hostel_id: str, new_name: str) -> ServiceResult[HostelSummary]:
        return self.update_hostel(hostel_id, HostelUpdate(name=new_name))

    # =========================================================================
    # Deletion
    # =========================================================================

    def preview_deletion(self, hostel_id: str) -> ServiceResult[DeletionPreview]:
        try:
            return ServiceResult.success(self._build_preview(self._require_hostel(hostel_id)))
        except Exception as e:
            return self._handle_exception(e, "preview hostel deletion", hostel_id)

    def delete_hostel(
        self,
        hostel_id: str,
        confirm: bool = False,
        force: bool = False,
    ) -> ServiceResult[HostelDeleteResult]:
        """
        Delete a hostel with all of its rooms and beds.

        Requires ``confirm``. A hostel with occupied beds is only deleted when
        ``force`` is also set, in which case the occupants' cached hostel name
        is cleared in the same transaction.
        """
        try:
            hostel = self._require_hostel(hostel_id, with_layout=True)
            preview = self._build_preview(hostel)

            if not confirm:
                raise ConfirmationRequiredError(
                    "Deleting a hostel removes all of its rooms and beds and cannot be undone",
                    details=preview.model_dump(),
                )
            if preview.occupied_beds and not force:
                raise HostelOccupiedError(hostel.id, preview.occupied_beds)

            with self.transaction():
                for bed in self.beds.occupied_in_hostel(hostel.id):
                    bed.registration.hostel_name = None
                    bed.registration_id = None
                self.hostels.delete(hostel)

            self._logger.warning(
                "Hostel deleted",
                extra={
                    "hostel_id": preview.hostel_id,
                    "hostel_name": preview.hostel_name,
                    "rooms": preview.rooms,
                    "beds": preview.beds,
                    "occupants_released": preview.occupied_beds,
                    "forced": force,
                },
            )
            return ServiceResult.success(
                HostelDeleteResult(
                    hostel_id=preview.hostel_id,
                    hostel_name=preview.hostel_name,
                    rooms_deleted=preview.rooms,
                    beds_deleted=preview.beds,
                    occupants_released=preview.occupied_beds,
                ),
                message=SUCCESS_HOSTEL_DELETED,
            )
        except Exception as e:
            return self._handle_exception(e, "delete hostel", hostel_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_hostel(self, hostel_id: str, with_layout: bool = False) -> Hostel:
        if with_layout:
            hostel = self.hostels.find_with_layout(hostel_id)
        else:
            hostel = self.hostels.find_by_id(hostel_id)
        if hostel is None:
            raise HostelNotFoundError(hostel_id)
        return hostel

    @staticmethod
    def _validated_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(
                ERROR_HOSTEL_NAME_REQUIRED,
                field_errors={"name": [ERROR_HOSTEL_NAME_REQUIRED]},
            )
        return name

    def _build_preview(self, hostel: Hostel) -> DeletionPreview:
        counts = self.hostels.occupancy_counts().get(
            hostel.id, {"rooms": 0, "beds": 0, "occupied": 0}
        )
        occupants = [
            OccupantRef(
                registration_id=bed.registration.id,
                application_id=bed.registration.application_id,
                name=bed.registration.name,
                bed_id=bed.id,
            )
            for bed in self.beds.occupied_in_hostel(hostel.id)
        ]
        return DeletionPreview(
            hostel_id=hostel.id,
            hostel_name=hostel.name,
            rooms=counts["rooms"],
            beds=counts["beds"],
            occupied_beds=counts["occupied"],
            occupants=occupants,
            requires_force=counts["occupied"] > 0,
        )

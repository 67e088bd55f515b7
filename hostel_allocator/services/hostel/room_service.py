# hostel_allocator/services/hostel/room_service.py
"""
Room and bed structural operations.

Every change to a room's bed count is mirrored by creating or deleting bed
rows in the same transaction, so ``Room.beds_count`` always equals the
number of beds in the room.
"""

from typing import List, Optional, Sequence, TypeVar

from sqlalchemy.orm import Session

from hostel_allocator.config.settings import Settings
from hostel_allocator.core.exceptions import (
    AllocationConflictError,
    BedNotFoundError,
    DuplicateEntryError,
    HostelNotFoundError,
    NoEligibleTargetError,
    RegistrationNotFoundError,
    RoomNotFoundError,
    ValidationError,
)
from hostel_allocator.models.room import Bed, Room
from hostel_allocator.repositories.hostel import HostelRepository
from hostel_allocator.repositories.registration import RegistrationRepository
from hostel_allocator.repositories.room import BedRepository, RoomRepository
from hostel_allocator.schemas.common import RemovalResult
from hostel_allocator.schemas.room import (
    AddRoomsRequest,
    BedResponse,
    BedsAdded,
    RoomsAdded,
)
from hostel_allocator.services.base import BaseService, ServiceResult
from hostel_allocator.services.hostel.constants import (
    NOTICE_NO_EMPTY_BEDS,
    NOTICE_NO_EMPTY_ROOMS,
    NOTICE_PARTIAL_REMOVAL,
    SUCCESS_BED_ASSIGNED,
    SUCCESS_BED_CLEARED,
    SUCCESS_BEDS_ADDED,
    SUCCESS_BEDS_REMOVED,
    SUCCESS_ROOMS_ADDED,
    SUCCESS_ROOMS_REMOVED,
)
from hostel_allocator.services.hostel.views import bed_view, room_view

T = TypeVar("T")


def take_for_removal(candidates: Sequence[T], count: int, target: str, notice: str) -> List[T]:
    """Up to ``count`` candidates; raises NoEligibleTargetError when there are none."""
    if not candidates:
        raise NoEligibleTargetError(notice, target=target, requested=count)
    return list(candidates[:count])


class RoomService(BaseService):
    """Add and remove rooms and beds, and set individual bed occupants."""

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session, settings)
        self.hostels = HostelRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.beds = BedRepository(db_session)
        self.registrations = RegistrationRepository(db_session)

    # =========================================================================
    # Rooms
    # =========================================================================

    def add_rooms(self, hostel_id: str, request: AddRoomsRequest) -> ServiceResult[RoomsAdded]:
        """
        Append rooms numbered after the hostel's highest room number.

        New rooms get the hostel's default beds-per-room unless
        ``request.bed_counts`` lists a count for each.
        """
        try:
            hostel = self.hostels.find_by_id(hostel_id)
            if hostel is None:
                raise HostelNotFoundError(hostel_id)

            bed_counts = request.bed_counts or [hostel.beds_per_room] * request.count
            start = self.rooms.max_room_number(hostel.id) + 1

            with self.transaction():
                created = []
                for offset, bed_count in enumerate(bed_counts):
                    room = Room(
                        hostel_id=hostel.id,
                        room_number=str(start + offset),
                        beds_count=bed_count,
                        next_bed_number=bed_count + 1,
                        beds=[Bed(bed_number=n) for n in range(1, bed_count + 1)],
                    )
                    self.rooms.add(room, flush=False)
                    created.append(room)
                hostel.total_rooms += request.count
                self.rooms.flush()

            beds_created = sum(bed_counts)
            self._logger.info(
                "Rooms added",
                extra={
                    "hostel_id": hostel.id,
                    "rooms_added": request.count,
                    "first_room_number": start,
                    "beds_created": beds_created,
                },
            )
            return ServiceResult.success(
                RoomsAdded(
                    hostel_id=hostel.id,
                    rooms=[room_view(room) for room in created],
                    beds_created=beds_created,
                ),
                message=SUCCESS_ROOMS_ADDED,
            )
        except Exception as e:
            return self._handle_exception(e, "add rooms", hostel_id)

    def remove_empty_rooms(self, hostel_id: str, count: int) -> ServiceResult[RemovalResult]:
        """
        Delete up to ``count`` rooms that have no occupied bed.

        Highest-numbered empty rooms go first. Finding none is reported as a
        notice on a successful result, not as a failure.
        """
        try:
            self._require_positive(count)
            hostel = self.hostels.find_by_id(hostel_id)
            if hostel is None:
                raise HostelNotFoundError(hostel_id)

            try:
                doomed = take_for_removal(
                    self.rooms.find_empty_rooms(hostel.id), count, "rooms", NOTICE_NO_EMPTY_ROOMS
                )
            except NoEligibleTargetError as notice:
                return self._notice(notice, count)

            removed_ids = [room.id for room in doomed]
            removed_numbers = [room.room_number for room in doomed]
            with self.transaction():
                for room in doomed:
                    self.rooms.delete(room, flush=False)
                hostel.total_rooms = max(hostel.total_rooms - len(doomed), 0)
                self.rooms.flush()

            self._logger.info(
                "Empty rooms removed",
                extra={
                    "hostel_id": hostel.id,
                    "requested": count,
                    "removed": len(doomed),
                    "room_numbers": removed_numbers,
                },
            )
            return ServiceResult.success(
                RemovalResult(
                    requested=count,
                    removed=len(doomed),
                    removed_ids=removed_ids,
                    removed_numbers=removed_numbers,
                    notice=self._partial_notice(len(doomed), count),
                ),
                message=SUCCESS_ROOMS_REMOVED,
            )
        except Exception as e:
            return self._handle_exception(e, "remove empty rooms", hostel_id)

    # =========================================================================
    # Beds
    # =========================================================================

    def add_beds(self, room_id: str, count: int) -> ServiceResult[BedsAdded]:
        """
        Append beds numbered from the room's high-water mark.

        Numbers freed by removing beds are never handed out again.
        """
        try:
            self._require_positive(count)
            room = self._require_room(room_id)
            start = max(room.next_bed_number, self.beds.max_bed_number(room.id) + 1)

            with self.transaction():
                new_beds = [Bed(room_id=room.id, bed_number=start + i) for i in range(count)]
                self.beds.add_all(new_beds, flush=False)
                room.beds_count += count
                room.next_bed_number = start + count
                self.beds.flush()

            self._logger.info(
                "Beds added",
                extra={"room_id": room.id, "beds_added": count, "first_bed_number": start},
            )
            return ServiceResult.success(
                BedsAdded(
                    room_id=room.id,
                    bed_ids=[bed.id for bed in new_beds],
                    bed_numbers=[bed.bed_number for bed in new_beds],
                ),
                message=SUCCESS_BEDS_ADDED,
            )
        except Exception as e:
            return self._handle_exception(e, "add beds", room_id)

    def remove_empty_beds(self, room_id: str, count: int) -> ServiceResult[RemovalResult]:
        """Delete up to ``count`` unoccupied beds, highest bed number first."""
        try:
            self._require_positive(count)
            room = self._require_room(room_id)

            try:
                doomed = take_for_removal(
                    self.beds.find_empty_in_room(room.id), count, "beds", NOTICE_NO_EMPTY_BEDS
                )
            except NoEligibleTargetError as notice:
                return self._notice(notice, count)

            removed_ids = [bed.id for bed in doomed]
            removed_numbers = [str(bed.bed_number) for bed in doomed]
            with self.transaction():
                for bed in doomed:
                    self.beds.delete(bed, flush=False)
                room.beds_count = max(room.beds_count - len(doomed), 0)
                self.beds.flush()

            self._logger.info(
                "Empty beds removed",
                extra={
                    "room_id": room.id,
                    "requested": count,
                    "removed": len(doomed),
                    "bed_numbers": removed_numbers,
                },
            )
            return ServiceResult.success(
                RemovalResult(
                    requested=count,
                    removed=len(doomed),
                    removed_ids=removed_ids,
                    removed_numbers=removed_numbers,
                    notice=self._partial_notice(len(doomed), count),
                ),
                message=SUCCESS_BEDS_REMOVED,
            )
        except Exception as e:
            return self._handle_exception(e, "remove empty beds", room_id)

    def assign_bed(self, bed_id: str, registration_id: Optional[str]) -> ServiceResult[BedResponse]:
        """
        Set or clear the occupant of a single bed.

        The new occupant's hostel name is written in the same transaction and a
        displaced occupant's is cleared. The storage constraint refuses a
        registration that already occupies another bed.
        """
        try:
            bed = self.beds.find_with_location(bed_id)
            if bed is None:
                raise BedNotFoundError(bed_id)
            occupant = None
            if registration_id is not None:
                occupant = self.registrations.find_by_id(registration_id)
                if occupant is None:
                    raise RegistrationNotFoundError(registration_id)
            previous = bed.registration

            try:
                with self.transaction():
                    if previous is not None and previous.id != registration_id:
                        previous.hostel_name = None
                    if occupant is not None:
                        occupant.hostel_name = bed.room.hostel.name
                    self.beds.set_occupant(bed, registration_id)
            except DuplicateEntryError as e:
                raise AllocationConflictError(
                    "Registration already occupies another bed",
                    bed_id=bed_id,
                    registration_id=registration_id,
                ) from e

            self._logger.info(
                "Bed occupant set",
                extra={"bed_id": bed.id, "registration_id": registration_id},
            )
            return ServiceResult.success(
                bed_view(bed),
                message=SUCCESS_BED_ASSIGNED if registration_id else SUCCESS_BED_CLEARED,
            )
        except Exception as e:
            return self._handle_exception(e, "assign bed", bed_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _require_positive(count: int) -> None:
        if count < 1:
            raise ValidationError("Count must be at least 1", field_errors={"count": ["must be >= 1"]})

    def _require_room(self, room_id: str) -> Room:
        room = self.rooms.find_with_beds(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _notice(self, notice: NoEligibleTargetError, count: int) -> ServiceResult[RemovalResult]:
        self._logger.info(notice.message, extra=notice.details)
        return ServiceResult.success(
            RemovalResult(requested=count, removed=0, notice=notice.message),
            message=notice.message,
            metadata={"notice": notice.to_dict()["error"]},
        )

    @staticmethod
    def _partial_notice(removed: int, requested: int) -> Optional[str]:
        if removed < requested:
            return NOTICE_PARTIAL_REMOVAL.format(removed=removed, requested=requested)
        return None

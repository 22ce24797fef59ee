from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..common.validators import parse_capacity, require_non_empty
from ..core.enums import LookupCategory, LookupGroup, Role, TransferStatus, UserStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..lookup.model import LookupRecord
from ..lookup.repository import LookupRepository
from ..notifications.model import DeliveryReport
from ..notifications.service import NotificationDispatcher
from ..transfers.repository import TransferRepository
from ..users.repository import UserRepository
from .occupancy import ensure_room_has_space, is_full, require_room

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailableFloors:
    floors: Sequence[LookupRecord]
    rooms_by_floor: Dict[int, List[LookupRecord]]

    def to_dict(self) -> dict:
        return {
            "available_floors": [f.to_dict() for f in self.floors],
            "floor_to_rooms": {str(k): [r.to_dict() for r in v] for k, v in self.rooms_by_floor.items()},
        }


@dataclass(frozen=True)
class AssignmentResult:
    user_id: int
    room_id: int
    record_id: int
    delivery: DeliveryReport


class RoomService:
    def __init__(
        self,
        lookup: LookupRepository,
        users: UserRepository,
        transfers: TransferRepository,
        notifier: NotificationDispatcher,
    ):
        self._lookup = lookup
        self._users = users
        self._transfers = transfers
        self._notifier = notifier

    # -------- read side --------
    def list_floors(self) -> Sequence[LookupRecord]:
        return self._lookup.list_by_category(LookupCategory.FLOOR)

    def list_rooms(self, floor_id: int) -> list[dict]:
        rooms = self._lookup.list_by_category(LookupCategory.ROOM, parent_id=int(floor_id))
        occupancy = self._users.occupancy_by_room()
        out: list[dict] = []
        for room in rooms:
            used = occupancy.get(room.lookup_id, 0)
            out.append(
                {
                    **room.to_dict(),
                    "capacity": room.capacity,
                    "occupancy": used,
                    "is_full": is_full(room, used),
                }
            )
        return out

    def list_users_in_room(self, room_id: Optional[int]) -> list[dict]:
        if not room_id:
            raise ValidationError("Room ID is required")
        users = self._users.list_by_room(int(room_id), status=UserStatus.ACTIVE)
        if not users:
            logger.info("No active users found for room %s", room_id)
        return [{"id": u.user_id, "name": u.name, "room_id": u.room_id} for u in users]

    def get_room_capacity(self, room_id: Optional[int]) -> Optional[int]:
        if not room_id:
            raise ValidationError("Room ID is required")
        room = self._lookup.get_by_id(int(room_id))
        if not room or room.category != LookupCategory.ROOM:
            logger.warning("No capacity found for room %s", room_id)
            return None
        return room.parsed_capacity

    def list_unassigned_staff(self) -> list[dict]:
        users = self._users.list_without_room(role=Role.STAFF, status=UserStatus.ACTIVE)
        return [{"id": u.user_id, "name": u.name, "email": u.email, "phone_no": u.phone_no} for u in users]

    def _available_rooms(self, rooms: Sequence[LookupRecord]) -> list[LookupRecord]:
        occupancy = self._users.occupancy_by_room()
        return [r for r in rooms if not is_full(r, occupancy.get(r.lookup_id, 0))]

    def list_available_floors(self) -> AvailableFloors:
        floors = self._lookup.list_by_category(LookupCategory.FLOOR)
        rooms = self._available_rooms(self._lookup.list_by_category(LookupCategory.ROOM))

        rooms_by_floor: Dict[int, List[LookupRecord]] = {}
        for room in rooms:
            if room.parent_id is None:
                continue
            rooms_by_floor.setdefault(int(room.parent_id), []).append(room)

        return AvailableFloors(
            floors=[f for f in floors if f.lookup_id in rooms_by_floor],
            rooms_by_floor=rooms_by_floor,
        )

    def list_available_rooms(self, floor_id: int) -> list[LookupRecord]:
        return self._available_rooms(self._lookup.list_by_category(LookupCategory.ROOM, parent_id=int(floor_id)))

    # -------- admin side --------
    def add_room(self, *, current_role: Role, name: str, floor_id: int, capacity) -> Optional[LookupRecord]:
        """Create a room on a floor; None when the name is already taken."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        name = require_non_empty(name, "Room name")
        capacity_n = parse_capacity(capacity)

        floor = self._lookup.get_by_id(int(floor_id))
        if not floor or floor.category != LookupCategory.FLOOR:
            raise NotFoundError("Floor not found")

        if self._lookup.get_by_name(name):
            logger.info("Room name %r already exists; not adding", name)
            return None

        room_id = self._lookup.create(
            name=name,
            description=str(capacity_n),
            group=LookupGroup.LOCATION.value,
            category=LookupCategory.ROOM,
            parent_id=floor.lookup_id,
        )
        logger.info("Room %s (%s) added on floor %s", room_id, name, floor.lookup_id)
        return self._lookup.get_by_id(room_id)

    def edit_room(
        self,
        *,
        current_role: Role,
        room_id: int,
        name: Optional[str] = None,
        capacity=None,
    ) -> LookupRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        room = require_room(self._lookup, room_id)

        new_description: Optional[str] = None
        if capacity is not None and str(capacity).strip() != "":
            capacity_n = parse_capacity(capacity)
            staff_count = self._users.count_in_room(room.lookup_id, role=Role.STAFF)
            if staff_count > capacity_n:
                raise ValidationError(
                    f"Room {room.name} has {staff_count} staff, please enter capacity more than current staff reside"
                )
            new_description = str(capacity_n)

        new_name = name.strip() if name and name.strip() and name.strip() != room.name else None
        if new_name:
            taken = self._lookup.get_by_name(new_name)
            if taken and taken.lookup_id != room.lookup_id:
                raise ValidationError(f"Room name {new_name} is already taken")

        if not self._lookup.update(room.lookup_id, name=new_name, description=new_description):
            raise ValidationError("Failed to update room")
        return self._lookup.get_by_id(room.lookup_id) or room

    def assign_room(self, *, current_role: Role, admin_user_id: int, user_id: int, room_id: int) -> AssignmentResult:
        """Give a room to a user that has none (status `assigned`)."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise ValidationError("Cannot assign a room to an inactive user")
        if user.room_id:
            raise ValidationError("User already has a room; use a transfer instead")

        room = ensure_room_has_space(self._lookup, self._users, room_id)

        if not self._users.set_room(user.user_id, room.lookup_id):
            raise ValidationError("Failed to assign room")

        record_id = self._transfers.create(
            transfer_room_id=room.lookup_id,
            current_room_id=None,
            status=TransferStatus.ASSIGNED,
            reason="N/A",
            request_by=user.user_id,
            processed_by=int(admin_user_id),
        )
        logger.info("User %s assigned to room %s by admin %s (record %s)", user.user_id, room.lookup_id, admin_user_id, record_id)

        delivery = self._notifier.notify_room_assignment(user, room_name=room.name)
        return AssignmentResult(user_id=user.user_id, room_id=room.lookup_id, record_id=record_id, delivery=delivery)

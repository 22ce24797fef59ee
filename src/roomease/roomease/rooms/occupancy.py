from __future__ import annotations

from ..core.enums import LookupCategory
from ..core.exceptions import CapacityError, NotFoundError
from ..lookup.model import LookupRecord
from ..lookup.repository import LookupRepository
from ..users.repository import UserRepository


def is_full(room: LookupRecord, occupancy: int) -> bool:
    return occupancy >= room.capacity


def require_room(lookup: LookupRepository, room_id: int) -> LookupRecord:
    room = lookup.get_by_id(int(room_id))
    if not room or room.category != LookupCategory.ROOM:
        raise NotFoundError("Room not found")
    return room


def ensure_room_has_space(lookup: LookupRepository, users: UserRepository, room_id: int) -> LookupRecord:
    """Load a room and fail when it cannot take one more occupant.

    Read-then-write: callers move the user right after this check, which keeps
    the window small but does not close it.
    """
    room = require_room(lookup, room_id)
    occupancy = users.count_in_room(room.lookup_id)
    if is_full(room, occupancy):
        raise CapacityError(f"Room {room.name} is full ({occupancy}/{room.capacity})")
    return room

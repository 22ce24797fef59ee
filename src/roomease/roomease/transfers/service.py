"""Room-transfer workflow.

    submit_request -> pending -> approve -> approved (requester moved)
                              -> reject  -> rejected
    transfer_staff ----------------------> transfer (admin moves a user directly)

Direct assignment of a room to a user without one (`assigned`) lives in
RoomService.assign_room.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import format_date
from ..common.validators import require_non_empty
from ..core.constants import NOT_AVAILABLE
from ..core.enums import Role, TransferStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..lookup.repository import LookupRepository
from ..notifications.model import DeliveryReport
from ..notifications.service import NotificationDispatcher
from ..rooms.occupancy import ensure_room_has_space
from ..users.model import User
from ..users.repository import UserRepository
from .model import TransferRecord
from .repository import TransferRepository

logger = logging.getLogger(__name__)

HISTORY_STATUSES = (TransferStatus.PENDING, TransferStatus.REJECTED, TransferStatus.APPROVED)


@dataclass(frozen=True)
class TransferOutcome:
    record: TransferRecord
    delivery: DeliveryReport


class TransferService:
    def __init__(
        self,
        transfers: TransferRepository,
        users: UserRepository,
        lookup: LookupRepository,
        notifier: NotificationDispatcher,
    ):
        self._transfers = transfers
        self._users = users
        self._lookup = lookup
        self._notifier = notifier

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _require_record(self, record_id: int) -> TransferRecord:
        record = self._transfers.get(int(record_id))
        if not record:
            raise NotFoundError("Transfer request not found")
        return record

    def _room_name(self, room_id: Optional[int]) -> Optional[str]:
        if not room_id:
            return None
        room = self._lookup.get_by_id(room_id)
        return room.name if room else None

    # -------- request path --------
    def has_pending_request(self, user_id: int) -> bool:
        return self._transfers.has_pending(int(user_id))

    def submit_request(
        self,
        *,
        current_role: Role,
        user_id: int,
        transfer_room_id: int,
        reason: str,
    ) -> TransferOutcome:
        if current_role not in {Role.STAFF, Role.STUDENT}:
            raise AuthorizationError("Only staff can request a room change")

        reason = require_non_empty(reason, "Reason")
        user = self._require_user(user_id)
        if not user.is_active:
            raise ValidationError("Inactive users cannot request a room change")
        if self._transfers.has_pending(user.user_id):
            raise ValidationError("You already have a pending request")
        if user.room_id and int(user.room_id) == int(transfer_room_id):
            raise ValidationError("You are already in this room")

        room = ensure_room_has_space(self._lookup, self._users, transfer_room_id)

        record_id = self._transfers.create(
            transfer_room_id=room.lookup_id,
            current_room_id=user.room_id,
            status=TransferStatus.PENDING,
            reason=reason,
            request_by=user.user_id,
            processed_by=None,
        )
        logger.info("Transfer request %s submitted by user %s for room %s", record_id, user.user_id, room.lookup_id)

        delivery = self._notifier.notify_staff_request(
            user,
            current_room_name=self._room_name(user.room_id),
            requested_room_name=room.name,
        )
        return TransferOutcome(record=self._require_record(record_id), delivery=delivery)

    def approve(self, *, current_role: Role, admin_user_id: int, record_id: int) -> TransferOutcome:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        record = self._require_record(record_id)
        if not record.is_pending:
            raise ValidationError("Request has already been processed")

        requester = self._require_user(record.request_by)
        if not requester.is_active:
            raise ValidationError("Requester is no longer active; reject the request instead")
        room = ensure_room_has_space(self._lookup, self._users, record.transfer_room_id)

        # The pending check and the status change are one conditional update;
        # the user only moves once this admin owns the decision.
        if not self._transfers.decide(
            record_id=record.record_id,
            status=TransferStatus.APPROVED,
            processed_by=int(admin_user_id),
        ):
            raise ValidationError("Request has already been processed")
        if not self._users.set_room(requester.user_id, room.lookup_id):
            raise ValidationError("Failed to move user to the requested room")
        logger.info("Transfer request %s approved by admin %s", record.record_id, admin_user_id)

        delivery = self._notifier.notify_transfer_outcome(
            requester,
            current_room_name=self._room_name(record.current_room_id),
            transfer_room_name=room.name,
            status=TransferStatus.APPROVED,
        )
        return TransferOutcome(record=self._require_record(record.record_id), delivery=delivery)

    def reject(self, *, current_role: Role, admin_user_id: int, record_id: int) -> TransferOutcome:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        record = self._require_record(record_id)
        if not record.is_pending:
            raise ValidationError("Request has already been processed")

        requester = self._require_user(record.request_by)
        if not self._transfers.decide(
            record_id=record.record_id,
            status=TransferStatus.REJECTED,
            processed_by=int(admin_user_id),
        ):
            raise ValidationError("Request has already been processed")
        logger.info("Transfer request %s rejected by admin %s", record.record_id, admin_user_id)

        delivery = self._notifier.notify_transfer_outcome(
            requester,
            current_room_name=self._room_name(record.current_room_id),
            transfer_room_name=self._room_name(record.transfer_room_id) or NOT_AVAILABLE,
            status=TransferStatus.REJECTED,
        )
        return TransferOutcome(record=self._require_record(record.record_id), delivery=delivery)

    # -------- direct path --------
    def transfer_staff(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_id: int,
        room_id: int,
        reason: str = "",
    ) -> TransferOutcome:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self._require_user(user_id)
        if not user.is_active:
            raise ValidationError("Cannot transfer an inactive user")
        if not user.room_id:
            raise ValidationError("User has no room yet; assign a room instead")
        if int(user.room_id) == int(room_id):
            raise ValidationError("User is already in this room")

        room = ensure_room_has_space(self._lookup, self._users, room_id)
        reason = (reason or "").strip()

        if not self._users.set_room(user.user_id, room.lookup_id):
            raise ValidationError("Failed to move user to the new room")
        record_id = self._transfers.create(
            transfer_room_id=room.lookup_id,
            current_room_id=user.room_id,
            status=TransferStatus.TRANSFER,
            reason=reason,
            request_by=user.user_id,
            processed_by=int(admin_user_id),
        )
        logger.info("User %s transferred from room %s to %s (record %s)", user.user_id, user.room_id, room.lookup_id, record_id)

        delivery = self._notifier.notify_transfer(
            user,
            current_room_name=self._room_name(user.room_id) or NOT_AVAILABLE,
            new_room_name=room.name,
            reason=reason or None,
        )
        return TransferOutcome(record=self._require_record(record_id), delivery=delivery)

    # -------- listings --------
    def list_by_status(self, status: TransferStatus) -> list[dict]:
        records = self._transfers.list_by_status(status)
        if not records:
            return []

        users = {u.user_id: u for u in self._users.get_many([r.request_by for r in records])}
        faculties = {
            f.lookup_id: f for f in self._lookup.get_many([u.faculty_id for u in users.values() if u.faculty_id])
        }
        rooms = {
            r.lookup_id: r
            for r in self._lookup.get_many(
                [x.current_room_id for x in records] + [x.transfer_room_id for x in records]
            )
        }

        out: list[dict] = []
        for record in records:
            user = users.get(record.request_by)
            faculty = faculties.get(user.faculty_id) if user and user.faculty_id else None
            current_room = rooms.get(record.current_room_id)
            requested_room = rooms.get(record.transfer_room_id)
            out.append(
                {
                    "id": record.record_id,
                    "name": user.name if user else "Unknown",
                    "phone_no": (user.phone_no if user else None) or "No phone provided",
                    "email": (user.email if user else None) or "No email provided",
                    "department": (faculty.description if faculty else None) or "No department provided",
                    "current_room": current_room.name if current_room else "No current room provided",
                    "requested_room": requested_room.name if requested_room else "No requested room provided",
                    "reason": record.reason or "No reason provided",
                    "date": format_date(record.created_at),
                }
            )
        return out

    def request_history(self, user_id: int) -> list[dict]:
        records: Sequence[TransferRecord] = self._transfers.list_for_user(int(user_id), statuses=HISTORY_STATUSES)
        rooms = {
            r.lookup_id: r
            for r in self._lookup.get_many(
                [x.current_room_id for x in records] + [x.transfer_room_id for x in records]
            )
        }
        return [
            {
                "id": record.record_id,
                "current_room": rooms[record.current_room_id].name if record.current_room_id in rooms else NOT_AVAILABLE,
                "requested_room": rooms[record.transfer_room_id].name if record.transfer_room_id in rooms else NOT_AVAILABLE,
                "reason": record.reason or "No reason provided",
                "status": record.status.value,
                "created": format_date(record.created_at),
            }
            for record in records
        ]

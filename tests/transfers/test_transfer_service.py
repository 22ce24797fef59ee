from __future__ import annotations

import pytest

from src.roomease.roomease.core.enums import Role, TransferStatus, UserStatus
from src.roomease.roomease.core.exceptions import (
    AuthorizationError,
    CapacityError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import FakeSms, ROOM_A, ROOM_B, ROOM_C, World, make_user


def test_submit_request_creates_pending_record_and_notifies_admins(world):
    svc = world.container.transfer_service

    outcome = svc.submit_request(current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_B, reason=" closer to lab ")

    assert outcome.record.status == TransferStatus.PENDING
    assert outcome.record.current_room_id == ROOM_A
    assert outcome.record.reason == "closer to lab"
    assert svc.has_pending_request(2)
    assert world.notifications.for_user(1) == ["Aisyah requests a room change from A101 to A102"]
    assert world.sms.sent == [("+60111111111", "Aisyah requests a room change from A101 to A102")]
    assert world.email.sent[0]["to"] == "user1@uptm.edu.my"
    assert outcome.delivery.ok


def test_submit_request_without_current_room_mentions_no_room(world):
    world.container.transfer_service.submit_request(
        current_role=Role.STAFF, user_id=4, transfer_room_id=ROOM_B, reason="need a desk"
    )
    assert world.notifications.for_user(1) == ["Chong requests a room change from No Room Assigned to A102"]


def test_submit_request_rejects_second_pending_request(world):
    svc = world.container.transfer_service
    svc.submit_request(current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_B, reason="r")

    with pytest.raises(ValidationError):
        svc.submit_request(current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_C, reason="r")


def test_submit_request_for_current_room_is_rejected(world):
    with pytest.raises(ValidationError):
        world.container.transfer_service.submit_request(
            current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_A, reason="r"
        )


def test_submit_request_for_full_room_is_rejected(world):
    world.users.set_room(4, ROOM_C)

    with pytest.raises(CapacityError):
        world.container.transfer_service.submit_request(
            current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_C, reason="r"
        )
    assert not world.transfers.has_pending(2)


def test_submit_request_requires_reason_and_non_admin(world):
    svc = world.container.transfer_service
    with pytest.raises(ValidationError):
        svc.submit_request(current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_B, reason="  ")
    with pytest.raises(AuthorizationError):
        svc.submit_request(current_role=Role.ADMIN, user_id=1, transfer_room_id=ROOM_B, reason="r")


def test_approve_moves_requester_and_broadcasts(world):
    record_id = world.pending_request(2, ROOM_B, current_room_id=ROOM_A)

    outcome = world.container.transfer_service.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    assert outcome.record.status == TransferStatus.APPROVED
    assert outcome.record.processed_by == 1
    assert world.users.get_by_id(2).room_id == ROOM_B
    assert world.notifications.for_user(2) == ["Your request to change from A101 to A102 has been approved."]
    assert world.notifications.for_user(3) == ["Aisyah has been assigned to room A102."]
    assert outcome.delivery.in_app_created == 3


def test_approve_twice_fails(world):
    record_id = world.pending_request(2, ROOM_B, current_room_id=ROOM_A)
    svc = world.container.transfer_service
    svc.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    with pytest.raises(ValidationError):
        svc.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)


def test_approve_rechecks_capacity(world):
    record_id = world.pending_request(2, ROOM_C, current_room_id=ROOM_A)
    world.users.set_room(4, ROOM_C)

    with pytest.raises(CapacityError):
        world.container.transfer_service.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    assert world.transfers.get(record_id).is_pending
    assert world.users.get_by_id(2).room_id == ROOM_A


def test_approve_requires_admin_and_existing_record(world):
    svc = world.container.transfer_service
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.STAFF, admin_user_id=2, record_id=1)
    with pytest.raises(NotFoundError):
        svc.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=99)


def test_reject_keeps_room_and_does_not_broadcast(world):
    record_id = world.pending_request(2, ROOM_B, current_room_id=ROOM_A)

    outcome = world.container.transfer_service.reject(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    assert outcome.record.status == TransferStatus.REJECTED
    assert world.users.get_by_id(2).room_id == ROOM_A
    assert world.notifications.for_user(2) == ["Your request to change from A101 to A102 has been rejected."]
    assert world.notifications.for_user(3) == []


def test_transfer_staff_moves_user_directly(world):
    outcome = world.container.transfer_service.transfer_staff(
        current_role=Role.ADMIN, admin_user_id=1, user_id=3, room_id=ROOM_C, reason="restructure"
    )

    assert outcome.record.status == TransferStatus.TRANSFER
    assert outcome.record.current_room_id == ROOM_B
    assert world.users.get_by_id(3).room_id == ROOM_C
    assert world.notifications.for_user(3) == [
        "Transfer Notification: Badrul, you have been transferred from A102 to B201. Reason: restructure"
    ]
    assert world.notifications.for_user(2) == ["Badrul is being transferred to room B201"]
    assert world.email.sent[0]["subject"] == "Staff Transfer Notification"


def test_transfer_staff_requires_existing_room_and_a_different_target(world):
    svc = world.container.transfer_service
    with pytest.raises(ValidationError):
        svc.transfer_staff(current_role=Role.ADMIN, admin_user_id=1, user_id=4, room_id=ROOM_B)
    with pytest.raises(ValidationError):
        svc.transfer_staff(current_role=Role.ADMIN, admin_user_id=1, user_id=2, room_id=ROOM_A)


def test_sms_failure_is_reported_not_raised():
    w = World(
        [make_user(1, role=Role.ADMIN, name="Admin", faculty_id=None), make_user(2, name="Aisyah", room_id=ROOM_A)],
        sms=FakeSms(fail=True),
    )

    outcome = w.container.transfer_service.submit_request(
        current_role=Role.STAFF, user_id=2, transfer_room_id=ROOM_B, reason="r"
    )

    assert outcome.record.is_pending
    assert outcome.delivery.failures == ["sms:1"]
    assert not outcome.delivery.ok
    assert w.notifications.for_user(1)


def test_list_by_status_builds_display_rows(world):
    world.pending_request(2, ROOM_B, current_room_id=ROOM_A)

    rows = world.container.transfer_service.list_by_status(TransferStatus.PENDING)

    assert rows == [
        {
            "id": 1,
            "name": "Aisyah",
            "phone_no": "0123456789",
            "email": "user2@uptm.edu.my",
            "department": "Faculty of Computing",
            "current_room": "A101",
            "requested_room": "A102",
            "reason": "closer to lab",
            "date": "2026-03-02",
        }
    ]
    assert world.container.transfer_service.list_by_status(TransferStatus.APPROVED) == []


def test_request_history_skips_admin_actions(world):
    svc = world.container.transfer_service
    first = world.pending_request(3, ROOM_A, current_room_id=ROOM_B)
    svc.reject(current_role=Role.ADMIN, admin_user_id=1, record_id=first)
    svc.transfer_staff(current_role=Role.ADMIN, admin_user_id=1, user_id=3, room_id=ROOM_C)
    world.pending_request(3, ROOM_A, current_room_id=ROOM_C)

    history = svc.request_history(3)

    assert [h["status"] for h in history] == ["pending", "rejected"]
    assert history[0]["current_room"] == "B201"
    assert history[1]["requested_room"] == "A101"


def test_approve_does_not_move_user_when_another_admin_decided_first(world, monkeypatch):
    record_id = world.pending_request(2, ROOM_B, current_room_id=ROOM_A)
    decide = world.transfers.decide

    def decided_elsewhere_first(**kwargs):
        decide(record_id=kwargs["record_id"], status=TransferStatus.REJECTED, processed_by=9)
        return decide(**kwargs)

    monkeypatch.setattr(world.transfers, "decide", decided_elsewhere_first)

    with pytest.raises(ValidationError):
        world.container.transfer_service.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    assert world.transfers.get(record_id).status == TransferStatus.REJECTED
    assert world.users.get_by_id(2).room_id == ROOM_A
    assert world.notifications.for_user(2) == []


def test_approve_refuses_deactivated_requester(world):
    record_id = world.pending_request(2, ROOM_B, current_room_id=ROOM_A)
    world.container.staff_service.set_status(current_role=Role.ADMIN, user_id=2, status=UserStatus.INACTIVE)

    with pytest.raises(ValidationError):
        world.container.transfer_service.approve(current_role=Role.ADMIN, admin_user_id=1, record_id=record_id)

    assert world.users.get_by_id(2).room_id is None
    assert world.transfers.get(record_id).is_pending


def test_transfer_staff_writes_no_record_when_move_fails(world, monkeypatch):
    monkeypatch.setattr(world.users, "set_room", lambda user_id, room_id: False)

    with pytest.raises(ValidationError):
        world.container.transfer_service.transfer_staff(
            current_role=Role.ADMIN, admin_user_id=1, user_id=3, room_id=ROOM_C
        )

    assert world.transfers.list_by_status(TransferStatus.TRANSFER) == []


def test_transfer_staff_refuses_inactive_user(world):
    world.users.set_status(3, status=UserStatus.INACTIVE, room_id=ROOM_B)

    with pytest.raises(ValidationError):
        world.container.transfer_service.transfer_staff(
            current_role=Role.ADMIN, admin_user_id=1, user_id=3, room_id=ROOM_C
        )

"""Notification dispatcher.

Every workflow event fans out over up to three channels: SMS to the subject,
email to the subject and in-app notification rows (for the subject and, for
most events, every other staff member). In-app rows are the system of record
and are always written; SMS and email are best effort and failures end up in
the returned `DeliveryReport`.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import to_e164
from ..core.constants import NO_ROOM_ASSIGNED, NOT_AVAILABLE
from ..core.enums import Role, TransferStatus
from ..core.exceptions import NotFoundError, NotificationError
from ..lookup.repository import LookupRepository
from ..users.model import User
from ..users.repository import UserRepository
from .gateways import EmailGateway, SmsGateway
from .model import DeliveryReport, Notification
from .repository import NotificationRepository
from .templates import EmailRenderer

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    def __init__(
        self,
        users: UserRepository,
        lookup: LookupRepository,
        notifications: NotificationRepository,
        sms: SmsGateway,
        email: EmailGateway,
        renderer: Optional[EmailRenderer] = None,
    ):
        self._users = users
        self._lookup = lookup
        self._notifications = notifications
        self._sms = sms
        self._email = email
        self._renderer = renderer or EmailRenderer()

    # -------- channel helpers --------
    def _faculty_description(self, user: User) -> str:
        if not user.faculty_id:
            return NOT_AVAILABLE
        faculty = self._lookup.get_by_id(user.faculty_id)
        if not faculty:
            return NOT_AVAILABLE
        return faculty.description or NOT_AVAILABLE

    def _send_sms(self, report: DeliveryReport, user: User, body: str) -> None:
        to = to_e164(user.phone_no)
        if not to:
            logger.warning("No phone number for user %s; skipping SMS", user.user_id)
            return
        if not self._sms.is_configured:
            logger.warning("SMS gateway not configured; skipping SMS to user %s", user.user_id)
            return
        try:
            self._sms.send(to=to, body=body)
            report.sms_sent += 1
        except NotificationError as e:
            logger.error("SMS to user %s failed: %s", user.user_id, e)
            report.failures.append(f"sms:{user.user_id}")

    def _send_email(self, report: DeliveryReport, user: User, *, subject: str, text: str, template: str, **context) -> None:
        if not user.email:
            logger.warning("No email for user %s; skipping email", user.user_id)
            return
        if not self._email.is_configured:
            logger.warning("Email gateway not configured; skipping email to user %s", user.user_id)
            return
        html = self._renderer.render(template, recipient_name=user.name, **context)
        try:
            self._email.send(to=user.email, subject=subject, text=text, html=html)
            report.emails_sent += 1
        except NotificationError as e:
            logger.error("Email to user %s failed: %s", user.user_id, e)
            report.failures.append(f"email:{user.user_id}")

    def _in_app(self, report: DeliveryReport, user_id: int, message: str) -> None:
        self._notifications.create(user_id=int(user_id), message=message)
        report.in_app_created += 1

    def _broadcast(self, report: DeliveryReport, role: Role, message: str, *, exclude_user_id: Optional[int]) -> None:
        recipients = self._users.list_by_role(role, exclude_user_id=exclude_user_id)
        report.in_app_created += self._notifications.create_many(
            user_ids=[u.user_id for u in recipients],
            message=message,
        )

    # -------- workflow events --------
    def notify_transfer(
        self,
        user: User,
        *,
        current_room_name: str,
        new_room_name: str,
        reason: Optional[str],
    ) -> DeliveryReport:
        """Admin moved `user` directly to another room."""
        report = DeliveryReport()
        detailed = (
            f"Transfer Notification: {user.name}, you have been transferred from {current_room_name} "
            f"to {new_room_name}. Reason: {reason or 'Not specified'}"
        )

        self._send_sms(
            report,
            user,
            f"Transfer Notification: {user.name}, you have been transferred from {current_room_name} to {new_room_name}.",
        )
        self._send_email(
            report,
            user,
            subject="Staff Transfer Notification",
            text=detailed,
            template="transfer.html",
            current_room_name=current_room_name,
            new_room_name=new_room_name,
            transfer_reason=reason,
            faculty_description=self._faculty_description(user),
        )
        self._in_app(report, user.user_id, detailed)
        self._broadcast(
            report,
            Role.STAFF,
            f"{user.name} is being transferred to room {new_room_name}",
            exclude_user_id=user.user_id,
        )
        return report

    def notify_new_staff(self, user: User, *, department_name: str, faculty_name: Optional[str]) -> DeliveryReport:
        report = DeliveryReport()
        faculty = faculty_name or NOT_AVAILABLE
        detailed = (
            f"{user.name}, you've been registered in the RoomEase Portal App in the {department_name} "
            f"department at {faculty}. Contact admin for login details."
        )

        self._send_sms(
            report,
            user,
            f"{user.name}, you've been registered in the RoomEase Portal App. Contact admin for login details.",
        )
        self._send_email(
            report,
            user,
            subject="Welcome to RoomEase Portal",
            text=detailed,
            template="registration.html",
            department_name=department_name,
            faculty_name=faculty,
            faculty_description=self._faculty_description(user),
        )
        self._broadcast(
            report,
            Role.STAFF,
            f"New staff member {user.name} is registered in the {department_name} department at {faculty}.",
            exclude_user_id=user.user_id,
        )
        return report

    def notify_room_assignment(self, user: User, *, room_name: str) -> DeliveryReport:
        report = DeliveryReport()
        detailed = f"You have been assigned to room {room_name}"

        self._send_sms(report, user, f"{user.name}, you have been assigned to room {room_name}.")
        self._send_email(
            report,
            user,
            subject="Room Assignment Notification",
            text=detailed,
            template="room_assignment.html",
            room_name=room_name,
            faculty_description=self._faculty_description(user),
        )
        self._in_app(report, user.user_id, detailed)
        self._broadcast(
            report,
            Role.STAFF,
            f"Staff {user.name} is being assigned to room {room_name}",
            exclude_user_id=user.user_id,
        )
        return report

    def notify_staff_request(
        self,
        staff: User,
        *,
        current_room_name: Optional[str],
        requested_room_name: str,
    ) -> DeliveryReport:
        """Tell every admin that `staff` asked for a room change."""
        report = DeliveryReport()
        current = current_room_name or NO_ROOM_ASSIGNED
        message = f"{staff.name} requests a room change from {current} to {requested_room_name}"

        admins = self._users.list_by_role(Role.ADMIN)
        if not admins:
            logger.warning("No admin users found to notify about request from user %s", staff.user_id)
            return report

        for admin in admins:
            self._in_app(report, admin.user_id, message)
            self._send_sms(report, admin, message)
            self._send_email(
                report,
                admin,
                subject="Staff Room Change Request",
                text=message,
                template="staff_request.html",
                staff_name=staff.name,
                current_room_name=current,
                room_name=requested_room_name,
                staff_phone_no=staff.phone_no,
                staff_email=staff.email,
            )
        return report

    def notify_transfer_outcome(
        self,
        staff: User,
        *,
        current_room_name: Optional[str],
        transfer_room_name: str,
        status: TransferStatus,
    ) -> DeliveryReport:
        report = DeliveryReport()
        current = current_room_name or NO_ROOM_ASSIGNED
        message = f"Your request to change from {current} to {transfer_room_name} has been {status.value}."

        self._send_sms(
            report,
            staff,
            f"{staff.name}, your request to change from {current} to {transfer_room_name} has been {status.value}.",
        )
        self._send_email(
            report,
            staff,
            subject="Transfer Request Outcome",
            text=message,
            template="transfer_outcome.html",
            current_room_name=current,
            transfer_room_name=transfer_room_name,
            status=status.value,
            faculty_description=self._faculty_description(staff),
        )
        self._in_app(report, staff.user_id, message)

        if status == TransferStatus.APPROVED:
            self._broadcast(
                report,
                Role.STAFF,
                f"{staff.name} has been assigned to room {transfer_room_name}.",
                exclude_user_id=staff.user_id,
            )
        return report

    # -------- in-app inbox --------
    def list_for_user(self, user_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.mark_read(user_id=int(user_id), notification_id=int(notification_id)):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._notifications.mark_all_read(int(user_id))

    def unread_count(self, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .lookup.mysql_lookup_repository import MySQLLookupRepository
from .lookup.repository import LookupRepository
from .notifications.gateways import SendGridEmailGateway, TwilioSmsGateway
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationDispatcher
from .rooms.service import RoomService
from .staff.service import StaffService
from .transfers.mysql_transfer_repository import MySQLTransferRepository
from .transfers.repository import TransferRepository
from .transfers.service import TransferService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    lookup_repo: LookupRepository
    transfers_repo: TransferRepository
    notifications_repo: NotificationRepository

    notifier: NotificationDispatcher
    auth_service: AuthService
    user_service: UserService
    room_service: RoomService
    staff_service: StaffService
    transfer_service: TransferService


def wire_services(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    lookup_repo: LookupRepository,
    transfers_repo: TransferRepository,
    notifications_repo: NotificationRepository,
    sms_gateway,
    email_gateway,
    files_base_url: str = "",
) -> Container:
    notifier = NotificationDispatcher(users_repo, lookup_repo, notifications_repo, sms_gateway, email_gateway)

    return Container(
        conn=conn,
        users_repo=users_repo,
        lookup_repo=lookup_repo,
        transfers_repo=transfers_repo,
        notifications_repo=notifications_repo,
        notifier=notifier,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, lookup_repo, files_base_url=files_base_url),
        room_service=RoomService(lookup_repo, users_repo, transfers_repo, notifier),
        staff_service=StaffService(users_repo, lookup_repo, notifier, files_base_url=files_base_url),
        transfer_service=TransferService(transfers_repo, users_repo, lookup_repo, notifier),
    )


def build_container(*, db_config: dict, settings) -> Container:
    conn = DatabaseConnection(DBConfig.from_settings(db_config))

    return wire_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        lookup_repo=MySQLLookupRepository(conn),
        transfers_repo=MySQLTransferRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        sms_gateway=TwilioSmsGateway(
            getattr(settings, "TWILIO_ACCOUNT_SID", None),
            getattr(settings, "TWILIO_AUTH_TOKEN", None),
            getattr(settings, "TWILIO_FROM_NUMBER", None),
        ),
        email_gateway=SendGridEmailGateway(
            getattr(settings, "SENDGRID_API_KEY", None),
            getattr(settings, "EMAIL_FROM", None),
        ),
        files_base_url=getattr(settings, "FILES_BASE_URL", ""),
    )

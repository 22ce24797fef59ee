from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.files import build_file_url
from ..common.validators import normalize_phone, require_email, require_non_empty
from ..core.constants import DEFAULT_EMAIL_DOMAIN, DEFAULT_STAFF_PASSWORD, NO_ROOM_ASSIGNED
from ..core.enums import LookupCategory, Role, UserStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..lookup.model import LookupRecord
from ..lookup.repository import LookupRepository
from ..notifications.model import DeliveryReport
from ..notifications.service import NotificationDispatcher
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registration:
    user: User
    delivery: DeliveryReport


def _unassigned_first(rows: list[dict]) -> list[dict]:
    # Stable sort: rows without a room first, input order otherwise.
    return sorted(rows, key=lambda r: r["room"] != NO_ROOM_ASSIGNED)


class StaffService:
    def __init__(
        self,
        users: UserRepository,
        lookup: LookupRepository,
        notifier: NotificationDispatcher,
        *,
        files_base_url: str = "",
    ):
        self._users = users
        self._lookup = lookup
        self._notifier = notifier
        self._files_base_url = files_base_url

    def _room_names(self, users: Sequence[User]) -> dict[int, str]:
        rooms = self._lookup.get_many([u.room_id for u in users if u.room_id])
        return {r.lookup_id: r.name for r in rooms}

    def _faculty_ids(self, department_id: Optional[int] = None) -> list[int]:
        faculties = self._lookup.list_by_category(LookupCategory.FACULTY, parent_id=department_id)
        return [f.lookup_id for f in faculties]

    # -------- organisation lookups --------
    def list_departments(self) -> Sequence[LookupRecord]:
        return self._lookup.list_by_category(LookupCategory.DEPARTMENT)

    def list_faculties(self, department_id: int) -> Sequence[LookupRecord]:
        faculties = self._lookup.list_by_category(LookupCategory.FACULTY, parent_id=int(department_id))
        if not faculties:
            logger.info("No faculty found for department %s", department_id)
        return faculties

    def faculty_roster(self, faculty_id: int) -> Optional[dict]:
        faculty = self._lookup.get_by_id(int(faculty_id))
        if not faculty or faculty.category != LookupCategory.FACULTY:
            logger.info("No faculty found for faculty_id=%s", faculty_id)
            return None

        users = self._users.list_by_faculties([faculty.lookup_id], status=UserStatus.ACTIVE)
        rooms = self._room_names(users)
        return {
            "faculty_name": faculty.name,
            "faculty_description": faculty.description or "No description available",
            "users": [
                {"id": u.user_id, "name": u.name, "room": rooms.get(u.room_id, NO_ROOM_ASSIGNED)} for u in users
            ],
        }

    def list_department_users(self, department_id: int) -> list[dict]:
        faculty_ids = self._faculty_ids(int(department_id))
        if not faculty_ids:
            return []
        users = self._users.list_by_faculties(faculty_ids, status=UserStatus.ACTIVE)
        rooms = self._room_names(users)
        rows = [{"id": u.user_id, "name": u.name, "room": rooms.get(u.room_id, NO_ROOM_ASSIGNED)} for u in users]
        return _unassigned_first(rows)

    def list_user_names(self, department_id: int) -> list[str]:
        return [row["name"] for row in self.list_department_users(department_id)]

    def list_staff(self) -> list[dict]:
        faculties = self._lookup.list_by_category(LookupCategory.FACULTY)
        faculty_names = {f.lookup_id: f.name for f in faculties}
        users = self._users.list_staff_directory(list(faculty_names))
        rooms = self._room_names(users)
        rows = [
            {
                "id": u.user_id,
                "name": u.name,
                "faculty": faculty_names.get(u.faculty_id, "Unknown Faculty"),
                "room": rooms.get(u.room_id, NO_ROOM_ASSIGNED),
            }
            for u in users
        ]
        return _unassigned_first(rows)

    # -------- single staff member --------
    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def staff_profile(self, user_id: int) -> dict:
        user = self._require_user(user_id)
        room = self._lookup.get_by_id(user.room_id) if user.room_id else None
        faculty = self._lookup.get_by_id(user.faculty_id) if user.faculty_id else None
        return {
            "id": user.user_id,
            "name": user.name,
            "room": room.name if room else NO_ROOM_ASSIGNED,
            "faculty": faculty.name if faculty else "No Faculty Assigned",
            "email": user.email or "No Email Provided",
            "phone_no": user.phone_no or "No Phone Number Provided",
            "status": user.status.value,
            "avatar": self.avatar_url(user.user_id, user=user),
        }

    def avatar_url(self, user_id: int, *, user: Optional[User] = None) -> str:
        user = user or self._require_user(user_id)
        return build_file_url(self._files_base_url, "users", user.user_id, user.avatar) or "No Avatar Provided"

    def timetable(self, user_id: int) -> dict:
        user = self._require_user(user_id)
        return {
            "id": user.user_id,
            "name": user.name,
            "timetable": build_file_url(self._files_base_url, "users", user.user_id, user.timetable)
            or "No Timetable Available",
        }

    # -------- admin actions --------
    def register_staff(
        self,
        *,
        current_role: Role,
        email: str,
        name: str,
        department: str,
        faculty_id: int,
        phone_no: str,
    ) -> Registration:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        email = require_non_empty(email, "Email")
        if "@" not in email:
            email = f"{email}{DEFAULT_EMAIL_DOMAIN}"
        email = require_email(email)
        name = require_non_empty(name, "Name")
        department = require_non_empty(department, "Department")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already taken.")

        faculty = self._lookup.get_by_id(int(faculty_id))
        if not faculty or faculty.category != LookupCategory.FACULTY:
            raise NotFoundError("Faculty not found.")

        formatted_phone = normalize_phone(phone_no)
        if formatted_phone == (phone_no or "").strip():
            logger.warning("Phone number not in expected format (10 digits starting with 0): %s", phone_no)

        user_id = self._users.create_user(
            email=email,
            name=name,
            password_hash=generate_password_hash(DEFAULT_STAFF_PASSWORD),
            role=Role.STAFF,
            phone_no=formatted_phone or None,
            faculty_id=faculty.lookup_id,
            department=department,
            status=UserStatus.ACTIVE,
            is_first_login=True,
        )
        user = self._require_user(user_id)
        logger.info("Staff user %s registered (%s)", user.user_id, user.email)

        delivery = self._notifier.notify_new_staff(user, department_name=department, faculty_name=faculty.name)
        return Registration(user=user, delivery=delivery)

    def set_status(self, *, current_role: Role, user_id: int, status: UserStatus) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self._require_user(user_id)
        room_id = None if status == UserStatus.INACTIVE else user.room_id

        if not self._users.set_status(user.user_id, status=status, room_id=room_id):
            raise ValidationError("Failed to update user status")
        logger.info("User %s status changed to %s", user.user_id, status.value)
        return {"id": user.user_id, "name": user.name, "status": status.value, "room": room_id or "n/a"}

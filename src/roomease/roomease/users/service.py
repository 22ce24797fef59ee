from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.files import build_file_url
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, NOT_AVAILABLE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..lookup.repository import LookupRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    is_first_login: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "is_first_login": self.is_first_login,
        }


def has_role(user: Optional[SessionUser], role_name: str) -> bool:
    return bool(user) and user.role.value.lower() == role_name.lower()


def is_admin(user: Optional[SessionUser]) -> bool:
    return has_role(user, Role.ADMIN.value)


def is_staff(user: Optional[SessionUser]) -> bool:
    return has_role(user, Role.STAFF.value)


def is_student(user: Optional[SessionUser]) -> bool:
    return has_role(user, Role.STUDENT.value)


def password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes
        logger.warning("Stored password hash could not be parsed")
        return False


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def login(self, email: str, password: str) -> SessionUser:
        if not email or not password:
            raise ValidationError("Please enter both email and password")
        email = require_email(email)

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        if not password_matches(user.password_hash, password):
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s logged in as %s", user.user_id, user.role.value)
        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_first_login=user.is_first_login,
        )


class UserService:
    """Use case: the signed-in user's own profile."""

    def __init__(self, users: UserRepository, lookup: LookupRepository, *, files_base_url: str = ""):
        self._users = users
        self._lookup = lookup
        self._files_base_url = files_base_url

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("No authenticated user found")
        return user

    def room_display_name(self, room_id: Optional[int]) -> str:
        """`"<floor>, <room>"` when the room sits on a floor, else the room name."""
        if not room_id:
            return NOT_AVAILABLE
        room = self._lookup.get_by_id(room_id)
        if not room:
            logger.warning("No matching room found in lookup for room_id=%s", room_id)
            return str(room_id)
        parent = self._lookup.get_by_id(room.parent_id) if room.parent_id else None
        return f"{parent.name}, {room.name}" if parent else room.name

    def _faculty_info(self, user: User) -> dict:
        if not user.faculty_id:
            return {"id": None, "name": NOT_AVAILABLE, "full_name": "Not Applicable"}
        faculty = self._lookup.get_by_id(user.faculty_id)
        if not faculty:
            logger.warning("Faculty %s not found for user %s", user.faculty_id, user.user_id)
            return {"id": user.faculty_id, "name": "Unknown", "full_name": "Unknown"}
        return {"id": faculty.lookup_id, "name": faculty.name, "full_name": faculty.description or faculty.name}

    def fetch_profile(self, user_id: int) -> dict:
        user = self._require_user(user_id)
        return {
            "id": user.user_id,
            "email": user.email,
            "name": user.name,
            "phone_no": user.phone_no,
            "room_id": user.room_id,
            "room_name": self.room_display_name(user.room_id),
            "role": user.role.value,
            "faculty": self._faculty_info(user),
            "avatar": build_file_url(self._files_base_url, "users", user.user_id, user.avatar),
            "is_first_login": user.is_first_login,
        }

    def edit_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        phone_no: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> dict:
        self._require_user(user_id)
        if name is not None:
            name = require_non_empty(name, "Name")

        if not self._users.update_profile(int(user_id), name=name, phone_no=phone_no, avatar=avatar or None):
            raise ValidationError("Failed to update record")
        return self.fetch_profile(user_id)

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = self._require_user(user_id)
        if not current_password or not new_password:
            raise ValidationError("Both current and new passwords are required")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        if not password_matches(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")

        if not self._users.set_password_hash(user.user_id, generate_password_hash(new_password)):
            raise ValidationError("Failed to change password")
        logger.info("Password updated for user %s", user.user_id)

    def complete_onboarding(self, user_id: int) -> None:
        user = self._require_user(user_id)
        if user.is_first_login:
            self._users.set_first_login(user.user_id, False)

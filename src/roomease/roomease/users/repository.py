from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, user_ids: Sequence[int]) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role, *, exclude_user_id: Optional[int] = None) -> Sequence[User]:
        """Active users holding `role`."""

        raise NotImplementedError

    def list_by_room(self, room_id: int, *, status: Optional[UserStatus] = None) -> Sequence[User]:
        raise NotImplementedError

    def list_without_room(self, *, role: Role, status: UserStatus) -> Sequence[User]:
        raise NotImplementedError

    def list_by_faculties(self, faculty_ids: Sequence[int], *, status: Optional[UserStatus] = None) -> Sequence[User]:
        raise NotImplementedError

    def list_staff_directory(self, faculty_ids: Sequence[int]) -> Sequence[User]:
        """Users belonging to one of `faculty_ids` or holding the staff role."""

        raise NotImplementedError

    def occupancy_by_room(self) -> Dict[int, int]:
        """room_id -> number of users in the room."""

        raise NotImplementedError

    def count_in_room(self, room_id: int, *, role: Optional[Role] = None) -> int:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: Role,
        phone_no: Optional[str],
        faculty_id: Optional[int],
        department: Optional[str],
        status: UserStatus = UserStatus.ACTIVE,
        is_first_login: bool = True,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        phone_no: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def set_room(self, user_id: int, room_id: Optional[int]) -> bool:
        raise NotImplementedError

    def set_status(self, user_id: int, *, status: UserStatus, room_id: Optional[int]) -> bool:
        raise NotImplementedError

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def set_first_login(self, user_id: int, value: bool) -> bool:
        raise NotImplementedError

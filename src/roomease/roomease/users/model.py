from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    email: str
    name: str
    password_hash: str
    role: Role
    phone_no: Optional[str] = None
    faculty_id: Optional[int] = None
    department: Optional[str] = None
    room_id: Optional[int] = None
    status: UserStatus = UserStatus.ACTIVE
    is_first_login: bool = False
    avatar: Optional[str] = None
    timetable: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

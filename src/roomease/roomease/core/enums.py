from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransferStatus(str, Enum):
    """Status of a transfer record; drives the room-change workflow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ASSIGNED = "assigned"
    TRANSFER = "transfer"


class LookupGroup(int, Enum):
    ORGANISATION = 2
    LOCATION = 3


class LookupCategory(str, Enum):
    DEPARTMENT = "department"
    FACULTY = "faculty"
    FLOOR = "floor"
    ROOM = "room"

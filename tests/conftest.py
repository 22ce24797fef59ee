from __future__ import annotations

from datetime import datetime

import pytest

from src.roomease.roomease.core.enums import Role
from tests.fakes import FACULTY_FBM, ROOM_A, ROOM_B, World, make_user


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def world():
    return World(
        [
            make_user(1, role=Role.ADMIN, name="Admin", faculty_id=None, phone_no="60111111111"),
            make_user(2, name="Aisyah", room_id=ROOM_A),
            make_user(3, name="Badrul", room_id=ROOM_B, faculty_id=FACULTY_FBM),
            make_user(4, name="Chong", room_id=None),
            make_user(5, name="Dina", role=Role.STUDENT, faculty_id=None, phone_no=None),
        ]
    )

from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from src.roomease.roomease.core.constants import DEFAULT_STAFF_PASSWORD
from src.roomease.roomease.core.enums import Role, UserStatus
from src.roomease.roomease.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import DEPARTMENT_ID, FACULTY_FCOM, FLOOR_1, ROOM_A, make_user


def test_organisation_lookups(world):
    svc = world.container.staff_service

    assert [d.name for d in svc.list_departments()] == ["Academic"]
    assert [f.name for f in svc.list_faculties(DEPARTMENT_ID)] == ["FBM", "FCOM"]
    assert svc.list_faculties(999) == []


def test_faculty_roster(world):
    roster = world.container.staff_service.faculty_roster(FACULTY_FCOM)

    assert roster["faculty_name"] == "FCOM"
    assert roster["faculty_description"] == "Faculty of Computing"
    assert roster["users"] == [
        {"id": 2, "name": "Aisyah", "room": "A101"},
        {"id": 4, "name": "Chong", "room": "No Room Assigned"},
    ]
    assert world.container.staff_service.faculty_roster(FLOOR_1) is None


def test_department_users_put_unassigned_first(world):
    svc = world.container.staff_service

    rows = svc.list_department_users(DEPARTMENT_ID)

    assert [r["name"] for r in rows] == ["Chong", "Aisyah", "Badrul"]
    assert svc.list_user_names(DEPARTMENT_ID) == ["Chong", "Aisyah", "Badrul"]
    assert svc.list_department_users(999) == []


def test_list_staff_directory(world):
    rows = world.container.staff_service.list_staff()

    assert rows[0] == {"id": 4, "name": "Chong", "faculty": "FCOM", "room": "No Room Assigned"}
    assert {r["name"]: r["faculty"] for r in rows}["Badrul"] == "FBM"
    assert "Admin" not in {r["name"] for r in rows}


def test_staff_profile_and_files(world):
    world.users.add(make_user(6, name="Ezra", room_id=ROOM_A, avatar="me.png", timetable="tt.pdf"))
    svc = world.container.staff_service

    profile = svc.staff_profile(6)

    assert profile["room"] == "A101"
    assert profile["faculty"] == "FCOM"
    assert profile["status"] == "active"
    assert profile["avatar"] == "http://files.test/api/files/users/6/me.png"
    assert svc.timetable(6)["timetable"] == "http://files.test/api/files/users/6/tt.pdf"
    assert svc.avatar_url(2) == "No Avatar Provided"
    assert svc.timetable(2)["timetable"] == "No Timetable Available"
    with pytest.raises(NotFoundError):
        svc.staff_profile(404)


def test_register_staff(world):
    result = world.container.staff_service.register_staff(
        current_role=Role.ADMIN,
        email="zara",
        name="Zara",
        department="Academic",
        faculty_id=FACULTY_FCOM,
        phone_no="0198765432",
    )

    user = result.user
    assert user.email == "zara@uptm.edu.my"
    assert user.phone_no == "60198765432"
    assert user.role == Role.STAFF
    assert user.is_first_login
    assert check_password_hash(user.password_hash, DEFAULT_STAFF_PASSWORD)
    assert world.sms.sent == [
        ("+60198765432", "Zara, you've been registered in the RoomEase Portal App. Contact admin for login details.")
    ]
    assert world.email.sent[0]["subject"] == "Welcome to RoomEase Portal"
    assert "Zara" in world.email.sent[0]["html"]
    assert world.notifications.for_user(2) == [
        "New staff member Zara is registered in the Academic department at FCOM."
    ]
    assert world.notifications.for_user(user.user_id) == []
    assert result.delivery.in_app_created == 3


def test_register_staff_rules(world):
    svc = world.container.staff_service
    kwargs = dict(name="Zara", department="Academic", faculty_id=FACULTY_FCOM, phone_no="")

    with pytest.raises(ValidationError):
        svc.register_staff(current_role=Role.ADMIN, email="user2@uptm.edu.my", **kwargs)
    with pytest.raises(ValidationError):
        svc.register_staff(current_role=Role.ADMIN, email="bad@", **kwargs)
    with pytest.raises(AuthorizationError):
        svc.register_staff(current_role=Role.STAFF, email="zara", **kwargs)
    with pytest.raises(NotFoundError):
        svc.register_staff(current_role=Role.ADMIN, email="zara", **{**kwargs, "faculty_id": ROOM_A})


def test_deactivating_staff_frees_the_room(world):
    svc = world.container.staff_service

    out = svc.set_status(current_role=Role.ADMIN, user_id=2, status=UserStatus.INACTIVE)

    assert out == {"id": 2, "name": "Aisyah", "status": "inactive", "room": "n/a"}
    user = world.users.get_by_id(2)
    assert user.room_id is None
    assert not user.is_active

    svc.set_status(current_role=Role.ADMIN, user_id=3, status=UserStatus.ACTIVE)
    assert world.users.get_by_id(3).room_id is not None

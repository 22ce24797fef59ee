from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, email, name, password_hash, role, phone_no, faculty_id, department,
    room_id, status, is_first_login, avatar, timetable, created_at
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        phone_no=row.get("phone_no"),
        faculty_id=row.get("faculty_id"),
        department=row.get("department"),
        room_id=row.get("room_id"),
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
        is_first_login=bool(row.get("is_first_login", False)),
        avatar=row.get("avatar"),
        timetable=row.get("timetable"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple = (), *, order_by: str = "name") -> list[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where} ORDER BY {order_by}", params)
            return [_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_many(self, user_ids: Sequence[int]) -> Sequence[User]:
        ids = sorted({int(i) for i in user_ids if i is not None})
        if not ids:
            return []
        return self._select(f"user_id IN ({in_clause(ids)})", tuple(ids))

    def list_by_role(self, role: Role, *, exclude_user_id: Optional[int] = None) -> Sequence[User]:
        active = UserStatus.ACTIVE.value
        if exclude_user_id is None:
            return self._select("role=%s AND status=%s", (role.value, active))
        return self._select("role=%s AND status=%s AND user_id<>%s", (role.value, active, int(exclude_user_id)))

    def list_by_room(self, room_id: int, *, status: Optional[UserStatus] = None) -> Sequence[User]:
        if status is None:
            return self._select("room_id=%s", (int(room_id),))
        return self._select("room_id=%s AND status=%s", (int(room_id), status.value))

    def list_without_room(self, *, role: Role, status: UserStatus) -> Sequence[User]:
        return self._select("role=%s AND status=%s AND room_id IS NULL", (role.value, status.value))

    def list_by_faculties(self, faculty_ids: Sequence[int], *, status: Optional[UserStatus] = None) -> Sequence[User]:
        ids = [int(i) for i in faculty_ids]
        if not ids:
            return []
        where = f"faculty_id IN ({in_clause(ids)})"
        params: tuple = tuple(ids)
        if status is not None:
            where += " AND status=%s"
            params += (status.value,)
        return self._select(where, params)

    def list_staff_directory(self, faculty_ids: Sequence[int]) -> Sequence[User]:
        ids = [int(i) for i in faculty_ids]
        if not ids:
            return self._select("role=%s", (Role.STAFF.value,))
        return self._select(f"faculty_id IN ({in_clause(ids)}) OR role=%s", (*ids, Role.STAFF.value))

    def occupancy_by_room(self) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, COUNT(*) AS occupants FROM users WHERE room_id IS NOT NULL GROUP BY room_id")
            return {int(r["room_id"]): int(r["occupants"]) for r in fetchall(cur)}

    def count_in_room(self, room_id: int, *, role: Optional[Role] = None) -> int:
        sql = "SELECT COUNT(*) AS occupants FROM users WHERE room_id=%s"
        params: tuple = (int(room_id),)
        if role is not None:
            sql += " AND role=%s"
            params += (role.value,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            row = fetchone(cur)
            return int(row["occupants"]) if row else 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, name, password_hash, role, phone_no, faculty_id, department, status, is_first_login)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    email,
                    name,
                    password_hash,
                    role.value,
                    phone_no,
                    faculty_id,
                    department,
                    status.value,
                    1 if is_first_login else 0,
                ),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        phone_no: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> bool:
        fields = {"name": name, "phone_no": phone_no, "avatar": avatar}
        sets = [(col, val) for col, val in fields.items() if val is not None]
        if not sets:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {', '.join(f'{col}=%s' for col, _ in sets)} WHERE user_id=%s",
                (*[val for _, val in sets], int(user_id)),
            )
            return cur.rowcount > 0

    def set_room(self, user_id: int, room_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET room_id=%s WHERE user_id=%s", (room_id, int(user_id)))
            return cur.rowcount > 0

    def set_status(self, user_id: int, *, status: UserStatus, room_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET status=%s, room_id=%s WHERE user_id=%s",
                (status.value, room_id, int(user_id)),
            )
            return cur.rowcount > 0

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def set_first_login(self, user_id: int, value: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_first_login=%s WHERE user_id=%s", (1 if value else 0, int(user_id)))
            return cur.rowcount > 0

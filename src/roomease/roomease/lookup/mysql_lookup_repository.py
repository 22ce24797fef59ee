from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LookupCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LookupRecord
from .repository import LookupRepository

_COLUMNS = "lookup_id, name, description, lookup_group, category, parent_id"


def _to_record(row: dict) -> LookupRecord:
    return LookupRecord(
        lookup_id=int(row["lookup_id"]),
        name=row["name"],
        description=row.get("description"),
        group=int(row["lookup_group"]),
        category=LookupCategory(row["category"]),
        parent_id=row.get("parent_id"),
    )


class MySQLLookupRepository(LookupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lookup_id: int) -> Optional[LookupRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lookup WHERE lookup_id=%s", (int(lookup_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_many(self, lookup_ids: Sequence[int]) -> Sequence[LookupRecord]:
        ids = sorted({int(i) for i in lookup_ids if i is not None})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lookup WHERE lookup_id IN ({in_clause(ids)})", tuple(ids))
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_name(self, name: str, *, category: Optional[LookupCategory] = None) -> Optional[LookupRecord]:
        sql = f"SELECT {_COLUMNS} FROM lookup WHERE name=%s"
        params: list = [name]
        if category is not None:
            sql += " AND category=%s"
            params.append(category.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_by_category(
        self,
        category: LookupCategory,
        *,
        parent_id: Optional[int] = None,
    ) -> Sequence[LookupRecord]:
        sql = f"SELECT {_COLUMNS} FROM lookup WHERE category=%s"
        params: list = [category.value]
        if parent_id is not None:
            sql += " AND parent_id=%s"
            params.append(int(parent_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY name", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        group: int,
        category: LookupCategory,
        parent_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lookup(name, description, lookup_group, category, parent_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, description, int(group), category.value, parent_id),
            )
            return int(cur.lastrowid)

    def update(self, lookup_id: int, *, name: Optional[str] = None, description: Optional[str] = None) -> bool:
        sets: list[str] = []
        params: list = []
        if name is not None:
            sets.append("name=%s")
            params.append(name)
        if description is not None:
            sets.append("description=%s")
            params.append(description)
        if not sets:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE lookup SET {', '.join(sets)} WHERE lookup_id=%s", (*params, int(lookup_id)))
            return cur.rowcount > 0

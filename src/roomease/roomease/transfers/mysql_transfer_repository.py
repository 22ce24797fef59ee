from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import TransferStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import TransferRecord
from .repository import TransferRepository

_COLUMNS = """
    record_id, transfer_room_id, current_room_id, status, reason,
    request_by, processed_by, created_at, updated_at
"""


def _to_record(r: dict) -> TransferRecord:
    return TransferRecord(
        record_id=int(r["record_id"]),
        transfer_room_id=r.get("transfer_room_id"),
        current_room_id=r.get("current_room_id"),
        status=TransferStatus(r["status"]),
        reason=r.get("reason"),
        request_by=int(r["request_by"]),
        processed_by=r.get("processed_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTransferRepository(TransferRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        transfer_room_id: int,
        current_room_id: Optional[int],
        status: TransferStatus,
        reason: Optional[str],
        request_by: int,
        processed_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transfer_room(transfer_room_id, current_room_id, status, reason, request_by, processed_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(transfer_room_id),
                    current_room_id,
                    status.value,
                    reason,
                    int(request_by),
                    processed_by,
                ),
            )
            return int(cur.lastrowid)

    def get(self, record_id: int) -> Optional[TransferRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM transfer_room WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def decide(self, *, record_id: int, status: TransferStatus, processed_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE transfer_room
                SET status=%s, processed_by=%s
                WHERE record_id=%s AND status=%s
                """,
                (status.value, int(processed_by), int(record_id), TransferStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_by_status(self, status: TransferStatus) -> Sequence[TransferRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM transfer_room WHERE status=%s ORDER BY created_at DESC, record_id DESC",
                (status.value,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, statuses: Sequence[TransferStatus]) -> Sequence[TransferRecord]:
        values = [s.value for s in statuses]
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM transfer_room
                WHERE request_by=%s AND status IN ({in_clause(values)})
                ORDER BY created_at DESC, record_id DESC
                """,
                (int(user_id), *values),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def has_pending(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM transfer_room WHERE request_by=%s AND status=%s LIMIT 1",
                (int(user_id), TransferStatus.PENDING.value),
            )
            return fetchone(cur) is not None

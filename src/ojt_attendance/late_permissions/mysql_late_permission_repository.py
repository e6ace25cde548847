from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import PermissionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LatePermissionRequest
from .repository import LatePermissionRepository

_COLUMNS = """
    id, trainee_id, supervisor_id, permission_date, reason, status,
    granted_by, denied_reason, decided_at, used_at, created_at
"""


def _to_request(r: dict[str, Any]) -> LatePermissionRequest:
    return LatePermissionRequest(
        request_id=int(r["id"]),
        trainee_id=int(r["trainee_id"]),
        supervisor_id=r.get("supervisor_id"),
        permission_date=r["permission_date"],
        reason=r.get("reason") or "",
        status=PermissionStatus(r["status"]),
        granted_by=r.get("granted_by"),
        denied_reason=r.get("denied_reason"),
        decided_at=r.get("decided_at"),
        used_at=r.get("used_at"),
        created_at=r.get("created_at"),
    )


class MySQLLatePermissionRepository(LatePermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_trainee_and_date(self, trainee_id: int, permission_date: date) -> Optional[LatePermissionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM ojt_late_permissions WHERE trainee_id=%s AND permission_date=%s",
                (int(trainee_id), permission_date),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def create(
        self,
        *,
        trainee_id: int,
        supervisor_id: Optional[int],
        permission_date: date,
        reason: str,
        status: PermissionStatus = PermissionStatus.PENDING,
        granted_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ojt_late_permissions(
                    trainee_id, supervisor_id, permission_date, reason, status, granted_by, decided_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(trainee_id), supervisor_id, permission_date, reason, status.value, granted_by, decided_at),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        request_id: int,
        status: PermissionStatus,
        decided_by: int,
        decided_at: datetime,
        denied_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_late_permissions
                SET status=%s, granted_by=%s, decided_at=%s, denied_reason=%s
                WHERE id=%s AND used_at IS NULL
                """,
                (status.value, int(decided_by), decided_at, denied_reason, int(request_id)),
            )
            return cur.rowcount > 0

    def mark_used(self, *, request_id: int, used_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ojt_late_permissions SET used_at=%s WHERE id=%s AND used_at IS NULL",
                (used_at, int(request_id)),
            )
            return cur.rowcount > 0

    def list_for_supervisor(self, supervisor_id: int, *, since: date) -> Sequence[LatePermissionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM ojt_late_permissions
                WHERE supervisor_id=%s AND permission_date >= %s
                ORDER BY (status='pending') DESC, permission_date ASC, created_at ASC
                """,
                (int(supervisor_id), since),
            )
            return [_to_request(r) for r in fetchall(cur)]

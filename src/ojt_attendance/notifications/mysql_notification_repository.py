from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "id, user_id, type, title, message, link, is_read, created_at, read_at"


def _to_notification(r: dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(r["id"]),
        user_id=int(r["user_id"]),
        type=r["type"],
        title=r["title"],
        message=r.get("message") or "",
        link=r.get("link"),
        is_read=bool(r.get("is_read")),
        created_at=r.get("created_at"),
        read_at=r.get("read_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        type: str,
        title: str,
        message: str,
        link: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ojt_notifications(user_id, type, title, message, link, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), type, title, message, link, created_at),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        sql = f"SELECT {_COLUMNS} FROM ojt_notifications WHERE user_id=%s"
        if unread_only:
            sql += " AND is_read=0"
        sql += " ORDER BY created_at DESC, id DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(user_id), int(limit)))
            return [_to_notification(r) for r in fetchall(cur)]

    def unread_count(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM ojt_notifications WHERE user_id=%s AND is_read=0", (int(user_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def mark_read(self, notification_id: int, *, read_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ojt_notifications SET is_read=1, read_at=%s WHERE id=%s AND is_read=0",
                (read_at, int(notification_id)),
            )
            return cur.rowcount > 0

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ojt_notifications SET is_read=1, read_at=%s WHERE user_id=%s AND is_read=0",
                (read_at, int(user_id)),
            )
            return int(cur.rowcount)

from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, first_name, last_name, email, role, supervisor_id, is_active
                FROM users
                WHERE id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return User(
                user_id=int(r["id"]),
                first_name=r.get("first_name") or "",
                last_name=r.get("last_name") or "",
                email=r.get("email") or "",
                role=Role(r["role"]),
                supervisor_id=r.get("supervisor_id"),
                is_active=bool(r.get("is_active", 1)),
            )

    def get_supervisor_id(self, trainee_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT supervisor_id
                FROM ojt_assignments
                WHERE trainee_id=%s AND status='active'
                ORDER BY id DESC
                LIMIT 1
                """,
                (int(trainee_id),),
            )
            r = fetchone(cur)
            if r and r.get("supervisor_id"):
                return int(r["supervisor_id"])

            cur.execute("SELECT supervisor_id FROM users WHERE id=%s", (int(trainee_id),))
            r = fetchone(cur)
            if r and r.get("supervisor_id"):
                return int(r["supervisor_id"])
            return None

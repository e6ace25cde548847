from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_float, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .policy import WorkHours
from .repository import AttendanceRepository

_COLUMNS = """
    a.id, a.trainee_id, a.supervisor_id, a.attendance_date, a.status,
    a.time_in, a.time_out, a.break_start, a.break_end,
    a.total_hours, a.work_hours, a.break_hours, a.overtime_hours,
    a.overtime_approved, a.approved_by, a.approved_at,
    a.late_minutes, a.penalty_hours, a.photo_in, a.photo_out,
    a.latitude_in, a.longitude_in, a.location_in,
    a.latitude_out, a.longitude_out, a.location_out,
    a.face_verified, a.face_verified_out
"""


def _to_record(r: dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        trainee_id=int(r["trainee_id"]),
        supervisor_id=r.get("supervisor_id"),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        break_start=r.get("break_start"),
        break_end=r.get("break_end"),
        total_hours=as_float(r.get("total_hours")),
        work_hours=as_float(r.get("work_hours")),
        break_hours=as_float(r.get("break_hours")),
        overtime_hours=as_float(r.get("overtime_hours")),
        overtime_approved=bool(r.get("overtime_approved")),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        late_minutes=int(r.get("late_minutes") or 0),
        penalty_hours=as_float(r.get("penalty_hours")),
        photo_in=r.get("photo_in"),
        photo_out=r.get("photo_out"),
        latitude_in=as_optional_float(r.get("latitude_in")),
        longitude_in=as_optional_float(r.get("longitude_in")),
        location_in=r.get("location_in"),
        latitude_out=as_optional_float(r.get("latitude_out")),
        longitude_out=as_optional_float(r.get("longitude_out")),
        location_out=r.get("location_out"),
        face_verified=bool(r.get("face_verified")),
        face_verified_out=bool(r.get("face_verified_out")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM ojt_attendance a WHERE a.id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_trainee_and_date(self, trainee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM ojt_attendance a
                WHERE a.trainee_id=%s AND a.attendance_date=%s
                LIMIT 1
                """,
                (int(trainee_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_trainee(self, trainee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM ojt_attendance a
                WHERE a.trainee_id=%s AND a.attendance_date BETWEEN %s AND %s
                ORDER BY a.attendance_date DESC
                """,
                (int(trainee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_supervisor_on(self, supervisor_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM ojt_attendance a
                WHERE a.supervisor_id=%s AND a.attendance_date=%s
                ORDER BY a.time_in DESC
                """,
                (int(supervisor_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_overtime_for_supervisor(self, supervisor_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM ojt_attendance a
                WHERE a.supervisor_id=%s AND a.overtime_hours > 0
                ORDER BY a.overtime_approved ASC, a.attendance_date DESC
                """,
                (int(supervisor_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        trainee_id: int,
        supervisor_id: Optional[int],
        attendance_date: date,
        time_in: datetime,
        status: AttendanceStatus,
        late_minutes: int,
        penalty_hours: float,
        photo_in: Optional[str],
        latitude_in: Optional[float],
        longitude_in: Optional[float],
        location_in: Optional[str],
        face_verified: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ojt_attendance(
                    trainee_id, supervisor_id, attendance_date, time_in, status,
                    photo_in, latitude_in, longitude_in, location_in, face_verified,
                    late_minutes, penalty_hours
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(trainee_id),
                    supervisor_id,
                    attendance_date,
                    time_in,
                    status.value,
                    photo_in,
                    latitude_in,
                    longitude_in,
                    location_in,
                    1 if face_verified else 0,
                    int(late_minutes),
                    penalty_hours,
                ),
            )
            return int(cur.lastrowid)

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        time_out: datetime,
        hours: WorkHours,
        photo_out: Optional[str],
        latitude_out: Optional[float],
        longitude_out: Optional[float],
        location_out: Optional[str],
        face_verified_out: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_attendance
                SET time_out=%s, photo_out=%s, latitude_out=%s, longitude_out=%s,
                    location_out=%s, face_verified_out=%s,
                    total_hours=%s, work_hours=%s, break_hours=%s, overtime_hours=%s
                WHERE id=%s AND time_out IS NULL
                """,
                (
                    time_out,
                    photo_out,
                    latitude_out,
                    longitude_out,
                    location_out,
                    1 if face_verified_out else 0,
                    hours.total_hours,
                    hours.work_hours,
                    hours.break_hours,
                    hours.overtime_hours,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def set_break(self, *, attendance_id: int, break_start: datetime, break_end: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ojt_attendance SET break_start=%s, break_end=%s WHERE id=%s AND time_out IS NULL",
                (break_start, break_end, int(attendance_id)),
            )
            return cur.rowcount > 0

    def mark_absent(self, *, trainee_id: int, supervisor_id: Optional[int], attendance_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ojt_attendance(trainee_id, supervisor_id, attendance_date, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(trainee_id), supervisor_id, attendance_date, AttendanceStatus.ABSENT.value),
            )
            return int(cur.lastrowid)

    def approve_overtime(self, *, attendance_id: int, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_attendance
                SET overtime_approved=1, approved_by=%s, approved_at=%s
                WHERE id=%s AND overtime_approved=0
                """,
                (int(approved_by), approved_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def clear_overtime(self, *, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE ojt_attendance SET overtime_hours=0 WHERE id=%s AND overtime_approved=0",
                (int(attendance_id),),
            )
            return cur.rowcount > 0

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import TimesheetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Timesheet, TimesheetEntry
from .repository import TimesheetRepository
from .workflow import total_hours

_COLUMNS = """
    id, trainee_id, supervisor_id, week_start, week_end, total_hours, status,
    notes, rejection_reason, submitted_at, reviewed_at, reviewed_by
"""


def _to_entry(r: dict[str, Any]) -> TimesheetEntry:
    return TimesheetEntry(
        entry_date=r["entry_date"],
        time_in=normalize_mysql_time(r.get("time_in")),
        time_out=normalize_mysql_time(r.get("time_out")),
        break_hours=as_float(r.get("break_hours")),
        hours_worked=as_float(r.get("hours_worked")),
        tasks_completed=r.get("tasks_completed"),
        notes=r.get("notes"),
    )


def _to_timesheet(r: dict[str, Any], entries: Sequence[TimesheetEntry] = ()) -> Timesheet:
    return Timesheet(
        timesheet_id=int(r["id"]),
        trainee_id=int(r["trainee_id"]),
        supervisor_id=int(r["supervisor_id"]),
        week_start=r["week_start"],
        week_end=r["week_end"],
        total_hours=as_float(r.get("total_hours")),
        status=TimesheetStatus(r["status"]),
        notes=r.get("notes"),
        rejection_reason=r.get("rejection_reason"),
        submitted_at=r.get("submitted_at"),
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=r.get("reviewed_by"),
        entries=tuple(entries),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, cur, row: Optional[dict[str, Any]]) -> Optional[Timesheet]:
        if not row:
            return None
        cur.execute(
            """
            SELECT entry_date, time_in, time_out, break_hours, hours_worked, tasks_completed, notes
            FROM ojt_timesheet_entries
            WHERE timesheet_id=%s
            ORDER BY entry_date ASC
            """,
            (int(row["id"]),),
        )
        return _to_timesheet(row, [_to_entry(e) for e in fetchall(cur)])

    def get_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM ojt_timesheets WHERE id=%s", (int(timesheet_id),))
            return self._load(cur, fetchone(cur))

    def get_for_trainee_and_week(self, trainee_id: int, week_start: date) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM ojt_timesheets WHERE trainee_id=%s AND week_start=%s",
                (int(trainee_id), week_start),
            )
            return self._load(cur, fetchone(cur))

    def list(
        self,
        *,
        supervisor_id: Optional[int] = None,
        trainee_id: Optional[int] = None,
        status: Optional[TimesheetStatus] = None,
        week_start: Optional[date] = None,
    ) -> Sequence[Timesheet]:
        query = f"SELECT {_COLUMNS} FROM ojt_timesheets WHERE 1=1"
        params: list[Any] = []
        if supervisor_id:
            query += " AND supervisor_id=%s"
            params.append(int(supervisor_id))
        if trainee_id:
            query += " AND trainee_id=%s"
            params.append(int(trainee_id))
        if status:
            query += " AND status=%s"
            params.append(status.value)
        if week_start:
            query += " AND week_start=%s"
            params.append(week_start)
        query += " ORDER BY week_start DESC, id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(query, tuple(params))
            return [_to_timesheet(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        trainee_id: int,
        supervisor_id: int,
        week_start: date,
        week_end: date,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ojt_timesheets(trainee_id, supervisor_id, week_start, week_end, notes, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(trainee_id), int(supervisor_id), week_start, week_end, notes, TimesheetStatus.DRAFT.value),
            )
            return int(cur.lastrowid)

    def replace_entries(self, timesheet_id: int, entries: Sequence[TimesheetEntry]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM ojt_timesheet_entries WHERE timesheet_id=%s", (int(timesheet_id),))
            for e in entries:
                cur.execute(
                    """
                    INSERT INTO ojt_timesheet_entries(
                        timesheet_id, entry_date, time_in, time_out, break_hours,
                        hours_worked, tasks_completed, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(timesheet_id),
                        e.entry_date,
                        e.time_in,
                        e.time_out,
                        e.break_hours,
                        e.hours_worked,
                        e.tasks_completed,
                        e.notes,
                    ),
                )
            cur.execute(
                "UPDATE ojt_timesheets SET total_hours=%s WHERE id=%s",
                (total_hours(entries), int(timesheet_id)),
            )

    def update_notes(self, timesheet_id: int, notes: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE ojt_timesheets SET notes=%s WHERE id=%s", (notes, int(timesheet_id)))

    def reopen_as_draft(self, timesheet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_timesheets SET status=%s, rejection_reason=NULL
                WHERE id=%s AND status=%s
                """,
                (TimesheetStatus.DRAFT.value, int(timesheet_id), TimesheetStatus.REJECTED.value),
            )
            return cur.rowcount > 0

    def mark_submitted(self, timesheet_id: int, *, submitted_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_timesheets SET status=%s, submitted_at=%s
                WHERE id=%s AND status IN (%s, %s)
                """,
                (
                    TimesheetStatus.SUBMITTED.value,
                    submitted_at,
                    int(timesheet_id),
                    TimesheetStatus.DRAFT.value,
                    TimesheetStatus.REJECTED.value,
                ),
            )
            return cur.rowcount > 0

    def mark_reviewed(
        self,
        timesheet_id: int,
        *,
        status: TimesheetStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE ojt_timesheets
                SET status=%s, reviewed_by=%s, reviewed_at=%s, rejection_reason=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    rejection_reason,
                    int(timesheet_id),
                    TimesheetStatus.SUBMITTED.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, timesheet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM ojt_timesheets WHERE id=%s", (int(timesheet_id),))
            return cur.rowcount > 0

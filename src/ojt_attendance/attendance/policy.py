"""Attendance policy engine.

Pure functions over an `OJTSchedule`: lateness, penalty tiers, work hours
with the automatic lunch deduction, overtime and net hours. Nothing here
touches storage or the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import minutes_of_day
from ..core.constants import (
    MAJOR_LATE_PENALTY_HOURS,
    MAJOR_LATE_THRESHOLD_MINUTES,
    MINOR_LATE_PENALTY_HOURS,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..schedule.model import OJTSchedule
from .model import AttendanceRecord, WeeklyTotals


@dataclass(frozen=True)
class Lateness:
    late_minutes: int
    penalty_hours: float


@dataclass(frozen=True)
class WorkHours:
    total_hours: float
    work_hours: float
    break_hours: float
    overtime_hours: float


def late_minutes(clock_in: datetime | time, schedule: OJTSchedule) -> int:
    return max(0, minutes_of_day(clock_in) - schedule.start_minutes)


def penalty_hours(minutes_late: int) -> float:
    """Step function: 0 -> 0h, 1..119 -> 0.5h, 120+ -> 4h."""

    if minutes_late >= MAJOR_LATE_THRESHOLD_MINUTES:
        return MAJOR_LATE_PENALTY_HOURS
    if minutes_late >= 1:
        return MINOR_LATE_PENALTY_HOURS
    return 0.0


def assess_lateness(clock_in: datetime | time, schedule: OJTSchedule) -> Lateness:
    minutes = late_minutes(clock_in, schedule)
    return Lateness(late_minutes=minutes, penalty_hours=penalty_hours(minutes))


def lunch_deduction_minutes(time_in: datetime, time_out: datetime, schedule: OJTSchedule) -> int:
    """Lunch is deducted when the worked span reaches the end of the lunch window."""

    lunch_end = datetime.combine(time_in.date(), schedule.lunch_end)
    if time_in < lunch_end <= time_out:
        return schedule.lunch_minutes
    return 0


def _hours(minutes: float) -> float:
    return round(minutes / 60, 2)


def overtime_hours(work_hours: float, schedule: OJTSchedule) -> float:
    return round(max(0.0, work_hours - schedule.daily_hours), 2)


def compute_work_hours(
    time_in: datetime,
    time_out: datetime,
    schedule: OJTSchedule,
    *,
    break_start: Optional[datetime] = None,
    break_end: Optional[datetime] = None,
) -> WorkHours:
    """Gross time minus the schedule's lunch; tracked breaks are reported only."""

    if time_out < time_in:
        raise ValidationError("Clock-out time cannot be earlier than clock-in time")

    gross_minutes = (time_out - time_in).total_seconds() / 60
    work_minutes = max(0.0, gross_minutes - lunch_deduction_minutes(time_in, time_out, schedule))

    tracked_break = timedelta(0)
    if break_start and break_end:
        tracked_break = max(timedelta(0), break_end - break_start)

    work = _hours(work_minutes)
    return WorkHours(
        total_hours=_hours(gross_minutes),
        work_hours=work,
        break_hours=_hours(tracked_break.total_seconds() / 60),
        overtime_hours=overtime_hours(work, schedule),
    )


def net_hours(work: float, penalty: float, overtime: float = 0.0, *, overtime_approved: bool = False) -> float:
    """work - penalty + overtime, where overtime only counts once approved."""

    return round(work - penalty + (overtime if overtime_approved else 0.0), 2)


def record_net_hours(record: AttendanceRecord) -> float:
    return net_hours(
        record.work_hours,
        record.penalty_hours,
        record.overtime_hours,
        overtime_approved=record.overtime_approved,
    )


def summarize_week(records: Iterable[AttendanceRecord], week_start: date) -> WeeklyTotals:
    week_end = week_start + timedelta(days=6)
    in_week = [r for r in records if week_start <= r.attendance_date <= week_end]

    work = sum(r.work_hours for r in in_week)
    penalty = sum(r.penalty_hours for r in in_week)
    approved_ot = sum(r.overtime_hours for r in in_week if r.overtime_approved)
    pending_ot = sum(r.overtime_hours for r in in_week if not r.overtime_approved)

    return WeeklyTotals(
        week_start=week_start,
        week_end=week_end,
        days_present=sum(1 for r in in_week if r.status != AttendanceStatus.ABSENT and r.time_in),
        late_minutes=sum(r.late_minutes for r in in_week),
        work_hours=round(work, 2),
        penalty_hours=round(penalty, 2),
        approved_overtime_hours=round(approved_ot, 2),
        pending_overtime_hours=round(pending_ot, 2),
        net_hours=net_hours(work, penalty, approved_ot, overtime_approved=True),
    )

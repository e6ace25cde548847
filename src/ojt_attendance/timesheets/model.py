from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_clock_time, parse_datetime, parse_iso_date
from ..core.enums import TimesheetStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimesheetEntry:
    """One day of a weekly timesheet."""

    entry_date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    break_hours: float = 0.0
    hours_worked: float = 0.0
    tasks_completed: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TimesheetEntry":
        raw_date = str(payload.get("entry_date") or "").strip()
        if not raw_date:
            raise ValidationError("Entry date is required")
        try:
            entry_date = parse_iso_date(raw_date)
            time_in = parse_clock_time(str(payload["time_in"])) if payload.get("time_in") else None
            time_out = parse_clock_time(str(payload["time_out"])) if payload.get("time_out") else None
            break_hours = float(payload.get("break_hours") or 0)
            hours_worked = float(payload.get("hours_worked") or 0)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid timesheet entry for {raw_date}")
        return cls(
            entry_date=entry_date,
            time_in=time_in,
            time_out=time_out,
            break_hours=break_hours,
            hours_worked=hours_worked,
            tasks_completed=(payload.get("tasks_completed") or None),
            notes=(payload.get("notes") or None),
        )


@dataclass(frozen=True)
class Timesheet:
    """Domain entity: one trainee's week, Monday to Sunday."""

    timesheet_id: int
    trainee_id: int
    supervisor_id: int
    week_start: date
    week_end: date
    total_hours: float = 0.0
    status: TimesheetStatus = TimesheetStatus.DRAFT
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    entries: tuple[TimesheetEntry, ...] = field(default_factory=tuple)

    @property
    def editable(self) -> bool:
        return self.status in {TimesheetStatus.DRAFT, TimesheetStatus.REJECTED}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Timesheet":
        def _dt(key: str) -> Optional[datetime]:
            value = payload.get(key)
            return parse_datetime(str(value)) if value else None

        return cls(
            timesheet_id=int(payload.get("timesheet_id") or payload.get("id") or 0),
            trainee_id=int(payload["trainee_id"]),
            supervisor_id=int(payload.get("supervisor_id") or 0),
            week_start=parse_iso_date(str(payload["week_start"])),
            week_end=parse_iso_date(str(payload["week_end"])),
            total_hours=float(payload.get("total_hours") or 0),
            status=TimesheetStatus(payload.get("status") or TimesheetStatus.DRAFT.value),
            notes=payload.get("notes"),
            rejection_reason=payload.get("rejection_reason"),
            submitted_at=_dt("submitted_at"),
            reviewed_at=_dt("reviewed_at"),
            reviewed_by=payload.get("reviewed_by"),
            entries=tuple(TimesheetEntry.from_payload(e) for e in payload.get("entries") or ()),
        )

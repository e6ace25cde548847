from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_datetime, parse_iso_date
from ..core.enums import AttendanceStatus, ClockState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one trainee's attendance for one calendar date."""

    attendance_id: int
    trainee_id: int
    attendance_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    supervisor_id: Optional[int] = None
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    total_hours: float = 0.0
    work_hours: float = 0.0
    break_hours: float = 0.0
    overtime_hours: float = 0.0
    overtime_approved: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    late_minutes: int = 0
    penalty_hours: float = 0.0
    photo_in: Optional[str] = None
    photo_out: Optional[str] = None
    latitude_in: Optional[float] = None
    longitude_in: Optional[float] = None
    location_in: Optional[str] = None
    latitude_out: Optional[float] = None
    longitude_out: Optional[float] = None
    location_out: Optional[str] = None
    face_verified: bool = False
    face_verified_out: bool = False

    @property
    def on_break(self) -> bool:
        return self.break_start is not None and self.break_end is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AttendanceRecord":
        """Rebuild a record from the API's JSON representation."""

        names = {f.name for f in fields(cls)}
        data = {k: v for k, v in payload.items() if k in names}
        data["attendance_id"] = int(payload.get("attendance_id") or payload.get("id") or 0)
        data["trainee_id"] = int(data.get("trainee_id") or 0)
        data["attendance_date"] = parse_iso_date(str(data["attendance_date"]))
        data["status"] = AttendanceStatus(data.get("status") or AttendanceStatus.PRESENT.value)
        for key in ("time_in", "time_out", "break_start", "break_end", "approved_at"):
            if data.get(key):
                data[key] = parse_datetime(str(data[key]))
        for key in ("total_hours", "work_hours", "break_hours", "overtime_hours", "penalty_hours"):
            data[key] = float(data.get(key) or 0)
        data["late_minutes"] = int(data.get("late_minutes") or 0)
        for key in ("overtime_approved", "face_verified", "face_verified_out"):
            data[key] = bool(data.get(key))
        return cls(**data)


@dataclass(frozen=True)
class ClockEvidence:
    """What a trainee submits with a clock-in/out: photo plus optional location."""

    photo: Optional[str]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[str] = None
    face_verified: bool = False


@dataclass(frozen=True)
class ClockStatus:
    """Today's clock status as shown to the trainee."""

    state: ClockState
    record: Optional[AttendanceRecord] = None

    @property
    def has_record(self) -> bool:
        return self.record is not None

    @property
    def clocked_in(self) -> bool:
        return self.state in {ClockState.WORKING, ClockState.ON_BREAK}

    @property
    def clocked_out(self) -> bool:
        return self.record is not None and self.record.time_out is not None

    @property
    def on_break(self) -> bool:
        return self.state == ClockState.ON_BREAK

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ClockStatus":
        record = payload.get("record")
        return cls(
            state=ClockState(payload["state"]),
            record=AttendanceRecord.from_payload(record) if record else None,
        )


@dataclass(frozen=True)
class WeeklyTotals:
    """Read-model: one trainee's week of attendance."""

    week_start: date
    week_end: date
    days_present: int
    late_minutes: int
    work_hours: float
    penalty_hours: float
    approved_overtime_hours: float
    pending_overtime_hours: float
    net_hours: float

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord
from .policy import WorkHours


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_trainee_and_date(self, trainee_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_trainee(self, trainee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_supervisor_on(self, supervisor_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_overtime_for_supervisor(self, supervisor_id: int) -> Sequence[AttendanceRecord]:
        """Records with overtime_hours > 0, unapproved first."""

        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def set_break(self, *, attendance_id: int, break_start: datetime, break_end: Optional[datetime]) -> bool:
        raise NotImplementedError

    def mark_absent(self, *, trainee_id: int, supervisor_id: Optional[int], attendance_date: date) -> int:
        raise NotImplementedError

    def approve_overtime(self, *, attendance_id: int, approved_by: int, approved_at: datetime) -> bool:
        raise NotImplementedError

    def clear_overtime(self, *, attendance_id: int) -> bool:
        raise NotImplementedError

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import minutes_of_day, month_bounds, week_bounds
from ..common.validators import require_positive_id
from ..core.enums import ClockAction
from ..core.exceptions import AuthorizationError, NotFoundError, PermissionRequiredError, ValidationError
from ..late_permissions.model import LatePermissionRequest
from ..late_permissions.repository import LatePermissionRepository
from ..notifications.service import NotificationService
from ..schedule.model import OJTSchedule
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, ClockEvidence, ClockStatus, WeeklyTotals
from .photos import PhotoStore
from .policy import compute_work_hours, summarize_week
from .repository import AttendanceRepository
from .workflow import clock_state, next_state

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        permissions: LatePermissionRepository,
        photos: PhotoStore,
        *,
        schedule: OJTSchedule | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        notifications: NotificationService | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._attendance = attendance
        self._users = users
        self._permissions = permissions
        self._photos = photos
        self._schedule = schedule or OJTSchedule()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._notifications = notifications
        self._clock = clock

    @property
    def schedule(self) -> OJTSchedule:
        return self._schedule

    # Queries

    def get_status(self, trainee_id: int, *, today: Optional[date] = None) -> ClockStatus:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        record = self._attendance.get_for_trainee_and_date(trainee_id, today or self._clock().date())
        return ClockStatus(state=clock_state(record), record=record)

    def get_today_for_trainee(self, trainee_id: int, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        return self._attendance.get_for_trainee_and_date(trainee_id, today or self._clock().date())

    def get_today_for_supervisor(self, supervisor_id: int, *, today: Optional[date] = None) -> Sequence[AttendanceRecord]:
        supervisor_id = require_positive_id(supervisor_id, "Supervisor ID")
        return self._attendance.list_for_supervisor_on(supervisor_id, today or self._clock().date())

    def get_history(
        self,
        trainee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        default_start, default_end = month_bounds(today or self._clock().date())
        start_date = start_date or default_start
        end_date = end_date or default_end
        if end_date < start_date:
            raise ValidationError("End date cannot be earlier than start date")
        return self._attendance.list_for_trainee(trainee_id, start_date=start_date, end_date=end_date)

    def weekly_summary(self, trainee_id: int, *, week_start: Optional[date] = None) -> WeeklyTotals:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        start, end = week_bounds(week_start or self._clock().date())
        records = self._attendance.list_for_trainee(trainee_id, start_date=start, end_date=end)
        return summarize_week(records, start)

    def pending_overtime(self, supervisor_id: int) -> Sequence[AttendanceRecord]:
        supervisor_id = require_positive_id(supervisor_id, "Supervisor ID")
        return self._attendance.list_overtime_for_supervisor(supervisor_id)

    # Clock actions

    def clock_in(
        self,
        trainee_id: int,
        evidence: ClockEvidence,
        *,
        now: Optional[datetime] = None,
        reported_late_minutes: Optional[int] = None,
        reported_penalty_hours: Optional[float] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        if not evidence.photo:
            raise ValidationError("A photo is required to clock in")

        if not self._users.get_by_id(trainee_id):
            raise NotFoundError("Trainee not found")

        existing = self._attendance.get_for_trainee_and_date(trainee_id, today)
        next_state(clock_state(existing), ClockAction.CLOCK_IN)

        minutes = minutes_of_day(now)
        if minutes < self._schedule.earliest_clock_in_minutes:
            earliest = self._schedule.earliest_clock_in_minutes
            raise ValidationError(
                f"Clock-in not available yet. You can clock in starting at {earliest // 60:02d}:{earliest % 60:02d}"
            )

        permission: Optional[LatePermissionRequest] = None
        if minutes >= self._schedule.cutoff_minutes:
            permission = self._permissions.get_for_trainee_and_date(trainee_id, today)
            if not permission or not permission.usable:
                raise PermissionRequiredError(
                    "Clock-in after the cutoff requires supervisor approval",
                    existing_status=permission.status.value if permission else None,
                )

        decision = self._factory.for_clock_in(now=now, schedule=self._schedule).decide_clock_in(
            now=now, schedule=self._schedule
        )
        self._warn_on_mismatch(
            trainee_id,
            decision.late_minutes,
            decision.penalty_hours,
            reported_late_minutes,
            reported_penalty_hours,
        )

        photo_path = self._photos.save(evidence.photo, trainee_id=trainee_id, kind="in", now=now)
        attendance_id = self._attendance.create_clock_in(
            trainee_id=trainee_id,
            supervisor_id=self._users.get_supervisor_id(trainee_id),
            attendance_date=today,
            time_in=now,
            status=decision.status,
            late_minutes=decision.late_minutes,
            penalty_hours=decision.penalty_hours,
            photo_in=photo_path,
            latitude_in=evidence.latitude,
            longitude_in=evidence.longitude,
            location_in=evidence.location,
            face_verified=evidence.face_verified,
        )

        if permission is not None:
            self._permissions.mark_used(request_id=permission.request_id, used_at=now)

        logger.info(
            "Trainee %s clocked in at %s (%s)",
            trainee_id,
            now.strftime("%H:%M:%S"),
            decision.note or decision.status.value,
        )
        record = self._require(attendance_id)
        if self._notifications:
            self._notifications.clocked_in(record)
        return record

    def clock_out(self, trainee_id: int, evidence: ClockEvidence, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        if not evidence.photo:
            raise ValidationError("A photo is required to clock out")

        record = self._attendance.get_for_trainee_and_date(trainee_id, now.date())
        next_state(clock_state(record), ClockAction.CLOCK_OUT)

        hours = compute_work_hours(
            record.time_in,
            now,
            self._schedule,
            break_start=record.break_start,
            break_end=record.break_end,
        )
        photo_path = self._photos.save(evidence.photo, trainee_id=trainee_id, kind="out", now=now)
        ok = self._attendance.update_clock_out(
            attendance_id=record.attendance_id,
            time_out=now,
            hours=hours,
            photo_out=photo_path,
            latitude_out=evidence.latitude,
            longitude_out=evidence.longitude,
            location_out=evidence.location,
            face_verified_out=evidence.face_verified,
        )
        if not ok:
            raise ValidationError("Clock-out failed")

        logger.info(
            "Trainee %s clocked out at %s (work %.2fh, overtime %.2fh)",
            trainee_id,
            now.strftime("%H:%M:%S"),
            hours.work_hours,
            hours.overtime_hours,
        )
        record = self._require(record.attendance_id)
        if self._notifications:
            self._notifications.clocked_out(record)
        return record

    def start_break(self, trainee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        record = self._attendance.get_for_trainee_and_date(trainee_id, now.date())
        next_state(clock_state(record), ClockAction.BREAK_START)

        if not self._attendance.set_break(attendance_id=record.attendance_id, break_start=now, break_end=None):
            raise ValidationError("Failed to start break")
        record = self._require(record.attendance_id)
        if self._notifications:
            self._notifications.break_started(record)
        return record

    def end_break(self, trainee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        record = self._attendance.get_for_trainee_and_date(trainee_id, now.date())
        next_state(clock_state(record), ClockAction.BREAK_END)

        if not self._attendance.set_break(
            attendance_id=record.attendance_id, break_start=record.break_start, break_end=now
        ):
            raise ValidationError("Failed to end break")
        record = self._require(record.attendance_id)
        if self._notifications:
            self._notifications.break_ended(record)
        return record

    # Overtime review

    def decide_overtime(
        self,
        *,
        attendance_id: int,
        approved_by: int,
        approved: bool = True,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        attendance_id = require_positive_id(attendance_id, "Attendance ID")
        approved_by = require_positive_id(approved_by, "Approver ID")

        reviewer = self._users.get_by_id(approved_by)
        if not reviewer or not reviewer.role.can_review:
            raise AuthorizationError("Only supervisors can review overtime")

        record = self._require(attendance_id)
        if record.overtime_hours <= 0:
            raise ValidationError("No overtime to review for this record")
        if record.overtime_approved:
            raise ValidationError("Overtime is already approved")

        if approved:
            ok = self._attendance.approve_overtime(attendance_id=attendance_id, approved_by=approved_by, approved_at=now)
        else:
            ok = self._attendance.clear_overtime(attendance_id=attendance_id)
        if not ok:
            raise ValidationError("Failed to update overtime")

        logger.info(
            "Overtime on attendance %s %s by %s",
            attendance_id,
            "approved" if approved else "rejected",
            approved_by,
        )
        decided = self._require(attendance_id)
        if self._notifications:
            self._notifications.overtime_decided(decided, approved=approved, hours=record.overtime_hours)
        return decided

    def _require(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    @staticmethod
    def _warn_on_mismatch(
        trainee_id: int,
        late_minutes: int,
        penalty_hours: float,
        reported_late_minutes: Optional[int],
        reported_penalty_hours: Optional[float],
    ) -> None:
        if reported_late_minutes is None and reported_penalty_hours is None:
            return
        if reported_late_minutes not in (None, late_minutes) or (
            reported_penalty_hours is not None and abs(float(reported_penalty_hours) - penalty_hours) > 1e-9
        ):
            logger.warning(
                "Client lateness for trainee %s differs from server (client %s min/%sh, server %s min/%sh)",
                trainee_id,
                reported_late_minutes,
                reported_penalty_hours,
                late_minutes,
                penalty_hours,
            )

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import week_bounds
from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import TimesheetAction, TimesheetStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Timesheet, TimesheetEntry
from .repository import TimesheetRepository
from .workflow import next_status, with_computed_hours

logger = logging.getLogger(__name__)


class TimesheetService:
    """Weekly timesheets: trainee drafts and submits, supervisor approves or rejects."""

    def __init__(
        self,
        timesheets: TimesheetRepository,
        users: UserRepository,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._timesheets = timesheets
        self._users = users
        self._clock = clock

    def list_timesheets(
        self,
        *,
        supervisor_id: Optional[int] = None,
        trainee_id: Optional[int] = None,
        status: Optional[str] = None,
        week_start: Optional[date] = None,
    ) -> Sequence[Timesheet]:
        try:
            status_filter = TimesheetStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Unknown timesheet status: {status}")
        return self._timesheets.list(
            supervisor_id=supervisor_id,
            trainee_id=trainee_id,
            status=status_filter,
            week_start=week_start,
        )

    def pending_for_supervisor(self, supervisor_id: int) -> Sequence[Timesheet]:
        supervisor_id = require_positive_id(supervisor_id, "Supervisor ID")
        return self._timesheets.list(supervisor_id=supervisor_id, status=TimesheetStatus.SUBMITTED)

    def get(self, timesheet_id: int) -> Timesheet:
        timesheet = self._timesheets.get_by_id(require_positive_id(timesheet_id, "Timesheet ID"))
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        return timesheet

    def create(
        self,
        *,
        trainee_id: int,
        week_start: Optional[date],
        week_end: Optional[date] = None,
        supervisor_id: Optional[int] = None,
        notes: Optional[str] = None,
        entries: Sequence[TimesheetEntry] = (),
    ) -> Timesheet:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        if week_start is None:
            raise ValidationError("Week start is required")
        week_end = week_end or week_start + timedelta(days=6)
        if week_end < week_start:
            raise ValidationError("Week end cannot be earlier than week start")

        if self._timesheets.get_for_trainee_and_week(trainee_id, week_start):
            raise ValidationError("Timesheet already exists for this week")

        supervisor_id = supervisor_id or self._users.get_supervisor_id(trainee_id)
        if not supervisor_id:
            raise ValidationError("No active supervisor assignment found")
        prepared = self._prepare_entries(entries, week_start, week_end)

        timesheet_id = self._timesheets.create(
            trainee_id=trainee_id,
            supervisor_id=int(supervisor_id),
            week_start=week_start,
            week_end=week_end,
            notes=(notes or "").strip() or None,
        )
        self._timesheets.replace_entries(timesheet_id, prepared)
        logger.info("Timesheet %s created for trainee %s (week of %s)", timesheet_id, trainee_id, week_start)
        return self.get(timesheet_id)

    def current_week(self, trainee_id: int, *, today: Optional[date] = None) -> Timesheet:
        """Get or create this week's draft with one empty entry per day."""

        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        week_start, week_end = week_bounds(today or self._clock().date())
        existing = self._timesheets.get_for_trainee_and_week(trainee_id, week_start)
        if existing:
            return existing

        days = [TimesheetEntry(entry_date=week_start + timedelta(days=i)) for i in range(7)]
        return self.create(trainee_id=trainee_id, week_start=week_start, week_end=week_end, entries=days)

    def update(
        self,
        timesheet_id: int,
        *,
        notes: Optional[str] = None,
        entries: Optional[Sequence[TimesheetEntry]] = None,
    ) -> Timesheet:
        timesheet = self.get(timesheet_id)
        next_status(timesheet.status, TimesheetAction.EDIT)
        prepared = None
        if entries is not None:
            prepared = self._prepare_entries(entries, timesheet.week_start, timesheet.week_end)

        if notes is not None:
            self._timesheets.update_notes(timesheet.timesheet_id, notes.strip() or None)
        if prepared is not None:
            self._timesheets.replace_entries(timesheet.timesheet_id, prepared)
        if timesheet.status == TimesheetStatus.REJECTED:
            self._timesheets.reopen_as_draft(timesheet.timesheet_id)

        return self.get(timesheet.timesheet_id)

    def delete(self, timesheet_id: int) -> None:
        timesheet = self.get(timesheet_id)
        if timesheet.status == TimesheetStatus.APPROVED:
            raise ValidationError("Cannot delete approved timesheet")
        if not self._timesheets.delete(timesheet.timesheet_id):
            raise ValidationError("Failed to delete timesheet")
        logger.info("Timesheet %s deleted", timesheet.timesheet_id)

    def submit(self, timesheet_id: int, *, now: Optional[datetime] = None) -> Timesheet:
        timesheet = self.get(timesheet_id)
        next_status(timesheet.status, TimesheetAction.SUBMIT)

        if not self._timesheets.mark_submitted(timesheet.timesheet_id, submitted_at=now or self._clock()):
            raise ValidationError("Timesheet cannot be submitted")
        logger.info("Timesheet %s submitted", timesheet.timesheet_id)
        return self.get(timesheet.timesheet_id)

    def approve(self, timesheet_id: int, *, reviewer_id: int, now: Optional[datetime] = None) -> Timesheet:
        return self._review(timesheet_id, reviewer_id=reviewer_id, action=TimesheetAction.APPROVE, now=now)

    def reject(
        self,
        timesheet_id: int,
        *,
        reviewer_id: int,
        reason: str,
        now: Optional[datetime] = None,
    ) -> Timesheet:
        reason = require_non_empty(reason, "Rejection reason")
        return self._review(timesheet_id, reviewer_id=reviewer_id, action=TimesheetAction.REJECT, reason=reason, now=now)

    def _review(
        self,
        timesheet_id: int,
        *,
        reviewer_id: int,
        action: TimesheetAction,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Timesheet:
        reviewer_id = require_positive_id(reviewer_id, "Reviewer ID")
        reviewer = self._users.get_by_id(reviewer_id)
        if not reviewer or not reviewer.role.can_review:
            raise AuthorizationError("Only supervisors can review timesheets")

        timesheet = self.get(timesheet_id)
        status = next_status(timesheet.status, action)

        ok = self._timesheets.mark_reviewed(
            timesheet.timesheet_id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=now or self._clock(),
            rejection_reason=reason,
        )
        if not ok:
            raise ValidationError("Failed to update timesheet")
        logger.info("Timesheet %s %s by %s", timesheet.timesheet_id, status.value, reviewer_id)
        return self.get(timesheet.timesheet_id)

    @staticmethod
    def _prepare_entries(entries: Sequence[TimesheetEntry], week_start: date, week_end: date) -> list[TimesheetEntry]:
        seen: set[date] = set()
        prepared: list[TimesheetEntry] = []
        for entry in entries:
            if not (week_start <= entry.entry_date <= week_end):
                raise ValidationError(f"Entry date {entry.entry_date:%Y-%m-%d} is outside the timesheet week")
            if entry.entry_date in seen:
                raise ValidationError(f"Duplicate entry for {entry.entry_date:%Y-%m-%d}")
            seen.add(entry.entry_date)
            prepared.append(with_computed_hours(entry))
        return sorted(prepared, key=lambda e: e.entry_date)

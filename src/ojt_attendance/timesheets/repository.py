from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimesheetStatus
from .model import Timesheet, TimesheetEntry


class TimesheetRepository(Protocol):
    def get_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        """Timesheet with its entries ordered by date."""

        raise NotImplementedError

    def get_for_trainee_and_week(self, trainee_id: int, week_start: date) -> Optional[Timesheet]:
        raise NotImplementedError

    def list(
        self,
        *,
        supervisor_id: Optional[int] = None,
        trainee_id: Optional[int] = None,
        status: Optional[TimesheetStatus] = None,
        week_start: Optional[date] = None,
    ) -> Sequence[Timesheet]:
        """Newest week first. Entries are not loaded."""

        raise NotImplementedError

    def create(
        self,
        *,
        trainee_id: int,
        supervisor_id: int,
        week_start: date,
        week_end: date,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def replace_entries(self, timesheet_id: int, entries: Sequence[TimesheetEntry]) -> None:
        """Swap the entry set and recompute `total_hours` from it."""

        raise NotImplementedError

    def update_notes(self, timesheet_id: int, notes: Optional[str]) -> None:
        raise NotImplementedError

    def reopen_as_draft(self, timesheet_id: int) -> bool:
        raise NotImplementedError

    def mark_submitted(self, timesheet_id: int, *, submitted_at: datetime) -> bool:
        raise NotImplementedError

    def mark_reviewed(
        self,
        timesheet_id: int,
        *,
        status: TimesheetStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, timesheet_id: int) -> bool:
        raise NotImplementedError

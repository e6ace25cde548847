from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import TimesheetAction
from ..timesheets.model import Timesheet, TimesheetEntry
from ..timesheets.workflow import next_status
from .actions import ActionOutcome, ActionRunner
from .api import AttendanceApiClient


class TraineeTimesheet:
    """This week's timesheet as seen by the trainee."""

    def __init__(self, api: AttendanceApiClient, trainee_id: int, *, runner: Optional[ActionRunner] = None):
        self._api = api
        self.trainee_id = int(trainee_id)
        self.runner = runner or ActionRunner()
        self.timesheet: Optional[Timesheet] = None

    def refresh(self) -> Timesheet:
        self.timesheet = self._api.current_week_timesheet(self.trainee_id)
        return self.timesheet

    def _current(self) -> Timesheet:
        return self.timesheet or self.refresh()

    def save(self, *, entries: Optional[Sequence[TimesheetEntry]] = None, notes: Optional[str] = None) -> ActionOutcome:
        def _do() -> Timesheet:
            current = self._current()
            next_status(current.status, TimesheetAction.EDIT)
            return self._api.update_timesheet(current.timesheet_id, notes=notes, entries=entries)

        outcome = self.runner.run(_do, success="Timesheet saved")
        if outcome.ok:
            self.refresh()
        return outcome

    def submit(self) -> ActionOutcome:
        def _do() -> Timesheet:
            current = self._current()
            next_status(current.status, TimesheetAction.SUBMIT)
            return self._api.submit_timesheet(current.timesheet_id)

        outcome = self.runner.run(_do, success="Timesheet submitted for approval")
        if outcome.ok:
            self.refresh()
        return outcome

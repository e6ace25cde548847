"""Supervisor review desk: late permissions, overtime and weekly timesheets."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..common.validators import require_non_empty
from ..late_permissions.model import LatePermissionRequest
from ..timesheets.model import Timesheet
from .actions import ActionOutcome, ActionRunner
from .api import AttendanceApiClient


class SupervisorDesk:
    def __init__(self, api: AttendanceApiClient, supervisor_id: int, *, runner: Optional[ActionRunner] = None):
        self._api = api
        self.supervisor_id = int(supervisor_id)
        self.runner = runner or ActionRunner()

        self.late_requests: list[LatePermissionRequest] = []
        self.overtime: list[AttendanceRecord] = []
        self.timesheets: list[Timesheet] = []

    def refresh(self) -> None:
        self.late_requests = self._api.pending_late_requests(self.supervisor_id)
        self.overtime = self._api.pending_overtime(self.supervisor_id)
        self.timesheets = self._api.pending_timesheets(self.supervisor_id)

    def _run(self, action, *, success: str) -> ActionOutcome:
        outcome = self.runner.run(action, success=success)
        if outcome.ok:
            self.refresh()
        return outcome

    def grant_late(self, trainee_id: int, permission_date: Optional[date] = None) -> ActionOutcome:
        return self._run(
            lambda: self._api.grant_late_permission(
                trainee_id,
                granted_by=self.supervisor_id,
                approved=True,
                permission_date=permission_date,
            ),
            success="Late permission approved",
        )

    def deny_late(
        self,
        trainee_id: int,
        permission_date: Optional[date] = None,
        *,
        reason: Optional[str] = None,
    ) -> ActionOutcome:
        return self._run(
            lambda: self._api.grant_late_permission(
                trainee_id,
                granted_by=self.supervisor_id,
                approved=False,
                permission_date=permission_date,
                denied_reason=reason,
            ),
            success="Late permission denied",
        )

    def approve_overtime(self, attendance_id: int) -> ActionOutcome:
        return self._run(
            lambda: self._api.approve_overtime(attendance_id, approved_by=self.supervisor_id, approved=True),
            success="Overtime approved",
        )

    def reject_overtime(self, attendance_id: int) -> ActionOutcome:
        return self._run(
            lambda: self._api.approve_overtime(attendance_id, approved_by=self.supervisor_id, approved=False),
            success="Overtime rejected",
        )

    def approve_timesheet(self, timesheet_id: int) -> ActionOutcome:
        return self._run(
            lambda: self._api.approve_timesheet(timesheet_id, reviewer_id=self.supervisor_id),
            success="Timesheet approved",
        )

    def reject_timesheet(self, timesheet_id: int, reason: str) -> ActionOutcome:
        def _do() -> Timesheet:
            text = require_non_empty(reason, "Rejection reason")
            return self._api.reject_timesheet(timesheet_id, reviewer_id=self.supervisor_id, reason=text)

        return self._run(_do, success="Timesheet rejected")

"""Trainee-side clock workflow.

Every mutation goes to the API and the status is refetched afterwards;
local state is never changed ahead of the server's answer. Obvious
mistakes (missing photo, empty reason, wrong state) are caught before any
request is made.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.model import AttendanceRecord, ClockStatus, WeeklyTotals
from ..attendance.policy import Lateness, assess_lateness
from ..attendance.workflow import next_state
from ..common.validators import require_non_empty
from ..core.enums import ClockAction, ClockState
from ..core.exceptions import PermissionRequiredError, ValidationError
from ..geo.resolver import GeolocationResolver, ResolvedLocation
from ..late_permissions.model import LatePermissionRequest
from ..schedule.model import OJTSchedule
from .actions import ActionOutcome, ActionRunner
from .api import AttendanceApiClient

logger = logging.getLogger(__name__)


class AttendanceClock:
    def __init__(
        self,
        api: AttendanceApiClient,
        trainee_id: int,
        *,
        schedule: Optional[OJTSchedule] = None,
        resolver: Optional[GeolocationResolver] = None,
        runner: Optional[ActionRunner] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._api = api
        self.trainee_id = int(trainee_id)
        self.schedule = schedule or OJTSchedule()
        self._resolver = resolver
        self.runner = runner or ActionRunner()
        self._now = now

        self.status = ClockStatus(state=ClockState.NOT_CLOCKED)
        self.permission_flow_open = False
        self.permission_status: Optional[str] = None

    @property
    def state(self) -> ClockState:
        return self.status.state

    @property
    def record(self) -> Optional[AttendanceRecord]:
        return self.status.record

    def refresh(self) -> ClockStatus:
        self.status = self._api.get_status(self.trainee_id)
        return self.status

    def lateness_preview(self) -> Lateness:
        return assess_lateness(self._now(), self.schedule)

    def weekly_summary(self, week_start: Optional[date] = None) -> WeeklyTotals:
        return self._api.weekly_summary(self.trainee_id, week_start=week_start)

    def _locate(self) -> Optional[ResolvedLocation]:
        return self._resolver.resolve() if self._resolver else None

    def _guard(self, action: ClockAction) -> None:
        next_state(self.status.state, action)

    def _after_success(self, outcome: ActionOutcome) -> ActionOutcome:
        if outcome.ok:
            self.refresh()
        return outcome

    def clock_in(self, photo: Optional[str], *, face_verified: bool = False) -> ActionOutcome[AttendanceRecord]:
        def _do() -> AttendanceRecord:
            if not photo:
                raise ValidationError("Please take a photo before clocking in")
            self._guard(ClockAction.CLOCK_IN)
            lateness = self.lateness_preview()
            return self._api.clock_in(
                self.trainee_id,
                photo=photo,
                late_minutes=lateness.late_minutes,
                penalty_hours=lateness.penalty_hours,
                location=self._locate(),
                face_verified=face_verified,
            )

        outcome = self.runner.run(_do, success="Clocked in successfully")
        if isinstance(outcome.error, PermissionRequiredError):
            self.permission_flow_open = True
            self.permission_status = outcome.error.existing_status
            logger.info("Clock-in blocked by late cutoff (request status: %s)", self.permission_status)
        return self._after_success(outcome)

    def clock_out(self, photo: Optional[str], *, face_verified: bool = False) -> ActionOutcome[AttendanceRecord]:
        def _do() -> AttendanceRecord:
            if not photo:
                raise ValidationError("Please take a photo before clocking out")
            self._guard(ClockAction.CLOCK_OUT)
            return self._api.clock_out(
                self.trainee_id,
                photo=photo,
                location=self._locate(),
                face_verified=face_verified,
            )

        return self._after_success(self.runner.run(_do, success="Clocked out successfully"))

    def start_break(self) -> ActionOutcome[AttendanceRecord]:
        def _do() -> AttendanceRecord:
            self._guard(ClockAction.BREAK_START)
            return self._api.break_start(self.trainee_id)

        return self._after_success(self.runner.run(_do, success="Break started"))

    def end_break(self) -> ActionOutcome[AttendanceRecord]:
        def _do() -> AttendanceRecord:
            self._guard(ClockAction.BREAK_END)
            return self._api.break_end(self.trainee_id)

        return self._after_success(self.runner.run(_do, success="Break ended"))

    def request_late_permission(self, reason: str) -> ActionOutcome[LatePermissionRequest]:
        def _do() -> LatePermissionRequest:
            text = require_non_empty(reason, "Reason")
            return self._api.request_late_permission(self.trainee_id, reason=text)

        outcome = self.runner.run(_do, success="Late permission request sent to your supervisor")
        if outcome.ok and outcome.result is not None:
            self.permission_status = outcome.result.status.value
        return outcome

    def close_permission_flow(self) -> None:
        self.permission_flow_open = False

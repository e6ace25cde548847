from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedule.model import OJTSchedule
from .base import AttendanceStrategy, ClockInDecision


class OnTimeStrategy(AttendanceStrategy):
    """Clock-in at or before the scheduled start."""

    def decide_clock_in(self, *, now: datetime, schedule: OJTSchedule) -> ClockInDecision:
        return ClockInDecision(status=AttendanceStatus.PRESENT)

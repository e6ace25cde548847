from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...schedule.model import OJTSchedule
from ..policy import assess_lateness
from .base import AttendanceStrategy, ClockInDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in: carries late minutes and the tiered penalty."""

    def decide_clock_in(self, *, now: datetime, schedule: OJTSchedule) -> ClockInDecision:
        lateness = assess_lateness(now, schedule)
        return ClockInDecision(
            status=AttendanceStatus.LATE,
            late_minutes=lateness.late_minutes,
            penalty_hours=lateness.penalty_hours,
            note=f"{lateness.late_minutes} min late, penalty {lateness.penalty_hours:g}h",
        )

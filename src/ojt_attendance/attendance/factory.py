from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..schedule.model import OJTSchedule
from .policy import late_minutes
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, schedule: OJTSchedule) -> AttendanceStrategy:
        if late_minutes(now, schedule) > 0:
            return LateStrategy()
        return OnTimeStrategy()

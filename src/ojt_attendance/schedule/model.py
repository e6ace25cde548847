from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any

from ..common.datetime_utils import parse_clock_time


@dataclass(frozen=True)
class OJTSchedule:
    """Fixed daily OJT schedule.

    The same object drives lateness (measured from `start`), the clock-in
    window (`start - early_clock_in_minutes`), the late-permission gate
    (`late_cutoff`) and the automatic lunch deduction.
    """

    start: time = time(9, 0)
    end: time = time(18, 0)
    late_cutoff: time = time(18, 0)
    early_clock_in_minutes: int = 30
    lunch_start: time = time(12, 0)
    lunch_end: time = time(13, 0)
    daily_hours: float = 8.0

    @property
    def start_minutes(self) -> int:
        return self.start.hour * 60 + self.start.minute

    @property
    def earliest_clock_in_minutes(self) -> int:
        return self.start_minutes - self.early_clock_in_minutes

    @property
    def cutoff_minutes(self) -> int:
        return self.late_cutoff.hour * 60 + self.late_cutoff.minute

    @property
    def lunch_minutes(self) -> int:
        return (self.lunch_end.hour * 60 + self.lunch_end.minute) - (
            self.lunch_start.hour * 60 + self.lunch_start.minute
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "OJTSchedule":
        default = cls()
        return cls(
            start=parse_clock_time(getattr(settings, "OJT_START_TIME", "09:00")),
            end=parse_clock_time(getattr(settings, "OJT_END_TIME", "18:00")),
            late_cutoff=parse_clock_time(getattr(settings, "OJT_LATE_CUTOFF", "18:00")),
            early_clock_in_minutes=int(
                getattr(settings, "OJT_EARLY_CLOCK_IN_MINUTES", default.early_clock_in_minutes)
            ),
            lunch_start=parse_clock_time(getattr(settings, "OJT_LUNCH_START", "12:00")),
            lunch_end=parse_clock_time(getattr(settings, "OJT_LUNCH_END", "13:00")),
            daily_hours=float(getattr(settings, "OJT_DAILY_HOURS", default.daily_hours)),
        )

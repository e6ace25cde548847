from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedule.model import OJTSchedule


@dataclass(frozen=True)
class ClockInDecision:
    status: AttendanceStatus
    late_minutes: int = 0
    penalty_hours: float = 0.0
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a clock-in outcome."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, schedule: OJTSchedule) -> ClockInDecision:
        raise NotImplementedError

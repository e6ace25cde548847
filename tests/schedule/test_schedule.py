from datetime import time
from types import SimpleNamespace

from ojt_attendance.schedule.model import OJTSchedule


def test_defaults():
    schedule = OJTSchedule()
    assert schedule.start_minutes == 540
    assert schedule.earliest_clock_in_minutes == 510
    assert schedule.cutoff_minutes == 1080
    assert schedule.lunch_minutes == 60


def test_from_settings_overrides():
    settings = SimpleNamespace(
        OJT_START_TIME="08:00",
        OJT_LATE_CUTOFF="17:00:00",
        OJT_EARLY_CLOCK_IN_MINUTES="15",
        OJT_LUNCH_START="11:30",
        OJT_LUNCH_END="12:00",
        OJT_DAILY_HOURS="7.5",
    )
    schedule = OJTSchedule.from_settings(settings)

    assert schedule.start == time(8, 0)
    assert schedule.end == time(18, 0)
    assert schedule.late_cutoff == time(17, 0)
    assert schedule.earliest_clock_in_minutes == 465
    assert schedule.lunch_minutes == 30
    assert schedule.daily_hours == 7.5

from datetime import date, datetime

import pytest

from ojt_attendance.attendance.model import AttendanceRecord
from ojt_attendance.attendance.workflow import allowed_actions, clock_state, next_state
from ojt_attendance.core.enums import AttendanceStatus, ClockAction, ClockState
from ojt_attendance.core.exceptions import InvalidTransitionError

DAY = date(2025, 3, 10)


def record(**kw) -> AttendanceRecord:
    return AttendanceRecord(attendance_id=1, trainee_id=1, attendance_date=DAY, **kw)


def test_clock_state_from_record():
    assert clock_state(None) == ClockState.NOT_CLOCKED
    assert clock_state(record(time_in=datetime(2025, 3, 10, 9))) == ClockState.WORKING
    assert clock_state(record(time_in=datetime(2025, 3, 10, 9), break_start=datetime(2025, 3, 10, 12))) == ClockState.ON_BREAK
    assert (
        clock_state(
            record(
                time_in=datetime(2025, 3, 10, 9),
                break_start=datetime(2025, 3, 10, 12),
                break_end=datetime(2025, 3, 10, 12, 30),
            )
        )
        == ClockState.WORKING
    )
    assert clock_state(record(time_in=datetime(2025, 3, 10, 9), time_out=datetime(2025, 3, 10, 18))) == ClockState.COMPLETE
    assert clock_state(record(status=AttendanceStatus.ABSENT)) == ClockState.COMPLETE


def test_daily_cycle():
    state = next_state(ClockState.NOT_CLOCKED, ClockAction.CLOCK_IN)
    state = next_state(state, ClockAction.BREAK_START)
    assert state == ClockState.ON_BREAK
    state = next_state(state, ClockAction.BREAK_END)
    state = next_state(state, ClockAction.BREAK_START)
    state = next_state(state, ClockAction.BREAK_END)
    assert next_state(state, ClockAction.CLOCK_OUT) == ClockState.COMPLETE


@pytest.mark.parametrize(
    "state, action, message",
    [
        (ClockState.NOT_CLOCKED, ClockAction.CLOCK_OUT, "Not clocked in"),
        (ClockState.ON_BREAK, ClockAction.CLOCK_OUT, "Please end your break first"),
        (ClockState.WORKING, ClockAction.CLOCK_IN, "Already clocked in today"),
        (ClockState.WORKING, ClockAction.BREAK_END, "Not on break"),
        (ClockState.ON_BREAK, ClockAction.BREAK_START, "Already on break"),
        (ClockState.COMPLETE, ClockAction.CLOCK_IN, "Attendance for today is already complete"),
    ],
)
def test_invalid_transitions_are_rejected(state, action, message):
    with pytest.raises(InvalidTransitionError, match=message):
        next_state(state, action)


def test_allowed_actions():
    assert allowed_actions(ClockState.NOT_CLOCKED) == {ClockAction.CLOCK_IN}
    assert allowed_actions(ClockState.WORKING) == {ClockAction.BREAK_START, ClockAction.CLOCK_OUT}
    assert allowed_actions(ClockState.ON_BREAK) == {ClockAction.BREAK_END}
    assert allowed_actions(ClockState.COMPLETE) == set()

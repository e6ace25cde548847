"""Daily clock state machine.

NOT_CLOCKED -> WORKING <-> ON_BREAK, WORKING -> COMPLETE. COMPLETE is
terminal for the day. Clock-out while on break is rejected; the trainee
has to end the break first.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceStatus, ClockAction, ClockState
from ..core.exceptions import InvalidTransitionError
from .model import AttendanceRecord

TRANSITIONS: dict[tuple[ClockState, ClockAction], ClockState] = {
    (ClockState.NOT_CLOCKED, ClockAction.CLOCK_IN): ClockState.WORKING,
    (ClockState.WORKING, ClockAction.BREAK_START): ClockState.ON_BREAK,
    (ClockState.ON_BREAK, ClockAction.BREAK_END): ClockState.WORKING,
    (ClockState.WORKING, ClockAction.CLOCK_OUT): ClockState.COMPLETE,
}

_REJECTIONS: dict[tuple[ClockState, ClockAction], str] = {
    (ClockState.WORKING, ClockAction.CLOCK_IN): "Already clocked in today",
    (ClockState.ON_BREAK, ClockAction.CLOCK_IN): "Already clocked in today",
    (ClockState.NOT_CLOCKED, ClockAction.CLOCK_OUT): "Not clocked in",
    (ClockState.ON_BREAK, ClockAction.CLOCK_OUT): "Please end your break first",
    (ClockState.NOT_CLOCKED, ClockAction.BREAK_START): "Not clocked in",
    (ClockState.ON_BREAK, ClockAction.BREAK_START): "Already on break",
    (ClockState.NOT_CLOCKED, ClockAction.BREAK_END): "Not on break",
    (ClockState.WORKING, ClockAction.BREAK_END): "Not on break",
}


def clock_state(record: Optional[AttendanceRecord]) -> ClockState:
    if record is None:
        return ClockState.NOT_CLOCKED
    if record.time_out is not None or record.status == AttendanceStatus.ABSENT:
        return ClockState.COMPLETE
    if record.time_in is None:
        return ClockState.NOT_CLOCKED
    if record.on_break:
        return ClockState.ON_BREAK
    return ClockState.WORKING


def allowed_actions(state: ClockState) -> set[ClockAction]:
    return {action for (src, action) in TRANSITIONS if src == state}


def next_state(state: ClockState, action: ClockAction) -> ClockState:
    target = TRANSITIONS.get((state, action))
    if target is not None:
        return target
    if state == ClockState.COMPLETE:
        raise InvalidTransitionError("Attendance for today is already complete")
    raise InvalidTransitionError(_REJECTIONS.get((state, action), f"Cannot {action.value} while {state.value}"))

"""Weekly timesheet review flow and entry arithmetic.

DRAFT -> SUBMITTED -> APPROVED | REJECTED. A rejected sheet goes back to
DRAFT when edited, or straight to SUBMITTED when resubmitted.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from ..core.enums import TimesheetAction, TimesheetStatus
from ..core.exceptions import InvalidTransitionError
from .model import TimesheetEntry

TRANSITIONS: dict[tuple[TimesheetStatus, TimesheetAction], TimesheetStatus] = {
    (TimesheetStatus.DRAFT, TimesheetAction.EDIT): TimesheetStatus.DRAFT,
    (TimesheetStatus.REJECTED, TimesheetAction.EDIT): TimesheetStatus.DRAFT,
    (TimesheetStatus.DRAFT, TimesheetAction.SUBMIT): TimesheetStatus.SUBMITTED,
    (TimesheetStatus.REJECTED, TimesheetAction.SUBMIT): TimesheetStatus.SUBMITTED,
    (TimesheetStatus.SUBMITTED, TimesheetAction.APPROVE): TimesheetStatus.APPROVED,
    (TimesheetStatus.SUBMITTED, TimesheetAction.REJECT): TimesheetStatus.REJECTED,
}

_REJECTIONS: dict[TimesheetAction, str] = {
    TimesheetAction.EDIT: "Cannot edit a {status} timesheet",
    TimesheetAction.SUBMIT: "Cannot submit a {status} timesheet",
    TimesheetAction.APPROVE: "Only submitted timesheets can be approved",
    TimesheetAction.REJECT: "Only submitted timesheets can be rejected",
}


def next_status(status: TimesheetStatus, action: TimesheetAction) -> TimesheetStatus:
    target = TRANSITIONS.get((status, action))
    if target is None:
        raise InvalidTransitionError(_REJECTIONS[action].format(status=status.value))
    return target


def entry_hours(entry: TimesheetEntry) -> float:
    """(time_out - time_in) - break_hours floored at 0, else the hours typed in."""

    if entry.time_in and entry.time_out:
        start = datetime.combine(entry.entry_date, entry.time_in)
        end = datetime.combine(entry.entry_date, entry.time_out)
        worked = (end - start).total_seconds() / 3600 - entry.break_hours
        return round(max(0.0, worked), 2)
    return round(max(0.0, entry.hours_worked), 2)


def with_computed_hours(entry: TimesheetEntry) -> TimesheetEntry:
    return replace(entry, hours_worked=entry_hours(entry))


def total_hours(entries: Iterable[TimesheetEntry]) -> float:
    return round(sum(e.hours_worked for e in entries), 2)

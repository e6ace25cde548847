from datetime import date, time

import pytest

from ojt_attendance.core.enums import TimesheetAction, TimesheetStatus
from ojt_attendance.core.exceptions import InvalidTransitionError
from ojt_attendance.timesheets.model import TimesheetEntry
from ojt_attendance.timesheets.workflow import entry_hours, next_status, total_hours, with_computed_hours

DAY = date(2025, 3, 10)


def test_review_cycle():
    status = next_status(TimesheetStatus.DRAFT, TimesheetAction.SUBMIT)
    status = next_status(status, TimesheetAction.REJECT)
    assert status == TimesheetStatus.REJECTED
    assert next_status(status, TimesheetAction.EDIT) == TimesheetStatus.DRAFT
    status = next_status(status, TimesheetAction.SUBMIT)
    assert next_status(status, TimesheetAction.APPROVE) == TimesheetStatus.APPROVED


@pytest.mark.parametrize(
    "status, action, message",
    [
        (TimesheetStatus.SUBMITTED, TimesheetAction.EDIT, "Cannot edit a submitted timesheet"),
        (TimesheetStatus.APPROVED, TimesheetAction.EDIT, "Cannot edit a approved timesheet"),
        (TimesheetStatus.APPROVED, TimesheetAction.SUBMIT, "Cannot submit a approved timesheet"),
        (TimesheetStatus.DRAFT, TimesheetAction.APPROVE, "Only submitted timesheets can be approved"),
        (TimesheetStatus.REJECTED, TimesheetAction.REJECT, "Only submitted timesheets can be rejected"),
    ],
)
def test_invalid_review_steps(status, action, message):
    with pytest.raises(InvalidTransitionError, match=message):
        next_status(status, action)


def test_entry_hours_from_times():
    entry = TimesheetEntry(entry_date=DAY, time_in=time(9), time_out=time(18), break_hours=1.0, hours_worked=3.0)
    assert entry_hours(entry) == 8.0


def test_entry_hours_typed_in():
    assert entry_hours(TimesheetEntry(entry_date=DAY, hours_worked=6.5)) == 6.5
    assert entry_hours(TimesheetEntry(entry_date=DAY)) == 0.0


def test_entry_hours_never_negative():
    entry = TimesheetEntry(entry_date=DAY, time_in=time(18), time_out=time(9))
    assert entry_hours(entry) == 0.0


def test_total_hours():
    entries = [
        with_computed_hours(TimesheetEntry(entry_date=DAY, time_in=time(9), time_out=time(17, 30), break_hours=0.5)),
        TimesheetEntry(entry_date=date(2025, 3, 11), hours_worked=4.25),
    ]
    assert entries[0].hours_worked == 8.0
    assert total_hours(entries) == 12.25

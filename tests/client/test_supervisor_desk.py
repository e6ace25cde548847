from datetime import time

from fakes import PHOTO, SUPERVISOR_ID, TRAINEE_ID
from ojt_attendance.client.clock import AttendanceClock
from ojt_attendance.client.review import SupervisorDesk
from ojt_attendance.client.timesheet import TraineeTimesheet
from ojt_attendance.core.enums import ClockState, PermissionStatus, TimesheetStatus
from ojt_attendance.timesheets.model import TimesheetEntry


def test_late_permission_handshake(api, clock):
    clock.set(18, 5)
    trainee = AttendanceClock(api, TRAINEE_ID, now=clock)
    trainee.refresh()
    trainee.clock_in(PHOTO)
    trainee.request_late_permission("Flooded road")

    desk = SupervisorDesk(api, SUPERVISOR_ID)
    desk.refresh()
    assert [r.trainee_id for r in desk.late_requests] == [TRAINEE_ID]

    assert desk.grant_late(TRAINEE_ID).ok
    assert desk.late_requests[0].status == PermissionStatus.APPROVED

    assert trainee.clock_in(PHOTO).ok
    assert trainee.state == ClockState.WORKING
    assert trainee.record.penalty_hours == 4.0


def test_deny_marks_absent(api):
    desk = SupervisorDesk(api, SUPERVISOR_ID)
    assert desk.deny_late(TRAINEE_ID, reason="No reason given").ok
    assert api.get_today(TRAINEE_ID).status.value == "absent"


def test_overtime_review(api, clock):
    trainee = AttendanceClock(api, TRAINEE_ID, now=clock)
    trainee.refresh()
    trainee.clock_in(PHOTO)
    clock.set(20, 0)
    trainee.clock_out(PHOTO)

    desk = SupervisorDesk(api, SUPERVISOR_ID)
    desk.refresh()
    record = desk.overtime[0]
    assert record.overtime_hours == 2.0

    assert desk.approve_overtime(record.attendance_id).ok
    assert desk.overtime[0].overtime_approved
    assert not desk.reject_overtime(record.attendance_id).ok
    assert desk.runner.banner.message == "Overtime is already approved"


def test_timesheet_review(api):
    sheet = TraineeTimesheet(api, TRAINEE_ID)
    sheet.refresh()
    entry = TimesheetEntry(
        entry_date=sheet.timesheet.week_start, time_in=time(9), time_out=time(18), break_hours=1.0
    )
    assert sheet.save(entries=[entry], notes="Week one").ok
    assert sheet.timesheet.total_hours == 8.0
    assert sheet.submit().ok

    assert not sheet.save(notes="too late").ok
    assert sheet.runner.banner.message == "Cannot edit a submitted timesheet"

    desk = SupervisorDesk(api, SUPERVISOR_ID)
    desk.refresh()
    assert [t.timesheet_id for t in desk.timesheets] == [sheet.timesheet.timesheet_id]

    assert not desk.reject_timesheet(sheet.timesheet.timesheet_id, "").ok
    assert desk.reject_timesheet(sheet.timesheet.timesheet_id, "Add tasks").ok
    assert desk.timesheets == []

    sheet.refresh()
    assert sheet.timesheet.status == TimesheetStatus.REJECTED
    assert sheet.save(notes="Tasks added").ok
    assert sheet.timesheet.status == TimesheetStatus.DRAFT
    assert sheet.submit().ok

    desk.refresh()
    assert desk.approve_timesheet(sheet.timesheet.timesheet_id).ok
    sheet.refresh()
    assert sheet.timesheet.status == TimesheetStatus.APPROVED

from __future__ import annotations

import pytest

from fakes import OTHER_TRAINEE_ID, PHOTO, SUPERVISOR_ID, TRAINEE_ID
from ojt_attendance.attendance.model import ClockEvidence
from ojt_attendance.core.exceptions import NotFoundError, ValidationError

EVIDENCE = ClockEvidence(photo=PHOTO)


def test_clock_day_fills_trainee_feed(attendance_service, notifications_repo, clock):
    clock.set(9, 35)
    attendance_service.clock_in(TRAINEE_ID, EVIDENCE)
    clock.set(12, 0)
    attendance_service.start_break(TRAINEE_ID)
    clock.set(13, 0)
    attendance_service.end_break(TRAINEE_ID)
    clock.set(19, 0)
    attendance_service.clock_out(TRAINEE_ID, EVIDENCE)

    assert notifications_repo.titles_for(TRAINEE_ID) == ["Clocked In", "Break Started", "Break Ended", "Clocked Out"]
    messages = [n.message for n in sorted(notifications_repo.items.values(), key=lambda n: n.notification_id)]
    assert messages == [
        "You clocked in at 09:35 AM (Late)",
        "Break started at 12:00 PM",
        "Break ended at 01:00 PM. Duration: 60 minutes",
        "You clocked out at 07:00 PM. Total work: 8.4 hrs. Overtime: 0.4 hrs (pending approval)",
    ]
    first = notifications_repo.items[1]
    assert (first.type, first.link) == ("attendance", "/ojt/timesheet")


def test_rejected_clock_action_sends_nothing(attendance_service, notifications_repo):
    with pytest.raises(ValidationError):
        attendance_service.clock_out(TRAINEE_ID, EVIDENCE)
    assert notifications_repo.items == {}


def test_overtime_decisions_notify_trainee(attendance_service, notifications_repo, clock):
    attendance_service.clock_in(TRAINEE_ID, EVIDENCE)
    clock.set(19, 30)
    record = attendance_service.clock_out(TRAINEE_ID, EVIDENCE)

    attendance_service.decide_overtime(attendance_id=record.attendance_id, approved_by=SUPERVISOR_ID)

    latest = notifications_repo.list_for_user(TRAINEE_ID, limit=1)[0]
    assert latest.title == "Overtime Approved"
    assert latest.message == "Your overtime of 1.5 hours has been approved"


def test_late_request_notifies_supervisor(late_permission_service, notifications_repo):
    late_permission_service.request(trainee_id=TRAINEE_ID, reason="Traffic")

    (note,) = notifications_repo.list_for_user(SUPERVISOR_ID)
    assert note.title == "Late Clock-in Request"
    assert note.message == "Ana Reyes is requesting permission to clock in late. Reason: Traffic"

    late_permission_service.decide(trainee_id=TRAINEE_ID, decided_by=SUPERVISOR_ID, approved=False)
    assert notifications_repo.titles_for(TRAINEE_ID) == ["Late Clock-in Denied"]


def test_late_request_without_supervisor_is_silent(late_permission_service, notifications_repo):
    late_permission_service.request(trainee_id=OTHER_TRAINEE_ID, reason="Flooded road")
    assert notifications_repo.items == {}


def test_feed_read_state(notification_service):
    first = notification_service.notify(TRAINEE_ID, "Clocked In", "You clocked in at 09:00 AM")
    notification_service.notify(TRAINEE_ID, "Clocked Out", "You clocked out at 06:00 PM")

    assert [n.title for n in notification_service.list_for_user(TRAINEE_ID)] == ["Clocked Out", "Clocked In"]
    assert notification_service.unread_count(TRAINEE_ID) == 2

    notification_service.mark_read(first)
    assert notification_service.unread_count(TRAINEE_ID) == 1
    assert [n.title for n in notification_service.list_for_user(TRAINEE_ID, unread_only=True)] == ["Clocked Out"]
    with pytest.raises(NotFoundError):
        notification_service.mark_read(first)

    assert notification_service.mark_all_read(TRAINEE_ID) == 1
    assert notification_service.unread_count(TRAINEE_ID) == 0


def test_notify_requires_title(notification_service):
    with pytest.raises(ValidationError, match="Title is required"):
        notification_service.notify(TRAINEE_ID, "  ", "body")

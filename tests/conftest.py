from __future__ import annotations

import pytest

from fakes import (
    FakeClock,
    FlaskSession,
    InMemoryAttendance,
    InMemoryLatePermissions,
    InMemoryNotifications,
    InMemoryTimesheets,
    InMemoryUsers,
    at,
)
from ojt_attendance.attendance.photos import PhotoStore
from ojt_attendance.attendance.service import AttendanceService
from ojt_attendance.client.api import AttendanceApiClient
from ojt_attendance.container import wire
from ojt_attendance.late_permissions.service import LatePermissionService
from ojt_attendance.notifications.service import NotificationService
from ojt_attendance.schedule.model import OJTSchedule
from ojt_attendance.timesheets.service import TimesheetService


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(at(9, 0))


@pytest.fixture
def schedule() -> OJTSchedule:
    return OJTSchedule()


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def permissions_repo() -> InMemoryLatePermissions:
    return InMemoryLatePermissions()


@pytest.fixture
def timesheets_repo() -> InMemoryTimesheets:
    return InMemoryTimesheets()


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def notification_service(notifications_repo, clock) -> NotificationService:
    return NotificationService(notifications_repo, clock=clock)


@pytest.fixture
def photos(tmp_path) -> PhotoStore:
    return PhotoStore(tmp_path / "attendance")


@pytest.fixture
def attendance_service(
    attendance_repo, users, permissions_repo, photos, schedule, notification_service, clock
) -> AttendanceService:
    return AttendanceService(
        attendance_repo,
        users,
        permissions_repo,
        photos,
        schedule=schedule,
        notifications=notification_service,
        clock=clock,
    )


@pytest.fixture
def late_permission_service(
    permissions_repo, attendance_repo, users, notification_service, clock
) -> LatePermissionService:
    return LatePermissionService(
        permissions_repo, attendance_repo, users, notifications=notification_service, clock=clock
    )


@pytest.fixture
def timesheet_service(timesheets_repo, users, clock) -> TimesheetService:
    return TimesheetService(timesheets_repo, users, clock=clock)


@pytest.fixture
def container(schedule, photos, users, attendance_repo, permissions_repo, timesheets_repo, notifications_repo, clock):
    return wire(
        schedule=schedule,
        photos=photos,
        users_repo=users,
        attendance_repo=attendance_repo,
        late_permissions_repo=permissions_repo,
        timesheets_repo=timesheets_repo,
        notifications_repo=notifications_repo,
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from ojt_attendance.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api(app) -> AttendanceApiClient:
    return AttendanceApiClient("http://testserver/api", session=FlaskSession(app))

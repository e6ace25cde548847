from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.photos import PhotoStore
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .late_permissions.mysql_late_permission_repository import MySQLLatePermissionRepository
from .late_permissions.repository import LatePermissionRepository
from .late_permissions.service import LatePermissionService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .schedule.model import OJTSchedule
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    schedule: OJTSchedule

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    late_permissions_repo: LatePermissionRepository
    timesheets_repo: TimesheetRepository
    notifications_repo: NotificationRepository

    attendance_service: AttendanceService
    late_permission_service: LatePermissionService
    timesheet_service: TimesheetService
    notification_service: NotificationService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    schedule: OJTSchedule,
    photos: PhotoStore,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    late_permissions_repo: LatePermissionRepository,
    timesheets_repo: TimesheetRepository,
    notifications_repo: NotificationRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Container:
    notification_service = NotificationService(notifications_repo, clock=clock)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        late_permissions_repo,
        photos,
        schedule=schedule,
        strategy_factory=AttendanceStrategyFactory(),
        notifications=notification_service,
        clock=clock,
    )
    late_permission_service = LatePermissionService(
        late_permissions_repo,
        attendance_repo,
        users_repo,
        notifications=notification_service,
        clock=clock,
    )
    timesheet_service = TimesheetService(timesheets_repo, users_repo, clock=clock)

    return Container(
        schedule=schedule,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        late_permissions_repo=late_permissions_repo,
        timesheets_repo=timesheets_repo,
        notifications_repo=notifications_repo,
        attendance_service=attendance_service,
        late_permission_service=late_permission_service,
        timesheet_service=timesheet_service,
        notification_service=notification_service,
        conn=conn,
    )


def build_container(*, db_config: dict, schedule: OJTSchedule, photo_upload_dir: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        schedule=schedule,
        photos=PhotoStore(photo_upload_dir),
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        late_permissions_repo=MySQLLatePermissionRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        conn=conn,
    )

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import (
    ATTENDANCE_NOTIFICATION_LINK,
    ATTENDANCE_NOTIFICATION_TYPE,
    DEFAULT_NOTIFICATION_LIMIT,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def _clock_time(value: datetime) -> str:
    return value.strftime("%I:%M %p")


class NotificationService:
    """Attendance notifications for trainees and their supervisors.

    Every clock action, overtime decision and late-permission step drops a
    message into the affected user's feed.
    """

    def __init__(self, notifications: NotificationRepository, *, clock: Callable[[], datetime] = datetime.now):
        self._notifications = notifications
        self._clock = clock

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        *,
        type: str = ATTENDANCE_NOTIFICATION_TYPE,
        link: Optional[str] = ATTENDANCE_NOTIFICATION_LINK,
    ) -> int:
        user_id = require_positive_id(user_id, "User ID")
        title = require_non_empty(title, "Title")
        notification_id = self._notifications.create(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link=link,
            created_at=self._clock(),
        )
        logger.debug("Notification %s (%s) sent to user %s", notification_id, title, user_id)
        return notification_id

    # Feed

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[Notification]:
        user_id = require_positive_id(user_id, "User ID")
        limit = DEFAULT_NOTIFICATION_LIMIT if limit is None else limit
        if limit <= 0:
            raise ValidationError("limit must be positive")
        return self._notifications.list_for_user(user_id, unread_only=unread_only, limit=limit)

    def unread_count(self, user_id: int) -> int:
        return self._notifications.unread_count(require_positive_id(user_id, "User ID"))

    def mark_read(self, notification_id: int) -> None:
        notification_id = require_positive_id(notification_id, "Notification ID")
        if not self._notifications.mark_read(notification_id, read_at=self._clock()):
            raise NotFoundError("Unread notification not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._notifications.mark_all_read(require_positive_id(user_id, "User ID"), read_at=self._clock())

    # Attendance events

    def clocked_in(self, record: AttendanceRecord) -> int:
        late = " (Late)" if record.status == AttendanceStatus.LATE else ""
        return self.notify(record.trainee_id, "Clocked In", f"You clocked in at {_clock_time(record.time_in)}{late}")

    def clocked_out(self, record: AttendanceRecord) -> int:
        message = f"You clocked out at {_clock_time(record.time_out)}. Total work: {record.work_hours:.1f} hrs"
        if record.overtime_hours > 0:
            message += f". Overtime: {record.overtime_hours:.1f} hrs (pending approval)"
        return self.notify(record.trainee_id, "Clocked Out", message)

    def break_started(self, record: AttendanceRecord) -> int:
        return self.notify(record.trainee_id, "Break Started", f"Break started at {_clock_time(record.break_start)}")

    def break_ended(self, record: AttendanceRecord) -> int:
        minutes = round((record.break_end - record.break_start).total_seconds() / 60)
        return self.notify(
            record.trainee_id,
            "Break Ended",
            f"Break ended at {_clock_time(record.break_end)}. Duration: {minutes} minutes",
        )

    def overtime_decided(self, record: AttendanceRecord, *, approved: bool, hours: float) -> int:
        if approved:
            return self.notify(
                record.trainee_id, "Overtime Approved", f"Your overtime of {hours:.1f} hours has been approved"
            )
        return self.notify(record.trainee_id, "Overtime Rejected", "Your overtime request was not approved")

    # Late permissions

    def late_permission_requested(self, *, supervisor_id: int, trainee_name: str, reason: str) -> int:
        return self.notify(
            supervisor_id,
            "Late Clock-in Request",
            f"{trainee_name} is requesting permission to clock in late. Reason: {reason}",
        )

    def late_permission_decided(self, trainee_id: int, *, approved: bool) -> int:
        if approved:
            return self.notify(
                trainee_id,
                "Late Clock-in Approved",
                "Your request to clock in late has been approved. You can now clock in.",
            )
        return self.notify(
            trainee_id,
            "Late Clock-in Denied",
            "Your request to clock in late has been denied. You will be marked as absent.",
        )

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import PermissionStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import LatePermissionRequest
from .repository import LatePermissionRepository

logger = logging.getLogger(__name__)

SUPERVISOR_GRANT_REASON = "Granted by supervisor"


class LatePermissionService:
    """Late clock-in permissions: trainee requests, supervisor decides.

    Approval unlocks a clock-in at or after the cutoff for that one date.
    Denial marks the trainee absent for the date.
    """

    def __init__(
        self,
        permissions: LatePermissionRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        notifications: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._permissions = permissions
        self._attendance = attendance
        self._users = users
        self._clock = clock
        self._notifications = notifications

    def request(
        self,
        *,
        trainee_id: int,
        reason: str,
        permission_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> LatePermissionRequest:
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        reason = require_non_empty(reason, "Reason")
        permission_date = permission_date or (now or self._clock()).date()

        trainee = self._users.get_by_id(trainee_id)
        if not trainee:
            raise NotFoundError("Trainee not found")

        existing = self._permissions.get_for_trainee_and_date(trainee_id, permission_date)
        if existing:
            if existing.status == PermissionStatus.PENDING:
                raise ValidationError("A late permission request for this date is already pending")
            if existing.status == PermissionStatus.APPROVED:
                raise ValidationError("Late permission for this date is already approved")
            raise ValidationError("Late permission for this date was denied")

        supervisor_id = self._users.get_supervisor_id(trainee_id)
        request_id = self._permissions.create(
            trainee_id=trainee_id,
            supervisor_id=supervisor_id,
            permission_date=permission_date,
            reason=reason,
        )
        logger.info("Late permission %s requested by trainee %s for %s", request_id, trainee_id, permission_date)
        if self._notifications and supervisor_id:
            self._notifications.late_permission_requested(
                supervisor_id=supervisor_id, trainee_name=trainee.full_name, reason=reason
            )
        return self._require(trainee_id, permission_date)

    def decide(
        self,
        *,
        trainee_id: int,
        decided_by: int,
        approved: bool,
        permission_date: Optional[date] = None,
        denied_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LatePermissionRequest:
        now = now or self._clock()
        trainee_id = require_positive_id(trainee_id, "Trainee ID")
        decided_by = require_positive_id(decided_by, "Supervisor ID")
        permission_date = permission_date or now.date()

        reviewer = self._users.get_by_id(decided_by)
        if not reviewer or not reviewer.role.can_review:
            raise AuthorizationError("Only supervisors can decide late permissions")

        status = PermissionStatus.APPROVED if approved else PermissionStatus.DENIED
        denied_reason = (denied_reason or "").strip() or None
        supervisor_id = self._users.get_supervisor_id(trainee_id)

        existing = self._permissions.get_for_trainee_and_date(trainee_id, permission_date)
        if existing is None:
            request_id = self._permissions.create(
                trainee_id=trainee_id,
                supervisor_id=supervisor_id,
                permission_date=permission_date,
                reason=SUPERVISOR_GRANT_REASON,
            )
        else:
            if existing.used_at is not None:
                raise ValidationError("Late permission has already been used")
            if existing.status != PermissionStatus.PENDING:
                raise ValidationError(f"Late permission has already been {existing.status.value}")
            request_id = existing.request_id

        ok = self._permissions.decide(
            request_id=request_id,
            status=status,
            decided_by=decided_by,
            decided_at=now,
            denied_reason=None if approved else denied_reason,
        )
        if not ok:
            raise ValidationError("Failed to record the late permission decision")

        if not approved and not self._attendance.get_for_trainee_and_date(trainee_id, permission_date):
            self._attendance.mark_absent(
                trainee_id=trainee_id,
                supervisor_id=supervisor_id,
                attendance_date=permission_date,
            )
            logger.info("Trainee %s marked absent for %s (late permission denied)", trainee_id, permission_date)

        logger.info(
            "Late permission for trainee %s on %s %s by %s",
            trainee_id,
            permission_date,
            status.value,
            decided_by,
        )
        if self._notifications:
            self._notifications.late_permission_decided(trainee_id, approved=approved)
        return self._require(trainee_id, permission_date)

    def check(self, *, trainee_id: int, permission_date: Optional[date] = None) -> Optional[LatePermissionRequest]:
        return self._permissions.get_for_trainee_and_date(
            require_positive_id(trainee_id, "Trainee ID"), permission_date or self._clock().date()
        )

    def has_permission(self, *, trainee_id: int, permission_date: Optional[date] = None) -> bool:
        req = self.check(trainee_id=trainee_id, permission_date=permission_date)
        return bool(req and req.status == PermissionStatus.APPROVED)

    def pending_for_supervisor(self, supervisor_id: int, *, today: Optional[date] = None) -> Sequence[LatePermissionRequest]:
        supervisor_id = require_positive_id(supervisor_id, "Supervisor ID")
        return self._permissions.list_for_supervisor(supervisor_id, since=today or self._clock().date())

    def _require(self, trainee_id: int, permission_date: date) -> LatePermissionRequest:
        req = self._permissions.get_for_trainee_and_date(trainee_id, permission_date)
        if not req:
            raise NotFoundError("Late permission request not found")
        return req

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PermissionStatus
from .model import LatePermissionRequest


class LatePermissionRepository(Protocol):
    def get_for_trainee_and_date(self, trainee_id: int, permission_date: date) -> Optional[LatePermissionRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        trainee_id: int,
        supervisor_id: Optional[int],
        permission_date: date,
        reason: str,
        status: PermissionStatus = PermissionStatus.PENDING,
        granted_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: PermissionStatus,
        decided_by: int,
        decided_at: datetime,
        denied_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def mark_used(self, *, request_id: int, used_at: datetime) -> bool:
        raise NotImplementedError

    def list_for_supervisor(self, supervisor_id: int, *, since: date) -> Sequence[LatePermissionRequest]:
        """Requests dated `since` or later, pending first."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_datetime, parse_iso_date
from ..core.enums import PermissionStatus


@dataclass(frozen=True)
class LatePermissionRequest:
    """Domain entity: permission to clock in after the late cutoff on one date."""

    request_id: int
    trainee_id: int
    permission_date: date
    reason: str
    status: PermissionStatus = PermissionStatus.PENDING
    supervisor_id: Optional[int] = None
    granted_by: Optional[int] = None
    denied_reason: Optional[str] = None
    decided_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def usable(self) -> bool:
        return self.status == PermissionStatus.APPROVED and self.used_at is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LatePermissionRequest":
        def _dt(key: str) -> Optional[datetime]:
            value = payload.get(key)
            return parse_datetime(str(value)) if value else None

        return cls(
            request_id=int(payload.get("request_id") or payload.get("id") or 0),
            trainee_id=int(payload["trainee_id"]),
            permission_date=parse_iso_date(str(payload["permission_date"])),
            reason=payload.get("reason") or "",
            status=PermissionStatus(payload.get("status") or PermissionStatus.PENDING.value),
            supervisor_id=payload.get("supervisor_id"),
            granted_by=payload.get("granted_by"),
            denied_reason=payload.get("denied_reason"),
            decided_at=_dt("decided_at"),
            used_at=_dt("used_at"),
            created_at=_dt("created_at"),
        )

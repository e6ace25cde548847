from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        type: str,
        title: str,
        message: str,
        link: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def unread_count(self, user_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, notification_id: int, *, read_at: datetime) -> bool:
        raise NotImplementedError

    def mark_all_read(self, user_id: int, *, read_at: datetime) -> int:
        raise NotImplementedError

from __future__ import annotations

from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Read-only access to accounts; user management lives in the wider application."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_supervisor_id(self, trainee_id: int) -> Optional[int]:
        """Active assignment first, then the user's own `supervisor_id`."""

        raise NotImplementedError

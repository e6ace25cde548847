from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account of the business application (trainee, supervisor, admin...)."""

    user_id: int
    first_name: str
    last_name: str
    email: str
    role: Role
    supervisor_id: Optional[int] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

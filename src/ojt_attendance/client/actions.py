"""Action runner: one mutation in flight at a time, outcome shown as a banner."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ..core.constants import SUCCESS_BANNER_SECONDS
from ..core.exceptions import ApiError, DeviceAccessError, DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Banner:
    kind: str
    message: str
    expires_at: Optional[float] = None

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


@dataclass(frozen=True)
class ActionOutcome(Generic[T]):
    ok: bool
    result: Optional[T] = None
    error: Optional[Exception] = None
    skipped: bool = False


class ActionRunner:
    """Success banners expire after a few seconds; error banners stay until
    the next action attempt or `dismiss()`. A second action started while
    one is in flight is skipped."""

    def __init__(
        self,
        *,
        success_seconds: float = SUCCESS_BANNER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._success_seconds = float(success_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._banner: Optional[Banner] = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def banner(self) -> Optional[Banner]:
        b = self._banner
        if b is not None and b.expires_at is not None and self._clock() >= b.expires_at:
            self._banner = None
            return None
        return b

    def dismiss(self) -> None:
        self._banner = None

    def run(self, action: Callable[[], T], *, success: Optional[str] = None) -> ActionOutcome[T]:
        if not self._lock.acquire(blocking=False):
            logger.debug("Action skipped: another action is in flight")
            return ActionOutcome(ok=False, skipped=True)
        try:
            self._banner = None
            try:
                result = action()
            except (ApiError, DomainError, DeviceAccessError) as e:
                self._banner = Banner(kind="error", message=str(e))
                return ActionOutcome(ok=False, error=e)
            if success:
                self._banner = Banner(
                    kind="success",
                    message=success,
                    expires_at=self._clock() + self._success_seconds,
                )
            return ActionOutcome(ok=True, result=result)
        finally:
            self._lock.release()


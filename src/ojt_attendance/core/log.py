from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger (idempotent)."""

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger("ojt_attendance")
    root.setLevel(level)
    if not any(getattr(h, "_ojt_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ojt_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

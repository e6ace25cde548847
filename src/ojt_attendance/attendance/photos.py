from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime
from pathlib import Path

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def decode_photo(data: str) -> bytes:
    """Accept raw base64 or a `data:image/jpeg;base64,...` URL."""

    payload = data.split(",", 1)[1] if data.startswith("data:") and "," in data else data
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Photo is not valid base64 image data")
    if not raw:
        raise ValidationError("Photo is empty")
    return raw


class PhotoStore:
    """Stores clock-in/out photos as JPEG files under an upload directory."""

    def __init__(self, upload_dir: str | Path):
        self._upload_dir = Path(upload_dir)

    def save(self, data: str, *, trainee_id: int, kind: str, now: datetime) -> str:
        raw = decode_photo(data)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

        filename = f"{int(trainee_id)}_{kind}_{now.strftime('%Y%m%d_%H%M%S')}.jpg"
        (self._upload_dir / filename).write_bytes(raw)
        logger.debug("Stored %s photo for trainee %s (%d bytes)", kind, trainee_id, len(raw))
        return f"{self._upload_dir.name}/{filename}"

from __future__ import annotations

import base64

import cv2
import numpy as np

from ..core.constants import AUTO_CAPTURE_FRAMES, AUTO_CAPTURE_THRESHOLD, JPEG_QUALITY
from .smoother import SmoothedReading


class AutoCaptureTrigger:
    """Fires once after N consecutive frames at or above the confidence threshold.

    A single frame below the threshold resets the run. After firing the
    trigger stays latched until `reset()`.
    """

    def __init__(self, *, threshold: float = AUTO_CAPTURE_THRESHOLD, required_frames: int = AUTO_CAPTURE_FRAMES):
        self.threshold = float(threshold)
        self.required_frames = int(required_frames)
        self.consecutive = 0
        self.fired = False

    def update(self, reading: SmoothedReading) -> bool:
        if self.fired:
            return False
        if reading.detected and reading.confidence >= self.threshold:
            self.consecutive += 1
            if self.consecutive >= self.required_frames:
                self.fired = True
                return True
        else:
            self.consecutive = 0
        return False

    def reset(self) -> None:
        self.consecutive = 0
        self.fired = False


def encode_jpeg(frame: np.ndarray, *, quality: float = JPEG_QUALITY) -> bytes:
    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(round(quality * 100))])
    if not ok:
        raise ValueError("Failed to encode frame as JPEG")
    return buf.tobytes()


def to_data_url(jpeg: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(jpeg).decode("ascii")

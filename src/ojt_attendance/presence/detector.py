"""Face presence detection over single video frames.

Wraps OpenCV's YuNet detector (`cv2.FaceDetectorYN`) and keeps only the
highest-scoring face. Model failures are reported as "no face" so the
per-frame loop never has to guard the call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# YuNet rows: x, y, w, h, 5 landmark pairs, score
_SCORE_COLUMN = 14


@dataclass(frozen=True)
class FaceBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True)
class FaceDetectionResult:
    detected: bool
    confidence: int = 0
    box: Optional[FaceBox] = None


NO_FACE = FaceDetectionResult(detected=False, confidence=0, box=None)


class PresenceDetector:
    """At most one detection per frame, confidence scaled to 0-100."""

    def __init__(
        self,
        model_path: Optional[str] = None,
        *,
        score_threshold: float = 0.5,
        nms_threshold: float = 0.3,
        model: Any = None,
    ):
        if model is None and not model_path:
            raise ValueError("model_path is required when no detector model is given")
        self._model_path = model_path
        self._score_threshold = score_threshold
        self._nms_threshold = nms_threshold
        self._model = model
        self._input_size: Optional[tuple[int, int]] = None

    def _ensure_model(self, width: int, height: int):
        if self._model is None:
            self._model = cv2.FaceDetectorYN.create(
                self._model_path,
                "",
                (width, height),
                self._score_threshold,
                self._nms_threshold,
                5000,
            )
            logger.info("Face detection model loaded from %s", self._model_path)
        if self._input_size != (width, height):
            self._model.setInputSize((width, height))
            self._input_size = (width, height)
        return self._model

    def detect(self, frame: np.ndarray) -> FaceDetectionResult:
        try:
            height, width = frame.shape[:2]
            _, faces = self._ensure_model(width, height).detect(frame)
        except Exception:
            logger.debug("Face detection failed; treating frame as empty", exc_info=True)
            return NO_FACE

        if faces is None or len(faces) == 0:
            return NO_FACE

        best = max(faces, key=lambda row: float(row[_SCORE_COLUMN]))
        x, y, w, h = (float(v) for v in best[:4])
        score = float(best[_SCORE_COLUMN])
        return FaceDetectionResult(
            detected=True,
            confidence=max(0, min(100, int(round(score * 100)))),
            box=FaceBox(x=x, y=y, width=w, height=h),
        )

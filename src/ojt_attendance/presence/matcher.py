from __future__ import annotations

import logging
from typing import Optional

import cv2
import face_recognition
import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.5


def to_rgb(frame: np.ndarray) -> np.ndarray:
    """BGR/BGRA/grayscale frame -> contiguous uint8 RGB for dlib."""

    if frame.ndim == 3 and frame.shape[2] == 4:
        frame = cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
    elif frame.ndim == 2:
        frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    return np.ascontiguousarray(rgb, dtype=np.uint8)


def encode_face(frame: np.ndarray) -> Optional[np.ndarray]:
    rgb = to_rgb(frame)
    boxes = face_recognition.face_locations(rgb)
    if not boxes:
        return None
    return face_recognition.face_encodings(rgb, boxes)[0]


class FaceMatcher:
    """Compares captured faces against one reference encoding."""

    def __init__(self, reference: np.ndarray, *, tolerance: float = DEFAULT_TOLERANCE):
        self._reference = np.asarray(reference, dtype=np.float64)
        self._tolerance = float(tolerance)

    @classmethod
    def from_image(cls, path: str, *, tolerance: float = DEFAULT_TOLERANCE) -> "FaceMatcher":
        image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise ValueError(f"Cannot read reference image {path}")
        encoding = encode_face(image)
        if encoding is None:
            raise ValueError(f"No face found in reference image {path}")
        return cls(encoding, tolerance=tolerance)

    def similarity(self, frame: np.ndarray) -> Optional[int]:
        """0-100, higher is more similar; None when no face is found."""

        encoding = encode_face(frame)
        if encoding is None:
            return None
        distance = float(face_recognition.face_distance([self._reference], encoding)[0])
        return max(0, min(100, int(round((1 - distance) * 100))))

    def verify(self, frame: np.ndarray) -> bool:
        encoding = encode_face(frame)
        if encoding is None:
            logger.debug("Face verification: no face in frame")
            return False
        return bool(face_recognition.compare_faces([self._reference], encoding, tolerance=self._tolerance)[0])

"""Camera session and the cancellable detection loop."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

import cv2
import numpy as np

from ..core.exceptions import DeviceAccessError
from .auto_capture import AutoCaptureTrigger, encode_jpeg, to_data_url
from .detector import PresenceDetector
from .smoother import ConfidenceSmoother, SmoothedReading, SmoothingState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedPhoto:
    jpeg: bytes
    width: int
    height: int
    captured_at: datetime = field(default_factory=datetime.now)
    auto: bool = True

    @property
    def data_url(self) -> str:
        return to_data_url(self.jpeg)


class CameraSession:
    """Owns one `cv2.VideoCapture`; use as a context manager."""

    def __init__(self, device: int | str = 0, *, capture_factory: Callable[[Any], Any] = cv2.VideoCapture):
        self._device = device
        self._capture_factory = capture_factory
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> "CameraSession":
        if self._cap is not None:
            return self
        cap = self._capture_factory(self._device)
        if cap is None or not cap.isOpened():
            if cap is not None:
                cap.release()
            raise DeviceAccessError(f"Cannot open camera {self._device}")
        self._cap = cap
        logger.info("Camera %s opened", self._device)
        return self

    def read(self) -> np.ndarray:
        if self._cap is None:
            raise DeviceAccessError("Camera is not open")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise DeviceAccessError("Failed to read frame from camera")
        return frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera %s released", self._device)

    def __enter__(self) -> "CameraSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DetectionLoop:
    """detect -> smooth -> auto-capture, one frame at a time.

    `tick()` processes a single frame synchronously. `start()` runs ticks on
    a worker thread until a photo is captured, `stop()` is called, or the
    camera fails. Only one detection is ever in flight.
    """

    def __init__(
        self,
        camera: CameraSession,
        detector: PresenceDetector,
        *,
        trigger: Optional[AutoCaptureTrigger] = None,
        on_reading: Optional[Callable[[SmoothedReading], None]] = None,
        interval: float = 0.0,
    ):
        self._camera = camera
        self._detector = detector
        self._trigger = trigger or AutoCaptureTrigger()
        self._on_reading = on_reading
        self._interval = float(interval)

        self.smoother = ConfidenceSmoother()
        self._last_frame: Optional[np.ndarray] = None
        self._capture: Optional[CapturedPhoto] = None
        self._error: Optional[BaseException] = None

        self._stop = threading.Event()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def captured(self) -> Optional[CapturedPhoto]:
        return self._capture

    @property
    def state(self) -> SmoothingState:
        return self.smoother.state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> Optional[CapturedPhoto]:
        frame = self._camera.read()
        self._last_frame = frame
        height, width = frame.shape[:2]

        result = self._detector.detect(frame)
        reading = self.smoother.update(result, width, height)
        if reading.changed and self._on_reading:
            self._on_reading(reading)

        if self._trigger.update(reading):
            self._capture = self._snapshot(frame, auto=True)
            logger.info("Auto-capture fired at confidence %.1f", reading.confidence)
            self._stop.set()
            return self._capture
        return None

    def capture_now(self) -> CapturedPhoto:
        """Manual capture; stops the loop and snapshots a fresh frame."""

        self.stop()
        self._capture = self._snapshot(self._camera.read(), auto=False)
        return self._capture

    def _snapshot(self, frame: np.ndarray, *, auto: bool) -> CapturedPhoto:
        height, width = frame.shape[:2]
        return CapturedPhoto(jpeg=encode_jpeg(frame), width=width, height=height, auto=auto)

    def _run(self) -> None:
        try:
            while not self._stop.is_set():
                if self.tick() is not None:
                    break
                if self._interval:
                    time.sleep(self._interval)
        except DeviceAccessError as e:
            logger.warning("Detection loop stopped: %s", e)
            self._error = e
        finally:
            self._done.set()

    def start(self) -> None:
        if self.running:
            return
        self.smoother.reset()
        self._trigger.reset()
        self._capture = None
        self._stop.clear()
        self._done.clear()
        self._error = None
        self._thread = threading.Thread(target=self._run, name="presence-detection", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> Optional[CapturedPhoto]:
        """Block until the loop ends; re-raises a camera failure."""

        self._done.wait(timeout)
        if self._error is not None:
            raise self._error
        return self._capture

    def __enter__(self) -> "DetectionLoop":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

"""Confidence smoothing for the live presence check.

Per frame: debounce the raw `detected` flag (flip only after 3 disagreeing
frames in a row), turn the face box into a framing-quality score, and move
an exponential moving average 5% toward it. State is an explicit value
passed in and returned by `step`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from ..core.constants import (
    DEBOUNCE_FRAMES,
    MAX_TARGET_SCORE,
    MIN_FACE_WIDTH_RATIO,
    MIN_TARGET_SCORE,
    SMOOTHING_ALPHA,
)
from .detector import FaceBox, FaceDetectionResult


@dataclass(frozen=True)
class SmoothingState:
    detected: bool = False
    pending_frames: int = 0
    smoothed: float = 0.0
    displayed: int = 0


@dataclass(frozen=True)
class SmoothedReading:
    detected: bool
    confidence: float
    displayed: int
    changed: bool
    box: Optional[FaceBox] = None


def half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def quality_score(box: FaceBox, frame_width: float, frame_height: float) -> float:
    """50 for any face, up to +30 for size (>= 10% of frame width), up to +20 for centering."""

    size_ratio = box.width / frame_width
    size_score = min(1.0, size_ratio / MIN_FACE_WIDTH_RATIO)

    center_x, center_y = box.center
    dist_x = abs(center_x - frame_width / 2) / (frame_width / 2)
    dist_y = abs(center_y - frame_height / 2) / (frame_height / 2)
    position_score = max(0.0, 1 - (dist_x * 0.5 + dist_y * 0.5))

    return 50 + size_score * 30 + position_score * 20


def target_score(quality: float) -> float:
    return min(MAX_TARGET_SCORE, max(MIN_TARGET_SCORE, quality))


def debounce(state: SmoothingState, raw_detected: bool) -> SmoothingState:
    if raw_detected == state.detected:
        return replace(state, pending_frames=0)

    pending = state.pending_frames + 1
    if pending < DEBOUNCE_FRAMES:
        return replace(state, pending_frames=pending)

    if raw_detected:
        return replace(state, detected=True, pending_frames=0)
    return SmoothingState(detected=False, pending_frames=0, smoothed=0.0, displayed=0)


def step(
    state: SmoothingState,
    result: FaceDetectionResult,
    frame_width: float,
    frame_height: float,
) -> tuple[SmoothingState, SmoothedReading]:
    previous_displayed = state.displayed
    state = debounce(state, result.detected)

    if result.detected and result.box is not None and frame_width > 0 and frame_height > 0:
        target = target_score(quality_score(result.box, frame_width, frame_height))
        if state.smoothed == 0:
            smoothed = target
        else:
            smoothed = state.smoothed + (target - state.smoothed) * SMOOTHING_ALPHA
        state = replace(state, smoothed=smoothed, displayed=half_up(smoothed))

    reading = SmoothedReading(
        detected=state.detected,
        confidence=state.smoothed,
        displayed=state.displayed,
        changed=state.displayed != previous_displayed,
        box=result.box,
    )
    return state, reading


class ConfidenceSmoother:
    """Holds a `SmoothingState` between frames for callers that prefer an object."""

    def __init__(self, state: Optional[SmoothingState] = None):
        self.state = state or SmoothingState()

    def update(self, result: FaceDetectionResult, frame_width: float, frame_height: float) -> SmoothedReading:
        self.state, reading = step(self.state, result, frame_width, frame_height)
        return reading

    def reset(self) -> None:
        self.state = SmoothingState()

import pytest

from ojt_attendance.presence.detector import NO_FACE, FaceBox, FaceDetectionResult
from ojt_attendance.presence.smoother import (
    ConfidenceSmoother,
    SmoothingState,
    debounce,
    half_up,
    quality_score,
    step,
    target_score,
)

W, H = 640, 480
CENTERED = FaceBox(x=288, y=208, width=64, height=64)
FACE = FaceDetectionResult(detected=True, confidence=97, box=CENTERED)


def test_quality_score_for_centered_face():
    assert quality_score(CENTERED, W, H) == pytest.approx(100.0)


def test_quality_score_for_small_off_center_face():
    box = FaceBox(x=0, y=208, width=32, height=32)
    # size 0.05 of width -> half the size points; center x at 16 -> dist 0.95
    expected = 50 + 0.5 * 30 + (1 - (0.95 * 0.5 + (16 / 240) * 0.5)) * 20
    assert quality_score(box, W, H) == pytest.approx(expected)


def test_target_score_clamps():
    assert target_score(100) == 99
    assert target_score(10) == 30
    assert target_score(75.5) == 75.5


def test_half_up():
    assert half_up(89.5) == 90
    assert half_up(89.49) == 89


def test_debounce_needs_three_frames():
    state = SmoothingState()
    state = debounce(state, True)
    state = debounce(state, True)
    assert not state.detected
    state = debounce(state, True)
    assert state.detected
    assert state.pending_frames == 0


def test_single_dropped_frame_is_ignored():
    smoother = ConfidenceSmoother()
    for _ in range(3):
        smoother.update(FACE, W, H)

    reading = smoother.update(NO_FACE, W, H)

    assert reading.detected
    assert reading.displayed == 99
    assert smoother.update(FACE, W, H).detected
    assert smoother.state.pending_frames == 0


def test_three_missed_frames_reset_everything():
    smoother = ConfidenceSmoother()
    for _ in range(3):
        smoother.update(FACE, W, H)

    readings = [smoother.update(NO_FACE, W, H) for _ in range(3)]

    assert [r.detected for r in readings] == [True, True, False]
    assert smoother.state == SmoothingState()
    assert readings[-1].displayed == 0
    assert readings[-1].changed


def test_first_sample_sets_average_then_moves_five_percent():
    state, reading = step(SmoothingState(), FACE, W, H)
    assert reading.confidence == pytest.approx(99.0)
    assert reading.changed
    assert not reading.detected

    off_center = FaceDetectionResult(detected=True, confidence=80, box=FaceBox(x=0, y=208, width=64, height=64))
    target = target_score(quality_score(off_center.box, W, H))
    state, reading = step(state, off_center, W, H)

    assert reading.confidence == pytest.approx(99.0 + (target - 99.0) * 0.05)
    assert reading.displayed == half_up(reading.confidence)


def test_reading_only_marks_displayed_changes():
    state, first = step(SmoothingState(), FACE, W, H)
    state, second = step(state, FACE, W, H)
    assert first.changed
    assert not second.changed

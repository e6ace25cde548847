import numpy as np
import pytest

from fakes import FakeDetectorModel
from ojt_attendance.presence.detector import NO_FACE, PresenceDetector

FRAME = np.zeros((480, 640, 3), dtype=np.uint8)


def row(x, y, w, h, score):
    return [x, y, w, h] + [0.0] * 10 + [score]


def test_keeps_highest_scoring_face():
    faces = np.array([row(10, 10, 50, 50, 0.62), row(300, 200, 80, 90, 0.914)], dtype=np.float32)
    model = FakeDetectorModel(faces)

    result = PresenceDetector(model=model).detect(FRAME)

    assert result.detected
    assert result.confidence == 91
    assert result.box.x == 300
    assert result.box.center == (340, 245)
    assert model.input_sizes == [(640, 480)]


def test_no_faces():
    assert PresenceDetector(model=FakeDetectorModel(None)).detect(FRAME) == NO_FACE


def test_model_errors_count_as_no_face():
    detector = PresenceDetector(model=FakeDetectorModel(error=RuntimeError("bad frame")))
    assert detector.detect(FRAME) == NO_FACE


def test_input_size_follows_frame():
    model = FakeDetectorModel(None)
    detector = PresenceDetector(model=model)
    detector.detect(FRAME)
    detector.detect(FRAME)
    detector.detect(np.zeros((240, 320, 3), dtype=np.uint8))
    assert model.input_sizes == [(640, 480), (320, 240)]


def test_model_path_required():
    with pytest.raises(ValueError):
        PresenceDetector()

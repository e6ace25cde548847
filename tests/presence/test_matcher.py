import numpy as np
import pytest

pytest.importorskip("face_recognition")

from ojt_attendance.presence import matcher  # noqa: E402
from ojt_attendance.presence.matcher import FaceMatcher, to_rgb  # noqa: E402

REFERENCE = np.linspace(0, 1, 128)


def test_to_rgb_handles_channel_layouts():
    gray = np.zeros((4, 4), dtype=np.uint8)
    bgra = np.zeros((4, 4, 4), dtype=np.uint8)
    bgr = np.zeros((4, 4, 3), dtype=np.uint8)
    bgr[..., 0] = 255

    assert to_rgb(gray).shape == (4, 4, 3)
    assert to_rgb(bgra).shape == (4, 4, 3)
    assert to_rgb(bgr)[0, 0].tolist() == [0, 0, 255]


def test_no_face_in_frame(monkeypatch):
    monkeypatch.setattr(matcher.face_recognition, "face_locations", lambda rgb: [])
    face = FaceMatcher(REFERENCE)
    frame = np.zeros((8, 8, 3), dtype=np.uint8)

    assert face.similarity(frame) is None
    assert not face.verify(frame)


def test_same_face_matches(monkeypatch):
    monkeypatch.setattr(matcher.face_recognition, "face_locations", lambda rgb: [(0, 8, 8, 0)])
    monkeypatch.setattr(matcher.face_recognition, "face_encodings", lambda rgb, boxes: [REFERENCE])
    face = FaceMatcher(REFERENCE)
    frame = np.zeros((8, 8, 3), dtype=np.uint8)

    assert face.similarity(frame) == 100
    assert face.verify(frame)


def test_distant_face_is_rejected(monkeypatch):
    other = REFERENCE + 0.1
    monkeypatch.setattr(matcher.face_recognition, "face_locations", lambda rgb: [(0, 8, 8, 0)])
    monkeypatch.setattr(matcher.face_recognition, "face_encodings", lambda rgb, boxes: [other])
    face = FaceMatcher(REFERENCE)

    # distance = 0.1 * sqrt(128) ~= 1.13
    assert face.similarity(np.zeros((8, 8, 3), dtype=np.uint8)) == 0
    assert not face.verify(np.zeros((8, 8, 3), dtype=np.uint8))

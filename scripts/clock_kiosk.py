"""Run one verified clock-in or clock-out from a camera kiosk.

    python scripts/clock_kiosk.py --trainee 12 [--out] [--reference face.jpg] [--manual]

Opens the camera, waits for the presence check to auto-capture a photo,
resolves the location and posts the action to the attendance API. With
--manual the kiosk offers a manual shot when auto-capture times out.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys

import cv2
import numpy as np
from dotenv import load_dotenv

from ojt_attendance.client.api import AttendanceApiClient
from ojt_attendance.client.clock import AttendanceClock
from ojt_attendance.config import get_settings_module
from ojt_attendance.core.enums import ClockState
from ojt_attendance.core.exceptions import DeviceAccessError
from ojt_attendance.core.log import configure_logging
from ojt_attendance.geo.resolver import GeolocationResolver, IpLocationProvider, StaticLocationProvider
from ojt_attendance.presence.camera import CameraSession, DetectionLoop
from ojt_attendance.presence.detector import PresenceDetector
from ojt_attendance.schedule.model import OJTSchedule

logger = logging.getLogger("ojt_attendance.kiosk")


def _resolver(settings) -> GeolocationResolver:
    lat = getattr(settings, "KIOSK_LATITUDE", None)
    lon = getattr(settings, "KIOSK_LONGITUDE", None)
    if lat and lon:
        provider = StaticLocationProvider(float(lat), float(lon))
    else:
        provider = IpLocationProvider()
    return GeolocationResolver(provider, reverse_url=settings.REVERSE_GEOCODE_URL)


def _face_verified(jpeg: bytes, reference: str | None) -> bool:
    if not reference:
        return False
    from ojt_attendance.presence.matcher import FaceMatcher

    frame = cv2.imdecode(np.frombuffer(jpeg, np.uint8), cv2.IMREAD_COLOR)
    return FaceMatcher.from_image(reference).verify(frame)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--trainee", type=int, required=True)
    parser.add_argument("--out", action="store_true", help="clock out instead of clocking in")
    parser.add_argument("--reference", help="reference photo for face verification")
    parser.add_argument("--timeout", type=float, default=60.0, help="seconds to wait for a capture")
    parser.add_argument("--manual", action="store_true", help="offer a manual capture when auto-capture times out")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    clock = AttendanceClock(
        AttendanceApiClient(settings.OJT_API_BASE_URL),
        args.trainee,
        schedule=OJTSchedule.from_settings(settings),
        resolver=_resolver(settings),
    )
    status = clock.refresh()
    expected = ClockState.WORKING if args.out else ClockState.NOT_CLOCKED
    if status.state != expected:
        print(f"Nothing to do: current state is {status.state.value}")
        return 1

    detector = PresenceDetector(settings.FACE_MODEL_PATH)
    try:
        with CameraSession(settings.CAMERA_DEVICE) as camera:
            with DetectionLoop(
                camera,
                detector,
                on_reading=lambda r: logger.info("confidence %d%%", r.displayed),
            ) as loop:
                photo = loop.wait(args.timeout)
                if photo is None and args.manual:
                    input("No auto-capture yet. Face the camera and press Enter to take the photo...")
                    photo = loop.capture_now()
    except DeviceAccessError as e:
        print(f"Camera error: {e}")
        return 2

    if photo is None:
        print("No face captured, try again")
        return 3

    verified = _face_verified(photo.jpeg, args.reference)
    if args.out:
        outcome = clock.clock_out(photo.data_url, face_verified=verified)
    else:
        outcome = clock.clock_in(photo.data_url, face_verified=verified)

    banner = clock.runner.banner
    if banner:
        print(banner.message)
    if clock.permission_flow_open:
        print("Clock-in after the cutoff needs supervisor approval; request it from the attendance page.")
    return 0 if outcome.ok else 4


if __name__ == "__main__":
    sys.exit(main())

import pytest
import requests

from fakes import FakeResponse, FakeSession
from ojt_attendance.core.exceptions import DeviceAccessError
from ojt_attendance.geo.resolver import (
    USER_AGENT,
    GeolocationResolver,
    IpLocationProvider,
    ResolvedLocation,
    StaticLocationProvider,
    format_coordinates,
)

MANILA = StaticLocationProvider(14.5995, 120.9842)


def test_format_coordinates_uses_six_decimals():
    assert format_coordinates(14.5995, 120.9842) == "14.599500, 120.984200"
    assert format_coordinates(-1.5, 2, precision=2) == "-1.50, 2.00"


def test_resolves_display_name():
    session = FakeSession(FakeResponse({"display_name": "Rizal Park, Manila, Philippines"}))

    location = GeolocationResolver(MANILA, session=session, timeout=3).resolve()

    assert location == ResolvedLocation(14.5995, 120.9842, "Rizal Park, Manila, Philippines")
    call = session.calls[0]
    assert call["params"] == {"lat": 14.5995, "lon": 120.9842, "format": "json"}
    assert call["headers"] == {"User-Agent": USER_AGENT}
    assert call["timeout"] == 3.0


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"error": "Unable to geocode"}),
        FakeResponse(None, status_code=503, reason="Service Unavailable"),
        FakeResponse(invalid_json=True),
        requests.ConnectionError("offline"),
    ],
)
def test_falls_back_to_coordinates(response):
    resolver = GeolocationResolver(MANILA, session=FakeSession(response))
    assert resolver.resolve().address == "14.599500, 120.984200"


def test_missing_position_resolves_to_none():
    session = FakeSession()
    resolver = GeolocationResolver(StaticLocationProvider(None, None), session=session)

    assert resolver.resolve() is None
    assert session.calls == []


def test_ip_provider():
    session = FakeSession(FakeResponse({"status": "success", "lat": 14.6, "lon": 121.0}))
    coords = IpLocationProvider(session=session).current(timeout=2)
    assert (coords.latitude, coords.longitude) == (14.6, 121.0)


@pytest.mark.parametrize(
    "response",
    [FakeResponse({"status": "fail", "message": "private range"}), requests.Timeout("slow")],
)
def test_ip_provider_failures_are_device_errors(response):
    with pytest.raises(DeviceAccessError):
        IpLocationProvider(session=FakeSession(response)).current(timeout=2)


def test_denied_ip_location_does_not_block():
    session = FakeSession(requests.Timeout("slow"))
    resolver = GeolocationResolver(IpLocationProvider(session=session), session=FakeSession())
    assert resolver.resolve() is None

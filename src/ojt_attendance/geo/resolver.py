"""Best-effort location for clock-in/out.

A provider yields device coordinates; the resolver reverse-geocodes them
into a display address, falling back to a "lat, lon" string. Missing
coordinates resolve to None and never block an attendance action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..core.constants import COORDINATE_PRECISION, GEOLOCATION_TIMEOUT_SECONDS
from ..core.exceptions import DeviceAccessError

logger = logging.getLogger(__name__)

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
IP_LOCATION_URL = "http://ip-api.com/json"
USER_AGENT = "FragranzaOJTAttendance/1.0"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ResolvedLocation:
    latitude: float
    longitude: float
    address: str


def format_coordinates(latitude: float, longitude: float, *, precision: int = COORDINATE_PRECISION) -> str:
    return f"{latitude:.{precision}f}, {longitude:.{precision}f}"


class LocationProvider(Protocol):
    def current(self, *, timeout: float) -> Coordinates:
        """Raise DeviceAccessError when the position is denied or unavailable."""

        raise NotImplementedError


class StaticLocationProvider:
    """Fixed kiosk coordinates from settings."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float]):
        self._latitude = latitude
        self._longitude = longitude

    def current(self, *, timeout: float) -> Coordinates:
        if self._latitude is None or self._longitude is None:
            raise DeviceAccessError("No kiosk coordinates configured")
        return Coordinates(float(self._latitude), float(self._longitude))


class IpLocationProvider:
    """Approximate position from the public IP address."""

    def __init__(self, url: str = IP_LOCATION_URL, *, session: Optional[requests.Session] = None):
        self._url = url
        self._session = session or requests.Session()

    def current(self, *, timeout: float) -> Coordinates:
        try:
            response = self._session.get(self._url, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise DeviceAccessError(f"IP geolocation failed: {e}")

        if data.get("status") not in (None, "success") or data.get("lat") is None or data.get("lon") is None:
            raise DeviceAccessError("IP geolocation unavailable")
        return Coordinates(float(data["lat"]), float(data["lon"]))


class GeolocationResolver:
    def __init__(
        self,
        provider: LocationProvider,
        *,
        reverse_url: str = NOMINATIM_REVERSE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
    ):
        self._provider = provider
        self._reverse_url = reverse_url
        self._session = session or requests.Session()
        self._timeout = float(timeout)

    def resolve(self) -> Optional[ResolvedLocation]:
        try:
            coords = self._provider.current(timeout=self._timeout)
        except DeviceAccessError as e:
            logger.info("Location unavailable, continuing without it: %s", e)
            return None

        return ResolvedLocation(
            latitude=coords.latitude,
            longitude=coords.longitude,
            address=self.reverse_geocode(coords.latitude, coords.longitude),
        )

    def reverse_geocode(self, latitude: float, longitude: float) -> str:
        fallback = format_coordinates(latitude, longitude)
        try:
            response = self._session.get(
                self._reverse_url,
                params={"lat": latitude, "lon": longitude, "format": "json"},
                headers={"User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Reverse geocoding failed, using coordinates: %s", e)
            return fallback

        address = data.get("display_name") if isinstance(data, dict) else None
        if not address:
            logger.warning("Reverse geocoding returned no address, using coordinates")
            return fallback
        return str(address)

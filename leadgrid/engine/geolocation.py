"""Best-effort location lookup for near-me searches."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

import httpx
import structlog


@dataclass(frozen=True, slots=True)
class GeoLocation:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


class Geolocator(Protocol):
    async def locate(self) -> GeoLocation: ...


class GeolocationUnavailable(Exception):
    """The runtime could not provide a position."""


class StaticGeolocator:
    """Always answers with fixed coordinates (``--lat``/``--lng``)."""

    def __init__(self, location: GeoLocation) -> None:
        self.location = location

    async def locate(self) -> GeoLocation:
        return self.location


class IpGeolocator:
    """Approximate the caller's position through a JSON IP lookup service."""

    def __init__(
        self,
        lookup_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.lookup_url = lookup_url
        self.timeout = timeout
        self._transport = transport

    async def locate(self) -> GeoLocation:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(self.lookup_url)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise GeolocationUnavailable(str(exc)) from exc
        if not isinstance(payload, dict):
            raise GeolocationUnavailable("lookup returned a non-object payload")
        lat = payload.get("latitude", payload.get("lat"))
        lng = payload.get("longitude", payload.get("lon", payload.get("lng")))
        try:
            return GeoLocation(latitude=float(lat), longitude=float(lng))
        except (TypeError, ValueError) as exc:
            raise GeolocationUnavailable(f"lookup returned no coordinates: {payload}") from exc


async def resolve_location(
    geolocator: Geolocator | None,
    timeout: float,
    logger: structlog.BoundLogger | None = None,
) -> GeoLocation | None:
    """Ask ``geolocator`` for a position; any failure or timeout yields ``None``."""

    if geolocator is None:
        return None
    log = logger or structlog.get_logger("leadgrid.geolocation")
    try:
        return await asyncio.wait_for(geolocator.locate(), timeout=timeout)
    except asyncio.TimeoutError:
        log.warning("geolocation_unavailable", reason="timeout", timeout=timeout)
    except Exception as exc:  # noqa: BLE001
        log.warning("geolocation_unavailable", reason=str(exc))
    return None


__all__ = [
    "GeoLocation",
    "GeolocationUnavailable",
    "Geolocator",
    "IpGeolocator",
    "StaticGeolocator",
    "resolve_location",
]

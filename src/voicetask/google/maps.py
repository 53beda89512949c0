import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import httpx

from voicetask.config import settings
from voicetask.models import Coordinates

logger = logging.getLogger(__name__)

MAPS_BASE_URL = "https://maps.googleapis.com/maps/api"

T = TypeVar("T")


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Outcome of one outbound lookup.

    Callers only care whether ``value`` is present; the status says why not.
    """

    status: LookupStatus
    value: T | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status == LookupStatus.FOUND and self.value is not None

    @classmethod
    def hit(cls, value: T) -> "LookupResult[T]":
        return cls(status=LookupStatus.FOUND, value=value)

    @classmethod
    def miss(cls) -> "LookupResult[T]":
        return cls(status=LookupStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls, error: str) -> "LookupResult[T]":
        return cls(status=LookupStatus.UNAVAILABLE, error=error)


@dataclass
class PlaceCandidate:
    name: str
    lat: float
    lng: float
    address: str = ""


@dataclass
class TravelTime:
    origin: str
    destination: str
    duration_seconds: int
    distance_meters: int | None = None

    @property
    def duration_minutes(self) -> int:
        """Whole minutes, rounded up."""
        return math.ceil(self.duration_seconds / 60)


def _describe_error(error: Exception) -> str:
    """Summarise a failed request without its URL, which carries the key and query."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}"
    return type(error).__name__


def _format_point(point: str | Coordinates | tuple[float, float]) -> str:
    if isinstance(point, str):
        return point
    if isinstance(point, Coordinates):
        return f"{point.lat},{point.lng}"
    return f"{point[0]},{point[1]}"


class MapsClient:
    """Google Maps place search and travel time, one request per call, no retry."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = settings.google_maps_api_key if api_key is None else api_key
        self.timeout = timeout or settings.maps_timeout_seconds
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MapsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def find_place(self, query: str) -> LookupResult[PlaceCandidate]:
        """Resolve free text to the first matching place."""
        if not self.api_key:
            logger.warning("Google Maps API key not configured")
            return LookupResult.unavailable("missing api key")

        client = await self._get_client()

        try:
            response = await client.get(
                f"{MAPS_BASE_URL}/place/findplacefromtext/json",
                params={
                    "input": query,
                    "inputtype": "textquery",
                    "fields": "name,geometry,formatted_address",
                    "key": self.api_key,
                },
            )
            response.raise_for_status()
            data = response.json()

            candidates = data.get("candidates") or []
            if not candidates:
                logger.info(f"No place found: {data.get('status')}")
                return LookupResult.miss()

            place = candidates[0]
            location = place["geometry"]["location"]

            return LookupResult.hit(
                PlaceCandidate(
                    name=place.get("name") or query,
                    lat=location["lat"],
                    lng=location["lng"],
                    address=place.get("formatted_address", ""),
                )
            )
        except Exception as e:
            reason = _describe_error(e)
            logger.warning(f"Place lookup failed: {reason}")
            return LookupResult.unavailable(reason)

    async def get_travel_time(
        self,
        origin: str | Coordinates | tuple[float, float],
        destination: str | Coordinates | tuple[float, float],
        mode: str = "driving",
    ) -> LookupResult[TravelTime]:
        if not self.api_key:
            logger.warning("Google Maps API key not configured")
            return LookupResult.unavailable("missing api key")

        client = await self._get_client()

        origin_str = _format_point(origin)
        dest_str = _format_point(destination)

        try:
            response = await client.get(
                f"{MAPS_BASE_URL}/distancematrix/json",
                params={
                    "origins": origin_str,
                    "destinations": dest_str,
                    "mode": mode,
                    "units": "metric",
                    "key": self.api_key,
                },
            )
            response.raise_for_status()
            data = response.json()

            rows = data.get("rows") or []
            elements = rows[0].get("elements") if rows else None
            element = elements[0] if elements else None
            if not element or "duration" not in element:
                logger.warning(f"Route not found: {data.get('status')}")
                return LookupResult.miss()

            distance = element.get("distance", {}).get("value")
            return LookupResult.hit(
                TravelTime(
                    origin=origin_str,
                    destination=dest_str,
                    duration_seconds=int(element["duration"]["value"]),
                    distance_meters=distance,
                )
            )
        except Exception as e:
            reason = _describe_error(e)
            logger.warning(f"Travel time lookup failed: {reason}")
            return LookupResult.unavailable(reason)

"""Location detection for captured utterances.

Saved locations win over free text. Otherwise the first "at X", "in X" or
"@ X" phrase is looked up once with Google Maps; no ranking, no retry.
"""

import logging
import re
from collections.abc import Sequence

from voicetask.google.maps import MapsClient
from voicetask.models import LocationMatch, SavedLocation

logger = logging.getLogger(__name__)

LOCATION_PATTERNS = (
    re.compile(r"\bat\s+([^,]+?)(?:\s|$|,)", re.IGNORECASE),
    re.compile(r"\bin\s+([^,]+?)(?:\s|$|,)", re.IGNORECASE),
    re.compile(r"\s@\s*([^,]+?)(?:\s|$|,)", re.IGNORECASE),
)


def match_saved_location(text: str, saved_locations: Sequence[SavedLocation]) -> LocationMatch | None:
    """Return the first saved location whose name appears in the text."""
    text_lower = text.lower()
    for location in saved_locations:
        if location.name and location.name.lower() in text_lower:
            return LocationMatch(
                name=location.name,
                lat=location.lat,
                lng=location.lng,
                radius_m=location.radius_m,
            )
    return None


def find_location_phrase(text: str) -> str | None:
    """Capture the place phrase from the first pattern that matches."""
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if match:
            phrase = match.group(1).strip()
            if phrase:
                return phrase
    return None


class LocationResolver:
    def __init__(self, maps_client: MapsClient | None = None):
        self.maps_client = maps_client

    async def resolve(
        self,
        text: str,
        saved_locations: Sequence[SavedLocation] = (),
    ) -> LocationMatch | None:
        saved = match_saved_location(text, saved_locations)
        if saved:
            logger.debug(f"Matched saved location '{saved.name}'")
            return saved

        phrase = find_location_phrase(text)
        if not phrase:
            return None

        if not self.maps_client or not self.maps_client.is_configured:
            logger.debug(f"Skipping place lookup for '{phrase}': maps not configured")
            return None

        lookup = await self.maps_client.find_place(phrase)
        if not lookup.found:
            logger.debug(f"Location phrase '{phrase}' not resolved ({lookup.status.value})")
            return None

        place = lookup.value
        return LocationMatch(name=place.name, lat=place.lat, lng=place.lng)  # type: ignore[union-attr]

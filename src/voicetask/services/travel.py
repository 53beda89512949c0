import logging

from voicetask.google.maps import MapsClient
from voicetask.models import Coordinates

logger = logging.getLogger(__name__)


class TravelTimeEstimator:
    """Driving time from the user to the item's location, in whole minutes."""

    def __init__(self, maps_client: MapsClient | None = None, mode: str = "driving"):
        self.maps_client = maps_client
        self.mode = mode

    @property
    def is_available(self) -> bool:
        return bool(self.maps_client and self.maps_client.is_configured)

    async def estimate(self, origin: Coordinates, destination: Coordinates) -> int | None:
        """Return minutes rounded up, or None when the estimate is unavailable."""
        if not self.is_available:
            return None

        try:
            lookup = await self.maps_client.get_travel_time(  # type: ignore[union-attr]
                origin, destination, mode=self.mode
            )
        except Exception as e:
            logger.warning(f"Travel time estimate failed: {type(e).__name__}")
            return None

        if not lookup.found:
            logger.info(f"No travel time available ({lookup.status.value})")
            return None

        return lookup.value.duration_minutes  # type: ignore[union-attr]

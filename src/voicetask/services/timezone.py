"""Timezone handling for the parser.

- Resolve the caller's IANA zone, falling back to the configured default
- Anchor "now" in that zone for relative date resolution
- Convert resolved local times to UTC instants
"""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from voicetask.config import settings

logger = logging.getLogger(__name__)


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return a ZoneInfo for ``name``.

    Unknown or empty names fall back to settings.user_timezone, then UTC.
    """
    for candidate in (name, settings.user_timezone):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{candidate}', falling back")
    return ZoneInfo("UTC")


class TimezoneService:
    """Anchors date resolution in the user's zone."""

    def __init__(self, timezone: str | None = None, now: datetime | None = None):
        """
        Args:
            timezone: IANA timezone name. Defaults to settings.user_timezone.
            now: Fixed reference instant. Defaults to the wall clock on each call.
        """
        self.tz = resolve_timezone(timezone)
        self._fixed_now = now

    def now(self) -> datetime:
        """Current time in the user's zone."""
        if self._fixed_now is None:
            return datetime.now(self.tz)
        if self._fixed_now.tzinfo is None:
            return self._fixed_now.replace(tzinfo=self.tz)
        return self._fixed_now.astimezone(self.tz)

    def localize(self, dt: datetime) -> datetime:
        """Attach the user's zone to a naive datetime, or convert an aware one."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self.tz)
        return dt.astimezone(self.tz)

    def to_utc(self, dt: datetime) -> datetime:
        return self.localize(dt).astimezone(UTC)

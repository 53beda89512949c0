from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from voicetask.google.maps import LookupResult, MapsClient
from voicetask.services.pipeline import ParsePipeline

NEW_YORK = "America/New_York"


@pytest.fixture
def reference_now() -> datetime:
    """Monday 2026-10-19 10:00 in New York (UTC-4)."""
    return datetime(2026, 10, 19, 10, 0, tzinfo=ZoneInfo(NEW_YORK))


@pytest.fixture
def mock_maps_client() -> MagicMock:
    """A configured Maps client whose lookups find nothing."""
    client = MagicMock(spec=MapsClient)
    client.is_configured = True
    client.find_place = AsyncMock(return_value=LookupResult.miss())
    client.get_travel_time = AsyncMock(return_value=LookupResult.miss())
    return client


@pytest.fixture
def pipeline(reference_now: datetime) -> ParsePipeline:
    return ParsePipeline(maps_client=None, base_confidence=0.7, default_radius=150, now=reference_now)

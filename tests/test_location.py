"""Tests for saved-location matching and place lookup."""

import pytest

from voicetask.google.maps import LookupResult, PlaceCandidate
from voicetask.models import SavedLocation
from voicetask.services.location import (
    LocationResolver,
    find_location_phrase,
    match_saved_location,
)

GYM = SavedLocation(name="Gym", lat=40.7, lng=-74.0, radius_m=75)
OFFICE = SavedLocation(name="Office", lat=40.75, lng=-73.98, radius_m=200)


class TestMatchSavedLocation:
    def test_case_insensitive_substring(self):
        match = match_saved_location("leg day at the gym", [GYM])
        assert match is not None
        assert match.name == "Gym"
        assert match.radius_m == 75

    def test_first_saved_location_wins(self):
        match = match_saved_location("Office then Gym", [GYM, OFFICE])
        assert match.name == "Gym"

    def test_no_match(self):
        assert match_saved_location("Buy milk", [GYM, OFFICE]) is None


class TestFindLocationPhrase:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Lunch at Nopa", "Nopa"),
            ("Coffee at Blue Bottle, then work", "Blue"),
            ("Meet in Brooklyn", "Brooklyn"),
            ("Drinks @ Joe's", "Joe's"),
        ],
    )
    def test_phrases(self, text, expected):
        assert find_location_phrase(text) == expected

    def test_at_is_checked_before_in(self):
        assert find_location_phrase("Meet in Brooklyn at Nopa") == "Nopa"

    def test_clock_time_is_captured_literally(self):
        assert find_location_phrase("Lunch at 1pm") == "1pm"

    def test_no_phrase(self):
        assert find_location_phrase("Buy groceries") is None


class TestLocationResolver:
    """Saved locations first, then one Maps lookup."""

    @pytest.mark.asyncio
    async def test_saved_location_skips_lookup(self, mock_maps_client):
        resolver = LocationResolver(mock_maps_client)
        match = await resolver.resolve("Workout at Gym", [GYM])

        assert match.name == "Gym"
        assert match.radius_m == 75
        mock_maps_client.find_place.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_hit(self, mock_maps_client):
        mock_maps_client.find_place.return_value = LookupResult.hit(
            PlaceCandidate(name="Nopa", lat=37.77, lng=-122.43, address="560 Divisadero St")
        )
        resolver = LocationResolver(mock_maps_client)
        match = await resolver.resolve("Lunch at Nopa")

        mock_maps_client.find_place.assert_awaited_once_with("Nopa")
        assert match.name == "Nopa"
        assert match.lat == 37.77
        assert match.radius_m is None

    @pytest.mark.asyncio
    async def test_lookup_miss(self, mock_maps_client):
        resolver = LocationResolver(mock_maps_client)
        assert await resolver.resolve("Lunch at Nowhere") is None

    @pytest.mark.asyncio
    async def test_lookup_unavailable(self, mock_maps_client):
        mock_maps_client.find_place.return_value = LookupResult.unavailable("timeout")
        resolver = LocationResolver(mock_maps_client)
        assert await resolver.resolve("Lunch at Nopa") is None

    @pytest.mark.asyncio
    async def test_unconfigured_client_skips_lookup(self, mock_maps_client):
        mock_maps_client.is_configured = False
        resolver = LocationResolver(mock_maps_client)

        assert await resolver.resolve("Lunch at Nopa") is None
        mock_maps_client.find_place.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_client(self):
        resolver = LocationResolver(None)
        assert await resolver.resolve("Lunch at Nopa") is None

    @pytest.mark.asyncio
    async def test_no_phrase_skips_lookup(self, mock_maps_client):
        resolver = LocationResolver(mock_maps_client)
        assert await resolver.resolve("Buy groceries") is None
        mock_maps_client.find_place.assert_not_awaited()

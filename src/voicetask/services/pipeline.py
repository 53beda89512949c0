"""Parse pipeline: one utterance in, one structured task or event out.

Stages run in a fixed order because later ones consume earlier output:
date/time -> priority -> category -> location -> tags -> title ->
reminders -> travel time. A stage that finds nothing leaves its fields at
their defaults; only blank input is rejected.

Confidence starts at a base value and each successful extraction adds a
fixed bonus. The sum is not clamped, so it can exceed 1.0.
"""

import logging
from datetime import datetime

from voicetask.config import settings
from voicetask.errors import InvalidInputError
from voicetask.google.maps import MapsClient
from voicetask.models import ParseRequest, ParseResult
from voicetask.services.datetime_extractor import DateTimeExtractor, resolve_schedule
from voicetask.services.keywords import (
    DEFAULT_PRIORITY,
    category_classifier,
    priority_classifier,
)
from voicetask.services.location import LocationResolver
from voicetask.services.reminders import ReminderPlanner
from voicetask.services.tags import extract_tags
from voicetask.services.title import TitleNormalizer
from voicetask.services.travel import TravelTimeEstimator

logger = logging.getLogger(__name__)

DATE_BONUS = 0.2
LOCATION_BONUS = 0.15
CATEGORY_BONUS = 0.1
PRIORITY_BONUS = 0.1


class ParsePipeline:
    """Stateless orchestrator; safe to share across concurrent calls."""

    def __init__(
        self,
        maps_client: MapsClient | None = None,
        base_confidence: float | None = None,
        default_radius: float | None = None,
        now: datetime | None = None,
    ):
        """
        Args:
            maps_client: Google Maps client. None disables place lookup and travel time.
            base_confidence: Starting confidence. Defaults to settings.base_confidence.
            default_radius: Radius for looked-up places. Defaults to settings.default_radius_m.
            now: Fixed reference instant for date resolution (tests).
        """
        self.base_confidence = (
            settings.base_confidence if base_confidence is None else base_confidence
        )
        self.default_radius = settings.default_radius_m if default_radius is None else default_radius
        self.now = now

        self.priority = priority_classifier()
        self.category = category_classifier()
        self.locations = LocationResolver(maps_client)
        self.titles = TitleNormalizer(self.priority.keywords)
        self.reminders = ReminderPlanner()
        self.travel = TravelTimeEstimator(maps_client)

    async def parse(self, request: ParseRequest) -> ParseResult:
        text = request.text
        if not text or not text.strip():
            raise InvalidInputError()

        logger.info(f"Parsing text: {text!r} (timezone={request.user_timezone})")

        result = ParseResult(
            title=text.strip(),
            raw_text=text,
            priority=DEFAULT_PRIORITY,
            confidence_score=self.base_confidence,
            confidence=self.base_confidence,
        )
        notes = result.parsing_notes

        # Date and time
        extractor = DateTimeExtractor(request.user_timezone, now=self.now)
        date_match = extractor.extract(text)
        duration = extractor.extract_duration(text)
        if date_match:
            notes.append(f"Found date/time: {date_match.text}")
            result.confidence_score += DATE_BONUS
        else:
            notes.append("No specific date/time found")

        schedule = resolve_schedule(text, date_match, duration)
        result.type = schedule.item_type
        result.start_at = schedule.start_at
        result.end_at = schedule.end_at
        result.due_at = schedule.due_at
        result.all_day = schedule.all_day
        if duration and result.start_at:
            notes.append(f"Duration detected: {duration.value} {duration.unit}")

        # Priority
        priority_match = self.priority.classify(text)
        if priority_match:
            result.priority = priority_match.label
            notes.append(f"Priority detected: {priority_match.keyword}")
            result.confidence_score += PRIORITY_BONUS

        # Category
        category_match = self.category.classify(text)
        if category_match:
            result.category = category_match.label
            notes.append(f"Category detected: {category_match.label.value}")
            result.confidence_score += CATEGORY_BONUS

        # Location
        default_radius = request.default_radius or self.default_radius
        location = await self.locations.resolve(text, request.saved_locations)
        if location:
            result.location_name = location.name
            result.lat = location.lat
            result.lng = location.lng
            result.radius_m = location.radius_m or default_radius
            notes.append(f"Location detected: {location.name}")
            result.confidence_score += LOCATION_BONUS

        # Tags
        tags = extract_tags(text)
        if tags:
            result.tags = tags
            notes.append(f"Tags found: {', '.join(tags)}")

        result.title = self.titles.normalize(
            text,
            date_text=date_match.text if date_match else None,
            duration_text=duration.text if duration else None,
            location_name=result.location_name,
        )

        result.suggested_reminders = self.reminders.plan(result)

        # Travel time
        destination = result.coordinates
        if destination and request.user_location and self.travel.is_available:
            travel_minutes = await self.travel.estimate(request.user_location, destination)
            if travel_minutes is not None:
                result.travel_time_minutes = travel_minutes
                notes.append(f"Estimated travel time: {travel_minutes} minutes")
                result.suggested_reminders.append(
                    self.reminders.travel_reminder(travel_minutes, result.location_name)
                )

        logger.info(
            f"Parsed '{result.title}': type={result.type.value}, priority={result.priority}, "
            f"category={result.category.value if result.category else None}, "
            f"confidence={result.confidence_score:.2f}"
        )
        return result


async def parse_text(text: str, **kwargs) -> ParseResult:
    """Parse one utterance with a default pipeline.

    Keyword arguments are passed to ParseRequest. Creates and closes its own
    Maps client when an API key is configured.
    """
    maps_client = MapsClient() if settings.has_google_maps else None
    try:
        return await ParsePipeline(maps_client=maps_client).parse(ParseRequest(text=text, **kwargs))
    finally:
        if maps_client:
            await maps_client.close()

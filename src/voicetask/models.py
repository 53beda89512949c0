"""Data model for a single parse invocation.

Every object here is built fresh per call and discarded once the caller has
consumed the ParseResult.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ItemType(str, Enum):
    TASK = "task"
    EVENT = "event"


class TriggerType(str, Enum):
    """How a reminder is delivered."""

    ABSOLUTE_TIME = "datetime"
    RELATIVE_OFFSET = "offset"
    GEOFENCE = "geofence"


class Category(str, Enum):
    WORK = "work"
    HEALTH = "health"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    FINANCE = "finance"
    TRAVEL = "travel"
    LEARNING = "learning"
    SOCIAL = "social"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class SavedLocation:
    """A user-defined named place, checked before free-text geocoding."""

    name: str
    lat: float
    lng: float
    radius_m: float


@dataclass
class ParseRequest:
    text: str
    user_timezone: str | None = None
    user_location: Coordinates | None = None
    saved_locations: list[SavedLocation] = field(default_factory=list)
    default_radius: float | None = None


@dataclass(frozen=True)
class DateMatch:
    """A date/time phrase found in the text, resolved to UTC instants."""

    text: str
    start: datetime
    end: datetime | None = None
    has_clock_time: bool = False


@dataclass(frozen=True)
class DurationMatch:
    text: str
    value: int
    unit: str

    @property
    def minutes(self) -> int:
        return self.value * 60 if self.unit.startswith("h") else self.value


@dataclass(frozen=True)
class LocationMatch:
    """A resolved place; radius is None when it came from a text lookup."""

    name: str
    lat: float
    lng: float
    radius_m: float | None = None


@dataclass
class ReminderSuggestion:
    trigger_type: TriggerType
    lead_time_minutes: int
    offset_minutes: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"trigger_type": self.trigger_type.value}
        if self.offset_minutes is not None:
            data["offset_minutes"] = self.offset_minutes
        data["lead_time_minutes"] = self.lead_time_minutes
        if self.message is not None:
            data["message"] = self.message
        return data


def to_iso8601_utc(value: datetime) -> str:
    """Format an aware datetime as an ISO 8601 UTC instant, e.g. 2026-10-20T18:00:00Z."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class ParseResult:
    title: str
    raw_text: str
    type: ItemType = ItemType.TASK
    notes: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    all_day: bool | None = None
    due_at: datetime | None = None
    location_name: str | None = None
    lat: float | None = None
    lng: float | None = None
    radius_m: float | None = None
    priority: int = 3
    category: Category | None = None
    tags: list[str] = field(default_factory=list)
    suggested_reminders: list[ReminderSuggestion] = field(default_factory=list)
    confidence_score: float = 0.0
    confidence: float = 0.0
    parsing_notes: list[str] = field(default_factory=list)
    travel_time_minutes: int | None = None

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def coordinates(self) -> Coordinates | None:
        if not self.has_location:
            return None
        return Coordinates(self.lat, self.lng)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the response shape; absent optional fields are omitted."""
        data: dict[str, Any] = {"title": self.title}
        if self.notes is not None:
            data["notes"] = self.notes
        data["type"] = self.type.value

        for key in ("start_at", "end_at"):
            value = getattr(self, key)
            if value is not None:
                data[key] = to_iso8601_utc(value)
        if self.all_day is not None:
            data["all_day"] = self.all_day
        if self.due_at is not None:
            data["due_at"] = to_iso8601_utc(self.due_at)

        for key in ("location_name", "lat", "lng", "radius_m"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value

        data["priority"] = self.priority
        data["tags"] = list(self.tags)
        if self.category is not None:
            data["category"] = self.category.value

        suggestions: dict[str, Any] = {
            "suggested_reminders": [r.to_dict() for r in self.suggested_reminders],
            "confidence_score": self.confidence_score,
            "parsing_notes": list(self.parsing_notes),
        }
        if self.travel_time_minutes is not None:
            suggestions["travel_time_minutes"] = self.travel_time_minutes
        data["ai_suggestions"] = suggestions
        data["confidence"] = self.confidence
        data["raw_text"] = self.raw_text
        return data

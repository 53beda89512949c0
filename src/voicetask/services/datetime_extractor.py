"""Date/time extraction for captured utterances.

Finds the single most prominent date/time phrase in the text and resolves it
to absolute UTC instants, anchored at "now" in the user's timezone with a
forward-looking bias (a bare weekday is the next one, never the past one).

Three grammars are tried in order and the first that finds anything wins:
default (everyday English), casual (slang and shorthand) and strict
(machine timestamps). Only the left-most phrase is used; a second date
mention in the same utterance is ignored.
"""

import calendar
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta, timezone

from voicetask.models import DateMatch, DurationMatch, ItemType
from voicetask.services.timezone import TimezoneService

logger = logging.getLogger(__name__)

# Due instants for day-only phrases ("on Friday") land at this local hour
DEFAULT_DAY_HOUR = 9

MEETING_DURATION_MINUTES = 60
DEFAULT_EVENT_DURATION_MINUTES = 30

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

MONTHS = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

PARTS_OF_DAY = {
    "morning": time(9, 0),
    "afternoon": time(14, 0),
    "evening": time(18, 0),
    "night": time(20, 0),
    "noon": time(12, 0),
    "midday": time(12, 0),
    "midnight": time(0, 0),
}

NUMBER_WORDS = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "a couple of": 2,
    "a few": 3,
}

SLANG_DAYS = {
    "tmrw": 1,
    "tmr": 1,
    "tomorow": 1,
    "tommorow": 1,
    "tommorrow": 1,
    "2moro": 1,
    "2morrow": 1,
    "tdy": 0,
}

DURATION_PATTERN = re.compile(r"(\d+)\s*(hour|hr|h|minute|min|m)s?", re.IGNORECASE)

_MONTH_NAMES = "|".join(sorted(MONTHS, key=len, reverse=True))
_AMOUNT = r"\d+|a\s+couple\s+of|a\s+few|an?|one|two|three|four|five|six|seven|eight|nine|ten"
_FLAGS = re.IGNORECASE

CLOCK_RANGE_RE = re.compile(
    r"\b(?:(?:at|from)\s+)?(?P<h1>\d{1,2})(?::(?P<m1>[0-5]\d))?\s*(?:(?P<ap1>[ap])\.?m\.?)?"
    r"\s*(?:-|–|to|until|till)\s*"
    r"(?P<h2>\d{1,2})(?::(?P<m2>[0-5]\d))?\s*(?P<ap2>[ap])\.?m\b\.?",
    _FLAGS,
)
CLOCK_RANGE_24H_RE = re.compile(
    r"\b(?:(?:at|from)\s+)?(?P<h1>[01]?\d|2[0-3]):(?P<m1>[0-5]\d)"
    r"\s*(?:-|–|to|until|till)\s*"
    r"(?P<h2>[01]?\d|2[0-3]):(?P<m2>[0-5]\d)\b",
    _FLAGS,
)
CLOCK_RE = re.compile(
    r"\b(?:(?:at|by|from)\s*)?(?P<h>\d{1,2})(?::(?P<m>[0-5]\d))?\s*(?P<ap>[ap])\.?m\b\.?",
    _FLAGS,
)
CLOCK_24H_RE = re.compile(
    r"\b(?:(?:at|by|from)\s+)?(?P<h>[01]?\d|2[0-3]):(?P<m>[0-5]\d)\b(?!\s*[ap]\.?m\b)",
    _FLAGS,
)
PART_OF_DAY_RE = re.compile(
    r"\b(?:(?:this|in\s+the|at|around)\s+)?(?P<part>morning|afternoon|evening|night|noon|midday|midnight)\b",
    _FLAGS,
)
TONIGHT_RE = re.compile(r"\btonight\b", _FLAGS)
DAY_WORD_RE = re.compile(
    r"\b(?P<word>(?:the\s+)?day\s+after\s+tomorrow|tomorrow|today)\b",
    _FLAGS,
)
WEEKDAY_RE = re.compile(
    r"\b(?:on\s+)?(?:(?P<mod>this|next|coming)\s+)?(?P<day>"
    + "|".join(WEEKDAYS)
    + r")\b",
    _FLAGS,
)
NEXT_PERIOD_RE = re.compile(r"\bnext\s+(?P<unit>week|month)\b", _FLAGS)
MONTH_DAY_RE = re.compile(
    r"\b(?:on\s+)?(?P<month>" + _MONTH_NAMES + r")\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?\b"
    r"(?:,?\s+(?P<year>\d{4})\b)?",
    _FLAGS,
)
DAY_MONTH_RE = re.compile(
    r"\b(?:on\s+)?(?:the\s+)?(?P<day>\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(?P<month>"
    + _MONTH_NAMES
    + r")\b\.?(?:,?\s+(?P<year>\d{4})\b)?",
    _FLAGS,
)
NUMERIC_DATE_RE = re.compile(
    r"\b(?:on\s+)?(?P<month>1[0-2]|0?[1-9])/(?P<day>3[01]|[12]\d|0?[1-9])(?:/(?P<year>\d{4}|\d{2}))?\b",
    _FLAGS,
)
ISO_DATE_RE = re.compile(
    r"\b(?:on\s+)?(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})\b",
    _FLAGS,
)
RELATIVE_RE = re.compile(
    r"\bin\s+(?P<amount>" + _AMOUNT + r")\s+(?P<unit>minute|min|hour|hr|day|week|month)s?\b",
    _FLAGS,
)
SLANG_DAY_RE = re.compile(r"\b(?P<word>" + "|".join(SLANG_DAYS) + r")\b", _FLAGS)
END_OF_DAY_RE = re.compile(r"\b(?:by\s+)?(?:the\s+)?(?:eod|end\s+of\s+(?:the\s+)?day)\b", _FLAGS)
WEEKEND_RE = re.compile(r"\b(?:(?P<mod>this|next)\s+|on\s+the\s+|the\s+)?weekend\b", _FLAGS)
OCLOCK_RE = re.compile(r"\b(?:(?:at|by)\s+)?(?P<h>\d{1,2})\s*o'?\s?clock\b", _FLAGS)
TIMESTAMP_RE = re.compile(
    r"\b(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})[T ]"
    r"(?P<h>[01]\d|2[0-3]):(?P<m>[0-5]\d)(?::(?P<s>[0-5]\d)(?:\.\d+)?)?"
    r"(?P<tz>Z|[+-](?:[01]\d|2[0-3]):?[0-5]\d)?",
    _FLAGS,
)

GAP_RE = re.compile(r"^[\s,]*$")


@dataclass(frozen=True)
class _Component:
    """A recognised fragment before resolution to an instant."""

    start: int
    end: int
    day: date | None = None
    clock: time | None = None
    end_clock: time | None = None
    instant: datetime | None = None
    soft_clock: bool = False
    rollover_days: int = 0

    @property
    def is_day_only(self) -> bool:
        return self.day is not None and self.clock is None and self.instant is None

    @property
    def is_clock_only(self) -> bool:
        return self.day is None and self.clock is not None and self.instant is None


@dataclass(frozen=True)
class Schedule:
    """Type decision and instants derived from a date match."""

    item_type: ItemType
    start_at: datetime | None = None
    end_at: datetime | None = None
    due_at: datetime | None = None
    all_day: bool | None = None


def _to_clock(hour: int, minute: int, meridiem: str | None) -> time | None:
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem.lower() == "p" and hour < 12:
            hour += 12
        elif meridiem.lower() == "a" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return time(hour, minute)


def _amount(value: str) -> int:
    value = re.sub(r"\s+", " ", value.lower())
    if value.isdigit():
        return int(value)
    return NUMBER_WORDS.get(value, 1)


def _add_months(day: date, months: int) -> date:
    """Same day N months on, clamped to the month's length.

    Raises ValueError when the year leaves the supported range.
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _calendar_date(now: datetime, year: str | None, month: int, day: int) -> date | None:
    """Build a date; a missing year means the next occurrence from today."""
    if year:
        full_year = int(year)
        if full_year < 100:
            full_year += 2000
        try:
            return date(full_year, month, day)
        except ValueError:
            return None
    try:
        candidate = date(now.year, month, day)
    except ValueError:
        # Feb 29 outside a leap year
        try:
            candidate = date(now.year + 1, month, day)
        except ValueError:
            return None
    if candidate < now.date():
        try:
            candidate = date(now.year + 1, month, day)
        except ValueError:
            return None
    return candidate


def _clock_range(match: re.Match, now: datetime) -> _Component | None:
    groups = match.groupdict()
    ap2 = groups.get("ap2")
    ap1 = groups.get("ap1") or ap2
    h1, h2 = int(groups["h1"]), int(groups["h2"])
    m1, m2 = int(groups["m1"] or 0), int(groups["m2"] or 0)
    start = _to_clock(h1, m1, ap1)
    end = _to_clock(h2, m2, ap2)
    if start is None or end is None:
        return None
    if ap2 and not groups.get("ap1") and start > end:
        # "11-1pm" starts in the morning
        start = _to_clock(h1, m1, "a" if ap2.lower() == "p" else "p")
        if start is None:
            return None
    return _Component(match.start(), match.end(), clock=start, end_clock=end)


def _clock(match: re.Match, now: datetime) -> _Component | None:
    clock = _to_clock(int(match.group("h")), int(match.group("m") or 0), match.groupdict().get("ap"))
    if clock is None:
        return None
    return _Component(match.start(), match.end(), clock=clock)


def _part_of_day(match: re.Match, now: datetime) -> _Component:
    clock = PARTS_OF_DAY[match.group("part").lower()]
    return _Component(match.start(), match.end(), clock=clock, soft_clock=True)


def _tonight(match: re.Match, now: datetime) -> _Component:
    return _Component(
        match.start(), match.end(), day=now.date(), clock=PARTS_OF_DAY["night"], soft_clock=True
    )


def _day_word(match: re.Match, now: datetime) -> _Component:
    word = match.group("word").lower()
    if word == "today":
        offset = 0
    elif word == "tomorrow":
        offset = 1
    else:
        offset = 2
    return _Component(match.start(), match.end(), day=now.date() + timedelta(days=offset))


def _weekday(match: re.Match, now: datetime) -> _Component:
    target = WEEKDAYS[match.group("day").lower()]
    days_ahead = (target - now.weekday()) % 7
    rollover = 0
    if days_ahead == 0:
        if (match.group("mod") or "").lower() == "next":
            days_ahead = 7
        else:
            rollover = 7
    return _Component(
        match.start(),
        match.end(),
        day=now.date() + timedelta(days=days_ahead),
        rollover_days=rollover,
    )


def _next_period(match: re.Match, now: datetime) -> _Component:
    if match.group("unit").lower() == "week":
        day = now.date() + timedelta(weeks=1)
    else:
        day = _add_months(now.date(), 1)
    return _Component(match.start(), match.end(), day=day)


def _named_month_date(match: re.Match, now: datetime) -> _Component | None:
    day = _calendar_date(
        now, match.group("year"), MONTHS[match.group("month").lower()], int(match.group("day"))
    )
    if day is None:
        return None
    return _Component(match.start(), match.end(), day=day)


def _numeric_date(match: re.Match, now: datetime) -> _Component | None:
    day = _calendar_date(now, match.group("year"), int(match.group("month")), int(match.group("day")))
    if day is None:
        return None
    return _Component(match.start(), match.end(), day=day)


def _relative(match: re.Match, now: datetime) -> _Component:
    amount = _amount(match.group("amount"))
    unit = match.group("unit").lower()
    if unit in ("minute", "min"):
        instant = now.replace(microsecond=0) + timedelta(minutes=amount)
        return _Component(match.start(), match.end(), instant=instant)
    if unit in ("hour", "hr"):
        instant = now.replace(microsecond=0) + timedelta(hours=amount)
        return _Component(match.start(), match.end(), instant=instant)
    if unit == "day":
        day = now.date() + timedelta(days=amount)
    elif unit == "week":
        day = now.date() + timedelta(weeks=amount)
    else:
        day = _add_months(now.date(), amount)
    return _Component(match.start(), match.end(), day=day)


def _slang_day(match: re.Match, now: datetime) -> _Component:
    offset = SLANG_DAYS[match.group("word").lower()]
    return _Component(match.start(), match.end(), day=now.date() + timedelta(days=offset))


def _end_of_day(match: re.Match, now: datetime) -> _Component:
    return _Component(match.start(), match.end(), clock=time(17, 0), soft_clock=True)


def _weekend(match: re.Match, now: datetime) -> _Component:
    weekday = now.weekday()
    if weekday == 6:
        days_ahead = 0
    else:
        days_ahead = 5 - weekday
    if (match.group("mod") or "").lower() == "next":
        days_ahead += 7
    return _Component(match.start(), match.end(), day=now.date() + timedelta(days=days_ahead))


def _oclock(match: re.Match, now: datetime) -> _Component | None:
    hour = int(match.group("h"))
    if not 1 <= hour <= 12:
        return None
    # Spoken "3 o'clock" almost always means the afternoon
    if hour <= 7:
        hour += 12
    return _Component(match.start(), match.end(), clock=time(hour, 0))


def _timestamp(match: re.Match, now: datetime) -> _Component | None:
    try:
        naive = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("h")),
            int(match.group("m")),
            int(match.group("s") or 0),
        )
    except ValueError:
        return None
    offset = match.group("tz")
    if offset is None:
        instant = naive.replace(tzinfo=now.tzinfo)
    elif offset.upper() == "Z":
        instant = naive.replace(tzinfo=UTC)
    else:
        sign = 1 if offset[0] == "+" else -1
        digits = offset[1:].replace(":", "")
        delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        instant = naive.replace(tzinfo=timezone(sign * delta))
    return _Component(match.start(), match.end(), instant=instant)


Scanner = tuple[re.Pattern, Callable[[re.Match, datetime], _Component | None]]

DEFAULT_SCANNERS: tuple[Scanner, ...] = (
    (CLOCK_RANGE_RE, _clock_range),
    (CLOCK_RANGE_24H_RE, _clock_range),
    (CLOCK_RE, _clock),
    (CLOCK_24H_RE, _clock),
    (PART_OF_DAY_RE, _part_of_day),
    (TONIGHT_RE, _tonight),
    (DAY_WORD_RE, _day_word),
    (WEEKDAY_RE, _weekday),
    (NEXT_PERIOD_RE, _next_period),
    (MONTH_DAY_RE, _named_month_date),
    (DAY_MONTH_RE, _named_month_date),
    (NUMERIC_DATE_RE, _numeric_date),
    (ISO_DATE_RE, _numeric_date),
    (RELATIVE_RE, _relative),
)

CASUAL_SCANNERS: tuple[Scanner, ...] = DEFAULT_SCANNERS + (
    (SLANG_DAY_RE, _slang_day),
    (END_OF_DAY_RE, _end_of_day),
    (WEEKEND_RE, _weekend),
    (OCLOCK_RE, _oclock),
)

STRICT_SCANNERS: tuple[Scanner, ...] = ((TIMESTAMP_RE, _timestamp),)

MODES: tuple[tuple[str, tuple[Scanner, ...]], ...] = (
    ("default", DEFAULT_SCANNERS),
    ("casual", CASUAL_SCANNERS),
    ("strict", STRICT_SCANNERS),
)


class DateTimeExtractor:
    """Locates and resolves the first date/time phrase in an utterance."""

    def __init__(self, timezone: str | None = None, now: datetime | None = None):
        self.clock = TimezoneService(timezone, now=now)

    def extract(self, text: str) -> DateMatch | None:
        now = self.clock.now()
        for mode, scanners in MODES:
            components = self._scan(text, scanners, now)
            if components:
                component = self._merge(text, components)
                try:
                    match = self._resolve(text, component, now)
                except (OverflowError, ValueError) as e:
                    logger.debug(f"Dropped unresolvable date phrase in {mode} mode: {e}")
                    continue
                logger.debug(f"Date phrase '{match.text}' found in {mode} mode")
                return match
        logger.debug("No date phrase found")
        return None

    def extract_duration(self, text: str) -> DurationMatch | None:
        match = DURATION_PATTERN.search(text)
        if not match:
            return None
        try:
            value = int(match.group(1))
        except ValueError:
            # Longer than int() will parse from a string
            return None
        return DurationMatch(text=match.group(0), value=value, unit=match.group(2).lower())

    def _scan(self, text: str, scanners: tuple[Scanner, ...], now: datetime) -> list[_Component]:
        found: list[_Component] = []
        for pattern, handler in scanners:
            for match in pattern.finditer(text):
                try:
                    component = handler(match, now)
                except (OverflowError, ValueError) as e:
                    logger.debug(f"Dropped out-of-range date phrase {match.group(0)!r}: {e}")
                    continue
                if component is not None:
                    found.append(component)

        # Left-most wins; among equal starts, the longest
        found.sort(key=lambda c: (c.start, -(c.end - c.start)))
        chosen: list[_Component] = []
        last_end = -1
        for component in found:
            if component.start >= last_end:
                chosen.append(component)
                last_end = component.end
        return chosen

    def _merge(self, text: str, components: list[_Component]) -> _Component:
        """Join the left-most component with an adjacent complementary one."""
        head = components[0]
        if len(components) < 2:
            return head
        follower = components[1]
        if not GAP_RE.match(text[head.end : follower.start]):
            return head

        if head.day is not None and head.instant is None and follower.is_clock_only:
            if head.clock is None or head.soft_clock:
                return replace(
                    head,
                    end=follower.end,
                    clock=follower.clock,
                    end_clock=follower.end_clock,
                    soft_clock=False,
                )
        if head.is_clock_only and follower.is_day_only:
            return replace(
                head,
                end=follower.end,
                day=follower.day,
                rollover_days=follower.rollover_days,
            )
        return head

    def _resolve(self, text: str, component: _Component, now: datetime) -> DateMatch:
        tz = now.tzinfo
        has_clock_time = True

        if component.instant is not None:
            local = component.instant
        elif component.day is not None and component.clock is not None:
            local = datetime.combine(component.day, component.clock, tzinfo=tz)
            if component.rollover_days and local <= now:
                local += timedelta(days=component.rollover_days)
        elif component.day is not None:
            has_clock_time = False
            day = component.day + timedelta(days=component.rollover_days)
            local = datetime.combine(day, time(DEFAULT_DAY_HOUR, 0), tzinfo=tz)
        else:
            local = datetime.combine(now.date(), component.clock, tzinfo=tz)  # type: ignore[arg-type]
            if local <= now:
                local += timedelta(days=1)

        end = None
        if component.end_clock is not None:
            end = datetime.combine(local.date(), component.end_clock, tzinfo=local.tzinfo)
            if end <= local:
                end += timedelta(days=1)

        return DateMatch(
            text=text[component.start : component.end],
            start=self.clock.to_utc(local),
            end=self.clock.to_utc(end) if end is not None else None,
            has_clock_time=has_clock_time,
        )


def _shift(start: datetime, minutes: int) -> datetime | None:
    """start + minutes, or None past the last representable instant."""
    try:
        return start + timedelta(minutes=minutes)
    except OverflowError:
        logger.debug(f"End time {minutes} minutes after {start} is out of range")
        return None


def resolve_schedule(
    text: str,
    date_match: DateMatch | None,
    duration: DurationMatch | None = None,
) -> Schedule:
    """Decide task vs event and derive start/end/due instants.

    A resolved hour makes the item an event; a bare date makes it a task whose
    due instant is the matched date. Events without an explicit end last 60
    minutes when the text mentions a meeting, else 30. A duration phrase
    anywhere in the text overrides the end of an event.
    """
    if date_match is None:
        return Schedule(item_type=ItemType.TASK)

    if not date_match.has_clock_time:
        return Schedule(item_type=ItemType.TASK, due_at=date_match.start)

    start = date_match.start
    end = date_match.end
    if end is None:
        minutes = (
            MEETING_DURATION_MINUTES
            if "meeting" in text.lower()
            else DEFAULT_EVENT_DURATION_MINUTES
        )
        end = _shift(start, minutes)

    if duration is not None:
        end = _shift(start, duration.minutes) or end

    return Schedule(item_type=ItemType.EVENT, start_at=start, end_at=end, all_day=False)

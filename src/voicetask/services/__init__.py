"""Parsing services.

Each stage of the parse pipeline lives in its own module. Imports are lazy so
that importing one stage does not pull in the others.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Pipeline
    "ParsePipeline": ("voicetask.services.pipeline", "ParsePipeline"),
    "parse_text": ("voicetask.services.pipeline", "parse_text"),
    # Date and time
    "DateTimeExtractor": ("voicetask.services.datetime_extractor", "DateTimeExtractor"),
    "Schedule": ("voicetask.services.datetime_extractor", "Schedule"),
    "resolve_schedule": ("voicetask.services.datetime_extractor", "resolve_schedule"),
    "TimezoneService": ("voicetask.services.timezone", "TimezoneService"),
    "resolve_timezone": ("voicetask.services.timezone", "resolve_timezone"),
    # Keywords
    "KeywordClassifier": ("voicetask.services.keywords", "KeywordClassifier"),
    "KeywordMatch": ("voicetask.services.keywords", "KeywordMatch"),
    "category_classifier": ("voicetask.services.keywords", "category_classifier"),
    "priority_classifier": ("voicetask.services.keywords", "priority_classifier"),
    # Location and travel
    "LocationResolver": ("voicetask.services.location", "LocationResolver"),
    "TravelTimeEstimator": ("voicetask.services.travel", "TravelTimeEstimator"),
    # Output shaping
    "ReminderPlanner": ("voicetask.services.reminders", "ReminderPlanner"),
    "TitleNormalizer": ("voicetask.services.title", "TitleNormalizer"),
    "extract_tags": ("voicetask.services.tags", "extract_tags"),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))

"""Ordered keyword tables for priority and category detection.

Each table is a sequence of (label, keywords) pairs scanned in order; the
first label with a keyword contained in the lowercased text wins. Matching is
plain substring containment, so "high" also matches inside "highway".
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from voicetask.models import Category

L = TypeVar("L")

DEFAULT_PRIORITY = 3

# Highest label first; order decides ties ("urgent ... low" is 5, never 2)
PRIORITY_KEYWORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (5, ("urgent", "asap", "emergency", "critical", "immediately")),
    (4, ("high", "important", "priority", "soon")),
    (3, ("medium", "normal")),
    (2, ("low", "later", "when possible")),
    (1, ("someday", "maybe", "eventually")),
)

CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (
        Category.WORK,
        ("meeting", "call", "project", "deadline", "office", "client", "presentation", "review"),
    ),
    (
        Category.HEALTH,
        ("doctor", "dentist", "appointment", "checkup", "hospital", "pharmacy", "exercise", "gym"),
    ),
    (Category.PERSONAL, ("birthday", "family", "home", "clean", "organize", "personal")),
    (Category.SHOPPING, ("buy", "purchase", "store", "market", "grocery", "shopping")),
    (Category.FINANCE, ("bank", "payment", "bill", "tax", "budget", "insurance")),
    (Category.TRAVEL, ("flight", "hotel", "trip", "vacation", "travel", "airport")),
    (Category.LEARNING, ("study", "course", "class", "training", "learn", "education")),
    (Category.SOCIAL, ("party", "dinner", "lunch", "friend", "event", "celebrate")),
)


@dataclass(frozen=True)
class KeywordMatch(Generic[L]):
    label: L
    keyword: str


class KeywordClassifier(Generic[L]):
    """First-match-wins lookup over an ordered (label, keywords) table."""

    def __init__(self, table: Sequence[tuple[L, Sequence[str]]]):
        self.table = tuple((label, tuple(k.lower() for k in keywords)) for label, keywords in table)

    @property
    def keywords(self) -> list[str]:
        """Every keyword across all labels, in table order."""
        return [keyword for _, keywords in self.table for keyword in keywords]

    def classify(self, text: str) -> KeywordMatch[L] | None:
        text_lower = text.lower()
        for label, keywords in self.table:
            for keyword in keywords:
                if keyword in text_lower:
                    return KeywordMatch(label=label, keyword=keyword)
        return None


def priority_classifier() -> KeywordClassifier[int]:
    return KeywordClassifier(PRIORITY_KEYWORDS)


def category_classifier() -> KeywordClassifier[Category]:
    return KeywordClassifier(CATEGORY_KEYWORDS)

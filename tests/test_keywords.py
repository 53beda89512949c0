"""Tests for priority and category keyword detection."""

import pytest

from voicetask.models import Category
from voicetask.services.keywords import (
    PRIORITY_KEYWORDS,
    KeywordClassifier,
    category_classifier,
    priority_classifier,
)


class TestPriorityClassifier:
    """Priority labels from the ordered keyword table."""

    def setup_method(self):
        self.classifier = priority_classifier()

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Fix the server ASAP", 5),
            ("Important: renew lease", 4),
            ("Normal checkup", 3),
            ("Clean garage when possible", 2),
            ("Maybe learn guitar", 1),
        ],
    )
    def test_levels(self, text, expected):
        match = self.classifier.classify(text)
        assert match is not None
        assert match.label == expected

    def test_highest_level_wins(self):
        """Urgent is checked before low, regardless of position."""
        match = self.classifier.classify("low effort but urgent")
        assert match.label == 5
        assert match.keyword == "urgent"

    def test_substring_match(self):
        """Keywords match inside longer words."""
        match = self.classifier.classify("Drive on the highway")
        assert match.label == 4
        assert match.keyword == "high"

    def test_no_keyword(self):
        assert self.classifier.classify("Water the plants") is None

    def test_keywords_in_table_order(self):
        keywords = self.classifier.keywords
        assert keywords[0] == "urgent"
        assert keywords[-1] == "eventually"
        assert len(keywords) == sum(len(k) for _, k in PRIORITY_KEYWORDS)


class TestCategoryClassifier:
    """Category labels from the ordered keyword table."""

    def setup_method(self):
        self.classifier = category_classifier()

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Prepare client presentation", Category.WORK),
            ("Pick up pharmacy order", Category.HEALTH),
            ("Mom's birthday", Category.PERSONAL),
            ("Buy groceries", Category.SHOPPING),
            ("Pay electricity bill", Category.FINANCE),
            ("Book hotel in Rome", Category.TRAVEL),
            ("Study for exam", Category.LEARNING),
            ("Dinner with Sara", Category.SOCIAL),
        ],
    )
    def test_categories(self, text, expected):
        assert self.classifier.classify(text).label == expected

    def test_earlier_category_wins(self):
        """Work is checked before social."""
        match = self.classifier.classify("Lunch meeting with the team")
        assert match.label == Category.WORK
        assert match.keyword == "meeting"

    def test_case_insensitive(self):
        assert self.classifier.classify("DENTIST").label == Category.HEALTH

    def test_no_category(self):
        assert self.classifier.classify("Water the plants") is None


class TestKeywordClassifier:
    def test_custom_table(self):
        classifier = KeywordClassifier([("a", ["Foo"]), ("b", ["bar"])])
        assert classifier.classify("a FOO and a bar").label == "a"
        assert classifier.classify("just bar").label == "b"
        assert classifier.keywords == ["foo", "bar"]

"""Tests for title cleanup."""

from voicetask.services.title import TitleNormalizer


class TestTitleNormalizer:
    def setup_method(self):
        self.normalizer = TitleNormalizer()

    def test_removes_date_and_priority(self):
        title = self.normalizer.normalize(
            "Dentist appointment tomorrow at 2pm urgent", date_text="tomorrow at 2pm"
        )
        assert title == "Dentist appointment"

    def test_removes_duration_and_trailing_connector(self):
        title = self.normalizer.normalize(
            "Meeting tomorrow at 3pm for 2 hours",
            date_text="tomorrow at 3pm",
            duration_text="2 hours",
        )
        assert title == "Meeting"

    def test_removes_trailing_location_with_at(self):
        title = self.normalizer.normalize(
            "Workout tomorrow at 6pm at Gym",
            date_text="tomorrow at 6pm",
            location_name="Gym",
        )
        assert title == "Workout"

    def test_location_in_middle_is_kept(self):
        title = self.normalizer.normalize("Gym session with Sam", location_name="Gym")
        assert title == "Gym session with Sam"

    def test_priority_keyword_needs_word_boundary(self):
        """Unlike detection, removal only takes whole words."""
        title = self.normalizer.normalize("Drive on the highway")
        assert title == "Drive on the highway"

    def test_leading_connector(self):
        title = self.normalizer.normalize("at 5pm call the bank", date_text="5pm")
        assert title == "call the bank"

    def test_collapses_whitespace(self):
        assert self.normalizer.normalize("Call   mom   asap") == "Call mom"

    def test_falls_back_to_raw_text(self):
        assert self.normalizer.normalize("  urgent  ") == "urgent"

    def test_only_first_occurrence_of_date_removed(self):
        title = self.normalizer.normalize("today plan today", date_text="today")
        assert title == "plan today"

    def test_idempotent(self):
        once = self.normalizer.normalize(
            "Dentist appointment tomorrow at 2pm urgent", date_text="tomorrow at 2pm"
        )
        assert self.normalizer.normalize(once) == once

    def test_custom_keywords(self):
        normalizer = TitleNormalizer(["pronto"])
        assert normalizer.normalize("Ship it pronto urgent") == "Ship it urgent"

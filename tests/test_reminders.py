"""Tests for reminder planning."""

from datetime import UTC, datetime

from voicetask.models import Category, ItemType, ParseResult, TriggerType
from voicetask.services.reminders import ReminderPlanner

START = datetime(2026, 10, 20, 18, 0, tzinfo=UTC)


def make_result(**kwargs) -> ParseResult:
    defaults = {"title": "Thing", "raw_text": "Thing"}
    defaults.update(kwargs)
    return ParseResult(**defaults)


class TestReminderPlanner:
    def setup_method(self):
        self.planner = ReminderPlanner()

    def test_located_event_gets_geofence_and_offset(self):
        result = make_result(
            title="Workout",
            type=ItemType.EVENT,
            start_at=START,
            location_name="Gym",
            lat=40.7,
            lng=-74.0,
        )
        geofence, offset = self.planner.plan(result)

        assert geofence.trigger_type == TriggerType.GEOFENCE
        assert geofence.lead_time_minutes == 0
        assert geofence.message == "You've arrived at Gym"
        assert offset.trigger_type == TriggerType.RELATIVE_OFFSET
        assert offset.offset_minutes == 30
        assert offset.message == "Workout starts in 30 minutes"

    def test_work_event(self):
        result = make_result(
            title="Standup", type=ItemType.EVENT, start_at=START, category=Category.WORK
        )
        [reminder] = self.planner.plan(result)
        assert reminder.offset_minutes == 15
        assert reminder.lead_time_minutes == 15
        assert reminder.message == "Standup starts in 15 minutes"

    def test_other_event(self):
        result = make_result(title="Dentist", type=ItemType.EVENT, start_at=START)
        [reminder] = self.planner.plan(result)
        assert reminder.offset_minutes == 10

    def test_high_priority_task(self):
        result = make_result(title="File taxes", due_at=START, priority=4)
        [reminder] = self.planner.plan(result)
        assert reminder.offset_minutes == 60
        assert reminder.message == 'High priority task "File taxes" is due soon'

    def test_normal_task(self):
        result = make_result(title="Call mom", due_at=START, priority=3)
        [reminder] = self.planner.plan(result)
        assert reminder.offset_minutes == 15
        assert reminder.message == 'Task "Call mom" is due soon'

    def test_task_without_due_has_none(self):
        assert self.planner.plan(make_result(priority=5)) == []

    def test_travel_reminder_adds_buffer(self):
        reminder = self.planner.travel_reminder(21, "Gym")
        assert reminder.trigger_type == TriggerType.RELATIVE_OFFSET
        assert reminder.offset_minutes == 31
        assert reminder.message == "Time to leave for Gym"

    def test_to_dict(self):
        reminder = self.planner.travel_reminder(5, "Gym")
        assert reminder.to_dict() == {
            "trigger_type": "offset",
            "offset_minutes": 15,
            "lead_time_minutes": 15,
            "message": "Time to leave for Gym",
        }

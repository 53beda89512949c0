"""Suggested reminders derived from the classified item."""

from voicetask.models import Category, ItemType, ParseResult, ReminderSuggestion, TriggerType

LOCATED_EVENT_LEAD_MINUTES = 30
WORK_EVENT_LEAD_MINUTES = 15
EVENT_LEAD_MINUTES = 10
HIGH_PRIORITY_TASK_LEAD_MINUTES = 60
TASK_LEAD_MINUTES = 15
HIGH_PRIORITY_THRESHOLD = 4
TRAVEL_BUFFER_MINUTES = 10


def offset_reminder(minutes: int, message: str | None = None) -> ReminderSuggestion:
    return ReminderSuggestion(
        trigger_type=TriggerType.RELATIVE_OFFSET,
        offset_minutes=minutes,
        lead_time_minutes=minutes,
        message=message,
    )


class ReminderPlanner:
    """Plans reminders from type, priority, category and location.

    - Event with a location: arrival geofence, then 30 minutes before start
    - Event without a location: 15 minutes before for work, else 10
    - Task with a due time: 60 minutes before at priority 4+, else 15
    - Anything else gets no reminders
    """

    def plan(self, result: ParseResult) -> list[ReminderSuggestion]:
        reminders: list[ReminderSuggestion] = []

        if result.type == ItemType.EVENT and result.start_at:
            if result.has_location:
                reminders.append(
                    ReminderSuggestion(
                        trigger_type=TriggerType.GEOFENCE,
                        lead_time_minutes=0,
                        message=f"You've arrived at {result.location_name}",
                    )
                )
                reminders.append(
                    offset_reminder(
                        LOCATED_EVENT_LEAD_MINUTES,
                        f"{result.title} starts in {LOCATED_EVENT_LEAD_MINUTES} minutes",
                    )
                )
            else:
                lead = (
                    WORK_EVENT_LEAD_MINUTES
                    if result.category == Category.WORK
                    else EVENT_LEAD_MINUTES
                )
                reminders.append(offset_reminder(lead, f"{result.title} starts in {lead} minutes"))

        elif result.type == ItemType.TASK and result.due_at:
            if result.priority >= HIGH_PRIORITY_THRESHOLD:
                reminders.append(
                    offset_reminder(
                        HIGH_PRIORITY_TASK_LEAD_MINUTES,
                        f'High priority task "{result.title}" is due soon',
                    )
                )
            else:
                reminders.append(offset_reminder(TASK_LEAD_MINUTES, f'Task "{result.title}" is due soon'))

        return reminders

    def travel_reminder(self, travel_minutes: int, location_name: str | None) -> ReminderSuggestion:
        """Leave-now reminder: travel time plus a fixed buffer."""
        return offset_reminder(
            travel_minutes + TRAVEL_BUFFER_MINUTES,
            f"Time to leave for {location_name}",
        )

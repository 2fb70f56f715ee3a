"""Weekly meal planning calendar."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.domain.planning import MealPlan, MealPlanEvent, MealType, WeekDay
from meal_planner.errors import ValidationError

NO_RECIPE = "no-recipe"


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans and calendar events."""

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        """Return a user's meal plans, newest first."""

    def list_events(self, user_id: UUID, start: date, end: date) -> list[MealPlanEvent]:
        """Return events between two days, both inclusive."""

    def create_event(self, user_id: UUID, payload: dict[str, object]) -> MealPlanEvent:
        """Create an event and return it."""

    def update_event(
        self, user_id: UUID, event_id: UUID, payload: dict[str, object]
    ) -> MealPlanEvent:
        """Update an event and return it."""

    def delete_event(self, user_id: UUID, event_id: UUID) -> None:
        """Delete an event."""


def week_days(anchor: date) -> list[date]:
    """Return the Monday-start week that contains the anchor day."""
    monday = anchor - timedelta(days=anchor.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def bucket_by_day(events: Iterable[MealPlanEvent], anchor: date) -> list[WeekDay]:
    """Place events into the seven days of the anchor's week."""
    days = week_days(anchor)
    buckets: dict[date, list[MealPlanEvent]] = {day: [] for day in days}
    for event in events:
        if event.day in buckets:
            buckets[event.day].append(event)
    return [
        WeekDay(day=day, events=sorted(buckets[day], key=_start_time_key))
        for day in days
    ]


def _start_time_key(event: MealPlanEvent) -> tuple[bool, time]:
    return event.start_time is None, event.start_time or time.min


@dataclass
class MealPlanService:
    """Service for the weekly meal calendar."""

    repository: MealPlanRepository

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        """Return the user's meal plans."""
        return self.repository.list_plans(user_id)

    def get_week(self, user_id: UUID, anchor: date) -> list[WeekDay]:
        """Return the events of the week containing the anchor day."""
        days = week_days(anchor)
        events = self.repository.list_events(user_id, days[0], days[-1])
        return bucket_by_day(events, anchor)

    def save_event(
        self,
        user_id: UUID,
        payload: dict[str, object],
        event_id: UUID | None = None,
    ) -> MealPlanEvent:
        """Create or update an event after validating required fields."""
        row = _event_row(payload)
        if event_id is None:
            return self.repository.create_event(user_id, row)
        return self.repository.update_event(user_id, event_id, row)

    def delete_event(self, user_id: UUID, event_id: UUID) -> None:
        """Remove an event from the calendar."""
        self.repository.delete_event(user_id, event_id)


def _event_row(payload: dict[str, object]) -> dict[str, object]:
    title = str(payload.get("title") or "").strip()
    meal_type = payload.get("meal_type")
    day = payload.get("date")
    if not title or not meal_type or not day:
        raise ValidationError("Please fill in all required fields")
    try:
        meal_type_value = MealType(meal_type).value
    except ValueError as exc:
        raise ValidationError(f"Unknown meal type: {meal_type}") from exc
    recipe_id = payload.get("recipe_id")
    if recipe_id == NO_RECIPE:
        recipe_id = None
    return {
        "title": title,
        "date": day.isoformat() if isinstance(day, date) else str(day),
        "meal_type": meal_type_value,
        "start_time": _optional_str(payload.get("start_time")),
        "end_time": _optional_str(payload.get("end_time")),
        "notes": payload.get("notes") or None,
        "recipe_id": str(recipe_id) if recipe_id else None,
    }


def _optional_str(value: object) -> str | None:
    if not value:
        return None
    if isinstance(value, time):
        return value.isoformat()
    return str(value)

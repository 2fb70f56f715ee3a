"""Supabase repository for meal plans and calendar events."""

from dataclasses import dataclass
from datetime import date, time
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import parse_date, parse_uuid, store_call
from meal_planner.domain.planning import MealPlan, MealPlanEvent, MealType
from meal_planner.errors import NotFoundError, StoreError
from meal_planner.services.planning import MealPlanRepository

_EVENT_COLUMNS = (
    "id, user_id, title, date, meal_type, start_time, end_time, notes, "
    "recipe_id, recipe:recipes(name)"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for the meal calendar."""

    client: Client

    def list_plans(self, user_id: UUID) -> list[MealPlan]:
        """Return meal plans, newest first."""
        with store_call("load meal plans"):
            response = (
                self.client.table("meal_plans")
                .select("id, user_id, name, start_date, end_date")
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return [
            MealPlan(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                name=str(row.get("name", "")),
                start_date=date.fromisoformat(row["start_date"]),
                end_date=date.fromisoformat(row["end_date"]),
            )
            for row in response.data or []
        ]

    def list_events(self, user_id: UUID, start: date, end: date) -> list[MealPlanEvent]:
        """Return events between two days, inclusive."""
        with store_call("load meal events"):
            response = (
                self.client.table("meal_plan_events")
                .select(_EVENT_COLUMNS)
                .eq("user_id", str(user_id))
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date")
                .order("start_time")
                .execute()
            )
        return [_parse_event(row) for row in response.data or []]

    def create_event(self, user_id: UUID, payload: dict[str, object]) -> MealPlanEvent:
        """Insert an event."""
        with store_call("create meal event"):
            response = (
                self.client.table("meal_plan_events")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise StoreError("create meal event", "Failed to create meal event")
        return _parse_event(response.data[0])

    def update_event(
        self, user_id: UUID, event_id: UUID, payload: dict[str, object]
    ) -> MealPlanEvent:
        """Update an event."""
        with store_call("update meal event"):
            response = (
                self.client.table("meal_plan_events")
                .update(payload)
                .eq("id", str(event_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        if not response.data:
            raise NotFoundError(f"Meal event {event_id} not found")
        return _parse_event(response.data[0])

    def delete_event(self, user_id: UUID, event_id: UUID) -> None:
        """Delete an event."""
        with store_call("delete meal event"):
            self.client.table("meal_plan_events").delete().eq(
                "id", str(event_id)
            ).eq("user_id", str(user_id)).execute()


def _parse_event(row: dict[str, object]) -> MealPlanEvent:
    recipe = row.get("recipe")
    return MealPlanEvent(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        title=str(row.get("title", "")),
        day=parse_date(row.get("date")) or date.min,
        meal_type=MealType(row.get("meal_type")),
        start_time=_parse_time(row.get("start_time")),
        end_time=_parse_time(row.get("end_time")),
        notes=row.get("notes"),
        recipe_id=parse_uuid(row.get("recipe_id")),
        recipe_name=recipe.get("name") if isinstance(recipe, dict) else None,
    )


def _parse_time(value: object) -> time | None:
    if isinstance(value, str) and value:
        return time.fromisoformat(value)
    return None

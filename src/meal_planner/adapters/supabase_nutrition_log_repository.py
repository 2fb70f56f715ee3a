"""Supabase repository for nutrition logs."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import parse_date, parse_uuid, store_call
from meal_planner.domain.nutrition import Macros, NutritionLogEntry
from meal_planner.errors import StoreError
from meal_planner.services.nutrition import NutritionLogRepository

_COLUMNS = "id, date, meal_id, calories, protein, carbs, fat, fiber, sugar, sodium"


@dataclass
class SupabaseNutritionLogRepository(NutritionLogRepository):
    """Supabase implementation for nutrition log entries."""

    client: Client

    def list_entries(self, user_id: UUID, day: date) -> list[NutritionLogEntry]:
        """Return all entries logged on a day."""
        with store_call("load nutrition data"):
            response = (
                self.client.table("nutrition_logs")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .eq("date", day.isoformat())
                .execute()
            )
        return [_parse_entry(row) for row in response.data or []]

    def create_entry(
        self, user_id: UUID, day: date, macros: Macros, meal_id: UUID | None
    ) -> NutritionLogEntry:
        """Insert a nutrition log entry."""
        with store_call("log nutrition"):
            response = (
                self.client.table("nutrition_logs")
                .insert(
                    {
                        "user_id": str(user_id),
                        "date": day.isoformat(),
                        "meal_id": str(meal_id) if meal_id else None,
                        **macros.as_dict(),
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreError("log nutrition", "Failed to create nutrition log")
        return _parse_entry(response.data[0])


def _parse_entry(row: dict[str, object]) -> NutritionLogEntry:
    return NutritionLogEntry(
        id=parse_uuid(row.get("id")),
        day=parse_date(row.get("date")) or date.min,
        macros=Macros.from_mapping(row),
        meal_id=parse_uuid(row.get("meal_id")),
    )

"""Supabase repository for logged meals and their photos."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import (
    optional_float,
    parse_date,
    parse_datetime,
    parse_uuid,
    store_call,
)
from meal_planner.domain.meals import Meal, MealPhoto
from meal_planner.domain.planning import MealType
from meal_planner.errors import StoreError
from meal_planner.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and meal photos."""

    client: Client

    def has_meal_plan(self, user_id: UUID, meal_plan_id: UUID) -> bool:
        """Return whether the user owns the meal plan."""
        return self._owns("meal_plans", user_id, meal_plan_id)

    def has_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the user owns the recipe."""
        return self._owns("recipes", user_id, recipe_id)

    def create_meal(self, user_id: UUID, payload: dict[str, object]) -> Meal:
        """Insert a meal row."""
        with store_call("log meal"):
            response = (
                self.client.table("meals")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise StoreError("log meal", "Failed to log meal")
        return _parse_meal(response.data[0])

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal row."""
        with store_call("delete meal"):
            self.client.table("meals").delete().eq("id", str(meal_id)).eq(
                "user_id", str(user_id)
            ).execute()

    def create_photo(self, user_id: UUID, payload: dict[str, object]) -> MealPhoto:
        """Insert a meal photo row."""
        with store_call("save meal photo"):
            response = (
                self.client.table("meal_photos")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise StoreError("save meal photo", "Failed to save meal photo")
        row = response.data[0]
        return MealPhoto(
            id=UUID(row["id"]),
            meal_id=parse_uuid(row.get("meal_id")),
            image_url=str(row.get("image_url", "")),
            description=row.get("description"),
            created_at=parse_datetime(row.get("created_at")),
        )

    def delete_photo(self, user_id: UUID, photo_id: UUID) -> None:
        """Delete a meal photo row."""
        with store_call("delete meal photo"):
            self.client.table("meal_photos").delete().eq("id", str(photo_id)).eq(
                "user_id", str(user_id)
            ).execute()

    def _owns(self, table: str, user_id: UUID, row_id: UUID) -> bool:
        with store_call(f"load {table}"):
            response = (
                self.client.table(table)
                .select("id")
                .eq("id", str(row_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        return bool(response.data)


def _parse_meal(row: dict[str, object]) -> Meal:
    return Meal(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        meal_plan_id=UUID(row["meal_plan_id"]),
        day=parse_date(row.get("date")) or date.min,
        meal_type=MealType(row["meal_type"]),
        meal_name=row.get("meal_name"),
        recipe_id=parse_uuid(row.get("recipe_id")),
        food_item_id=parse_uuid(row.get("food_item_id")),
        quantity=optional_float(row.get("quantity")),
        unit=row.get("unit"),
        notes=row.get("notes"),
    )

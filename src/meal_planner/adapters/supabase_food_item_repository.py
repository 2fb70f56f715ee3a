"""Supabase repository for food items."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import (
    optional_float,
    parse_uuid,
    store_call,
)
from meal_planner.domain.nutrition import FoodItem, Macros
from meal_planner.errors import StoreError
from meal_planner.services.food_items import FoodItemRepository

FOOD_ITEM_COLUMNS = (
    "id, name, brand, barcode, calories_per_100g, protein_per_100g, "
    "carbs_per_100g, fat_per_100g, fiber_per_100g, sugar_per_100g, "
    "sodium_per_100g, serving_size, serving_unit"
)


@dataclass
class SupabaseFoodItemRepository(FoodItemRepository):
    """Supabase implementation for the food item database."""

    client: Client

    def list_food_items(self, user_id: UUID) -> list[FoodItem]:
        """Return the user's own and public food items."""
        with store_call("load food items"):
            response = (
                self.client.table("food_items")
                .select(FOOD_ITEM_COLUMNS)
                .or_(f"user_id.eq.{user_id},is_public.eq.true")
                .order("name")
                .execute()
            )
        return [parse_food_item(row) for row in response.data or []]

    def get_food_items(self, user_id: UUID, ids: list[UUID]) -> list[FoodItem]:
        """Return food items by id that the user owns or that are public."""
        if not ids:
            return []
        with store_call("load food items"):
            response = (
                self.client.table("food_items")
                .select(FOOD_ITEM_COLUMNS)
                .in_("id", [str(food_id) for food_id in ids])
                .or_(f"user_id.eq.{user_id},is_public.eq.true")
                .execute()
            )
        return [parse_food_item(row) for row in response.data or []]

    def create_food_item(self, user_id: UUID, payload: dict[str, object]) -> FoodItem:
        """Insert a food item and return it."""
        with store_call("add food item"):
            response = (
                self.client.table("food_items")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise StoreError("add food item", "Failed to add food item")
        return parse_food_item(response.data[0])


def parse_food_item(row: dict[str, object]) -> FoodItem:
    """Parse a food_items row; null macro columns count as zero."""
    return FoodItem(
        id=parse_uuid(row.get("id")),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        barcode=row.get("barcode"),
        per_100g=Macros.from_mapping(row, suffix="_per_100g"),
        serving_size=optional_float(row.get("serving_size")),
        serving_unit=row.get("serving_unit"),
    )

"""Supabase repository for recipes and their ingredients."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_food_item_repository import (
    FOOD_ITEM_COLUMNS,
    parse_food_item,
)
from meal_planner.adapters.supabase_support import parse_uuid, store_call
from meal_planner.domain.nutrition import Recipe, RecipeIngredient
from meal_planner.errors import StoreError
from meal_planner.services.recipes import RecipeStore


@dataclass
class SupabaseRecipeRepository(RecipeStore):
    """Supabase implementation for recipes and their ingredients."""

    client: Client

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with ingredients and linked food items."""
        with store_call("load recipe"):
            response = (
                self.client.table("recipes")
                .select(
                    "id, user_id, name, description, servings, prep_time, "
                    "cook_time, meal_times, tags, instructions"
                )
                .eq("id", str(recipe_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        with store_call("load recipe ingredients"):
            ingredients_response = (
                self.client.table("recipe_ingredients")
                .select(
                    "id, food_item_id, ingredient_name, quantity, unit, "
                    f"food_item:food_items({FOOD_ITEM_COLUMNS})"
                )
                .eq("recipe_id", str(recipe_id))
                .execute()
            )
        row = response.data[0]
        return Recipe(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            name=str(row.get("name", "")),
            servings=row.get("servings"),
            description=row.get("description"),
            prep_time=row.get("prep_time"),
            cook_time=row.get("cook_time"),
            meal_times=list(row.get("meal_times") or []),
            tags=list(row.get("tags") or []),
            instructions=row.get("instructions"),
            ingredients=[
                _parse_ingredient(item) for item in ingredients_response.data or []
            ],
        )


    def create_recipe(self, user_id: UUID, payload: dict[str, object]) -> UUID:
        """Insert a recipe row and return its id."""
        with store_call("save recipe"):
            response = (
                self.client.table("recipes")
                .insert({"user_id": str(user_id), **payload})
                .execute()
            )
        if not response.data:
            raise StoreError("save recipe", "Failed to save recipe")
        return UUID(response.data[0]["id"])

    def update_recipe(
        self, user_id: UUID, recipe_id: UUID, payload: dict[str, object]
    ) -> bool:
        """Update a recipe the user owns."""
        with store_call("save recipe"):
            response = (
                self.client.table("recipes")
                .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
                .eq("id", str(recipe_id))
                .eq("user_id", str(user_id))
                .execute()
            )
        return bool(response.data)

    def replace_ingredients(
        self, recipe_id: UUID, rows: list[dict[str, object]]
    ) -> None:
        """Insert the new ingredient rows, then drop the previous ones."""
        table = "recipe_ingredients"
        kept: list[str] = []
        if rows:
            with store_call("save ingredients"):
                response = (
                    self.client.table(table)
                    .insert([{"recipe_id": str(recipe_id), **row} for row in rows])
                    .execute()
                )
            kept = [str(row["id"]) for row in response.data or []]
        with store_call("remove old ingredients"):
            query = self.client.table(table).delete().eq("recipe_id", str(recipe_id))
            if kept:
                query = query.not_.in_("id", kept)
            query.execute()

    def delete_recipe(self, user_id: UUID, recipe_id: UUID) -> None:
        """Delete a recipe the user owns."""
        with store_call("delete recipe"):
            self.client.table("recipes").delete().eq("id", str(recipe_id)).eq(
                "user_id", str(user_id)
            ).execute()


def _parse_ingredient(row: dict[str, object]) -> RecipeIngredient:
    food_row = row.get("food_item")
    return RecipeIngredient(
        id=parse_uuid(row.get("id")),
        quantity=float(row.get("quantity") or 0.0),
        unit=str(row.get("unit") or "g"),
        food_item=parse_food_item(food_row) if isinstance(food_row, dict) else None,
        ingredient_name=row.get("ingredient_name"),
        food_item_id=parse_uuid(row.get("food_item_id")),
    )

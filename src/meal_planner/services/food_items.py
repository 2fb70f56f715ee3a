"""Services for the food item database."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.nutrition import FoodItem, RecipeIngredient
from meal_planner.domain.products import Product


class FoodItemRepository(Protocol):
    """Persistence interface for food items."""

    def list_food_items(self, user_id: UUID) -> list[FoodItem]:
        """Return food items visible to a user, ordered by name."""

    def get_food_items(self, user_id: UUID, ids: list[UUID]) -> list[FoodItem]:
        """Return the food items with the given ids."""

    def create_food_item(self, user_id: UUID, payload: dict[str, object]) -> FoodItem:
        """Create a food item and return it."""


@dataclass
class FoodItemService:
    """Application service for food items."""

    repository: FoodItemRepository

    def list_food_items(self, user_id: UUID) -> list[FoodItem]:
        """Return food items visible to the user."""
        return self.repository.list_food_items(user_id)

    def import_product(self, user_id: UUID, product: Product) -> FoodItem:
        """Store a looked-up product as a public food item."""
        return self.repository.create_food_item(
            user_id,
            {
                "name": product.name,
                "brand": product.brand,
                "barcode": product.barcode,
                "calories_per_100g": product.calories_per_100g,
                "protein_per_100g": product.protein_per_100g,
                "carbs_per_100g": product.carbs_per_100g,
                "fat_per_100g": product.fat_per_100g,
                "fiber_per_100g": product.fiber_per_100g,
                "sugar_per_100g": product.sugar_per_100g,
                "sodium_per_100g": product.sodium_per_100g,
                "serving_size": product.serving_size,
                "serving_unit": product.serving_unit,
                "is_public": True,
            },
        )

    def resolve_ingredients(
        self, user_id: UUID, lines: list[dict[str, object]]
    ) -> list[RecipeIngredient]:
        """Attach food items to unsaved ingredient lines."""
        ids = {
            UUID(str(line["food_item_id"]))
            for line in lines
            if line.get("food_item_id")
        }
        foods = {
            food.id: food
            for food in self.repository.get_food_items(user_id, sorted(ids, key=str))
        }
        ingredients = []
        for line in lines:
            food_item_id = (
                UUID(str(line["food_item_id"])) if line.get("food_item_id") else None
            )
            ingredients.append(
                RecipeIngredient(
                    quantity=float(line.get("quantity") or 0),
                    unit=str(line.get("unit") or "g"),
                    food_item=foods.get(food_item_id) if food_item_id else None,
                    ingredient_name=line.get("ingredient_name"),
                    food_item_id=food_item_id,
                )
            )
        return ingredients

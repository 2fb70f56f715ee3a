"""Recipe create and edit."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.nutrition import Recipe, RecipeDraft, RecipeIngredient
from meal_planner.errors import NotFoundError, StoreError, ValidationError
from meal_planner.services.food_items import FoodItemRepository
from meal_planner.services.nutrition import RecipeRepository

_logger = logging.getLogger(__name__)


class RecipeStore(RecipeRepository, Protocol):
    """Persistence interface for writing recipes and their ingredients."""

    def create_recipe(self, user_id: UUID, payload: dict[str, object]) -> UUID:
        """Insert a recipe row and return its id."""

    def update_recipe(
        self, user_id: UUID, recipe_id: UUID, payload: dict[str, object]
    ) -> bool:
        """Update a recipe the user owns; False when there is none."""

    def replace_ingredients(
        self, recipe_id: UUID, rows: list[dict[str, object]]
    ) -> None:
        """Make the given rows the complete ingredient list of a recipe."""

    def delete_recipe(self, user_id: UUID, recipe_id: UUID) -> None:
        """Delete a recipe the user owns."""


@dataclass
class RecipeService:
    """Service for saving recipes."""

    repository: RecipeStore
    food_items: FoodItemRepository

    def save_recipe(
        self, user_id: UUID, draft: RecipeDraft, recipe_id: UUID | None = None
    ) -> Recipe:
        """Create or update a recipe and replace all of its ingredients."""
        payload = _recipe_row(draft)
        rows = [_ingredient_row(line) for line in draft.ingredients]
        self._check_food_items(user_id, draft.ingredients)

        if recipe_id is None:
            saved_id = self.repository.create_recipe(user_id, payload)
            try:
                self.repository.replace_ingredients(saved_id, rows)
            except StoreError:
                _logger.warning(
                    "Removing recipe after failed ingredient save",
                    extra={"recipe_id": str(saved_id)},
                )
                self.repository.delete_recipe(user_id, saved_id)
                raise
        else:
            if not self.repository.update_recipe(user_id, recipe_id, payload):
                raise NotFoundError(f"Recipe {recipe_id} not found")
            saved_id = recipe_id
            self.repository.replace_ingredients(saved_id, rows)

        recipe = self.repository.get_recipe(user_id, saved_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {saved_id} not found")
        _logger.info(
            "Recipe saved",
            extra={"user_id": str(user_id), "recipe_id": str(saved_id)},
        )
        return recipe

    def _check_food_items(
        self, user_id: UUID, ingredients: list[RecipeIngredient]
    ) -> None:
        """Reject ingredients that link food items the user cannot see."""
        wanted = {line.food_item_id for line in ingredients if line.food_item_id}
        if not wanted:
            return
        found = {
            food.id
            for food in self.food_items.get_food_items(
                user_id, sorted(wanted, key=str)
            )
        }
        missing = wanted - found
        if missing:
            raise ValidationError(
                "Unknown food items: " + ", ".join(sorted(str(i) for i in missing))
            )


def _recipe_row(draft: RecipeDraft) -> dict[str, object]:
    name = draft.name.strip()
    if not name:
        raise ValidationError("Recipe name is required")
    if draft.servings is not None and draft.servings < 1:
        raise ValidationError("Servings must be at least 1")
    for label, minutes in (("Prep", draft.prep_time), ("Cook", draft.cook_time)):
        if minutes is not None and minutes < 0:
            raise ValidationError(f"{label} time cannot be negative")
    return {
        "name": name,
        "description": draft.description or None,
        "instructions": draft.instructions or None,
        "servings": draft.servings,
        "prep_time": draft.prep_time,
        "cook_time": draft.cook_time,
        "meal_times": list(draft.meal_times),
        "tags": list(draft.tags),
    }


def _ingredient_row(line: RecipeIngredient) -> dict[str, object]:
    if line.food_item_id is None and not (line.ingredient_name or "").strip():
        raise ValidationError("Each ingredient needs a food item or a name")
    if line.quantity < 0:
        raise ValidationError("Ingredient quantity cannot be negative")
    return {
        "food_item_id": str(line.food_item_id) if line.food_item_id else None,
        "ingredient_name": (line.ingredient_name or "").strip() or None,
        "quantity": line.quantity,
        "unit": line.unit or "g",
    }

"""Meal logging with optional photo and nutrition rows."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.meals import LoggedMeal, Meal, MealDraft, MealPhoto
from meal_planner.errors import NotFoundError, StoreError, ValidationError
from meal_planner.services.nutrition import NutritionLogRepository

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and meal photos."""

    def has_meal_plan(self, user_id: UUID, meal_plan_id: UUID) -> bool:
        """Return whether the meal plan belongs to the user."""

    def has_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the recipe belongs to the user."""

    def create_meal(self, user_id: UUID, payload: dict[str, object]) -> Meal:
        """Insert a meal row."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal row."""

    def create_photo(self, user_id: UUID, payload: dict[str, object]) -> MealPhoto:
        """Insert a meal photo row."""

    def delete_photo(self, user_id: UUID, photo_id: UUID) -> None:
        """Delete a meal photo row."""


@dataclass
class MealLogService:
    """Service that records eaten meals."""

    repository: MealRepository
    nutrition_logs: NutritionLogRepository

    def log_meal(self, user_id: UUID, draft: MealDraft) -> LoggedMeal:
        """Store a meal, then its photo and nutrition entry when given.

        If a later row fails, rows already written for this meal are removed
        before the error is raised.
        """
        payload = _meal_row(draft)
        if not self.repository.has_meal_plan(user_id, draft.meal_plan_id):
            raise NotFoundError(f"Meal plan {draft.meal_plan_id} not found")
        if draft.recipe_id and not self.repository.has_recipe(
            user_id, draft.recipe_id
        ):
            raise NotFoundError(f"Recipe {draft.recipe_id} not found")

        meal = self.repository.create_meal(user_id, payload)
        undo: list[Callable[[], None]] = [
            lambda: self.repository.delete_meal(user_id, meal.id)
        ]
        photo = None
        nutrition = None
        try:
            if draft.photo_url:
                photo = self.repository.create_photo(
                    user_id,
                    {
                        "meal_id": str(meal.id),
                        "image_url": draft.photo_url,
                        "description": draft.photo_description or None,
                        "ai_analyzed_nutrition": (
                            draft.macros.as_dict() if draft.macros else None
                        ),
                    },
                )
                photo_id = photo.id
                undo.append(lambda: self.repository.delete_photo(user_id, photo_id))
            if draft.macros is not None:
                nutrition = self.nutrition_logs.create_entry(
                    user_id, draft.day, draft.macros, meal.id
                )
        except StoreError:
            _logger.warning(
                "Rolling back partially logged meal", extra={"meal_id": str(meal.id)}
            )
            for step in reversed(undo):
                step()
            raise

        _logger.info(
            "Meal logged",
            extra={"user_id": str(user_id), "meal_id": str(meal.id)},
        )
        return LoggedMeal(meal=meal, photo=photo, nutrition=nutrition)


def _meal_row(draft: MealDraft) -> dict[str, object]:
    name = (draft.meal_name or "").strip()
    if not name and draft.recipe_id is None and draft.food_item_id is None:
        raise ValidationError("A meal needs a name, a recipe or a food item")
    if draft.quantity is not None and draft.quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    return {
        "meal_plan_id": str(draft.meal_plan_id),
        "date": draft.day.isoformat(),
        "meal_type": draft.meal_type.value,
        "meal_name": name or None,
        "recipe_id": str(draft.recipe_id) if draft.recipe_id else None,
        "food_item_id": str(draft.food_item_id) if draft.food_item_id else None,
        "quantity": draft.quantity,
        "unit": draft.unit or None,
        "notes": draft.notes or None,
    }

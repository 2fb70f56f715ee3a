"""Nutrition aggregation for recipes and daily logs."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from meal_planner.domain.nutrition import (
    GoalProgress,
    Macros,
    NutritionLogEntry,
    Recipe,
    RecipeIngredient,
    RecipeNutrition,
)
from meal_planner.errors import NotFoundError

_logger = logging.getLogger(__name__)

_GOAL_FIELDS = (
    ("Calories", "calories"),
    ("Protein", "protein_g"),
    ("Carbs", "carbs_g"),
    ("Fat", "fat_g"),
    ("Fiber", "fiber_g"),
    ("Sodium", "sodium_mg"),
    ("Sugar", "sugar_g"),
)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def get_recipe(self, user_id: UUID, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with ingredients and linked food items."""


class NutritionLogRepository(Protocol):
    """Persistence interface for nutrition logs."""

    def list_entries(self, user_id: UUID, day: date) -> list[NutritionLogEntry]:
        """Return all log entries for a day."""

    def create_entry(
        self, user_id: UUID, day: date, macros: Macros, meal_id: UUID | None
    ) -> NutritionLogEntry:
        """Create a log entry and return it."""


def compute_recipe_nutrition(
    ingredients: Iterable[RecipeIngredient], servings: int | None
) -> RecipeNutrition:
    """Return total and per-serving macros for a list of ingredients.

    Food items carry values per 100g, so each resolved ingredient
    contributes ``quantity / 100`` times its food's macros. The unit is
    not converted: a quantity of ``2`` with unit ``cup`` is treated as 2g.
    Ingredients without a food item contribute nothing.
    """
    total = Macros.zero()
    for ingredient in ingredients:
        if ingredient.food_item is None:
            continue
        total = total + ingredient.food_item.per_100g.scaled(ingredient.quantity / 100)
    divisor = max(servings or 0, 1)
    return RecipeNutrition(
        total=total,
        per_serving=total.scaled(1 / divisor),
        servings=servings,
    )


def sum_daily_nutrition(entries: Iterable[Macros]) -> Macros:
    """Field-wise sum of macro entries; duplicates are counted."""
    total = Macros.zero()
    for entry in entries:
        total = total + entry
    return total


def goal_progress(current: Macros, goals: Macros) -> list[GoalProgress]:
    """Return per-nutrient progress against daily goals."""
    progress = []
    for label, attr in _GOAL_FIELDS:
        value = getattr(current, attr)
        target = getattr(goals, attr)
        percentage = 0.0 if target == 0 else min(value / target * 100, 100.0)
        progress.append(
            GoalProgress(
                name=label,
                current=value,
                target=target,
                percentage=percentage,
                remaining=target - value,
                over_target=value > target,
            )
        )
    return progress


@dataclass
class NutritionService:
    """Service for recipe and daily nutrition views."""

    recipe_repository: RecipeRepository
    log_repository: NutritionLogRepository

    def get_recipe_nutrition(self, user_id: UUID, recipe_id: UUID) -> RecipeNutrition:
        """Compute nutrition for a stored recipe."""
        recipe = self.recipe_repository.get_recipe(user_id, recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return compute_recipe_nutrition(recipe.ingredients, recipe.servings)

    def get_daily_totals(self, user_id: UUID, day: date) -> Macros:
        """Return the summed macros logged on a day."""
        entries = self.log_repository.list_entries(user_id, day)
        return sum_daily_nutrition(entry.macros for entry in entries)

    def get_daily_progress(
        self, user_id: UUID, day: date, goals: Macros
    ) -> tuple[Macros, list[GoalProgress]]:
        """Return a day's totals and their progress against goals."""
        totals = self.get_daily_totals(user_id, day)
        return totals, goal_progress(totals, goals)

    def log_entry(
        self, user_id: UUID, day: date, macros: Macros, meal_id: UUID | None = None
    ) -> NutritionLogEntry:
        """Persist a nutrition log entry."""
        entry = self.log_repository.create_entry(user_id, day, macros, meal_id)
        _logger.info("Nutrition entry logged", extra={"user_id": str(user_id)})
        return entry

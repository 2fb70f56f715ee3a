"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from meal_planner.domain.nutrition import Macros, NutritionLogEntry
from meal_planner.domain.planning import MealType


@dataclass(frozen=True)
class MealDraft:
    """A meal as entered by the user, optionally with a photo and macros."""

    meal_plan_id: UUID
    day: date
    meal_type: MealType
    meal_name: str | None = None
    recipe_id: UUID | None = None
    food_item_id: UUID | None = None
    quantity: float | None = None
    unit: str | None = None
    notes: str | None = None
    photo_url: str | None = None
    photo_description: str | None = None
    macros: Macros | None = None


@dataclass(frozen=True)
class Meal:
    """Meal row."""

    id: UUID
    user_id: UUID
    meal_plan_id: UUID
    day: date
    meal_type: MealType
    meal_name: str | None = None
    recipe_id: UUID | None = None
    food_item_id: UUID | None = None
    quantity: float | None = None
    unit: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MealPhoto:
    """Photo attached to a meal."""

    id: UUID
    meal_id: UUID | None
    image_url: str
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class LoggedMeal:
    """Result of logging a meal with its photo and nutrition rows."""

    meal: Meal
    photo: MealPhoto | None = None
    nutrition: NutritionLogEntry | None = None

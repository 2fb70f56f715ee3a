"""Domain models for meal planning."""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Slot of the day a planned meal belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealPlan:
    """Named planning period."""

    id: UUID
    user_id: UUID
    name: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class MealPlanEvent:
    """A meal scheduled on the calendar."""

    id: UUID
    user_id: UUID
    title: str
    day: date
    meal_type: MealType
    start_time: time | None = None
    end_time: time | None = None
    notes: str | None = None
    recipe_id: UUID | None = None
    recipe_name: str | None = None


@dataclass(frozen=True)
class WeekDay:
    """Events planned for one calendar day."""

    day: date
    events: list[MealPlanEvent] = field(default_factory=list)

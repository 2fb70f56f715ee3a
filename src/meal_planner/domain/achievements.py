"""Domain models for achievements."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from meal_planner.errors import InvalidCriteriaError


class CriteriaKind(str, Enum):
    """Closed set of activity counters an achievement can track."""

    MEAL_COUNT = "meal_count"
    RECIPE_COUNT = "recipe_count"
    PHOTO_COUNT = "photo_count"
    SHOPPING_LISTS = "shopping_lists"
    NUTRITION_DAYS = "nutrition_days"
    UNIQUE_RECIPES = "unique_recipes"
    COOKING_STREAK = "cooking_streak"
    PLANNING_WEEKS = "planning_weeks"


@dataclass(frozen=True)
class AchievementCriteria:
    """Counter kind and the target value that completes an achievement."""

    kind: CriteriaKind
    target: float

    @classmethod
    def parse(cls, raw: object) -> "AchievementCriteria":
        """Parse the stored criteria JSON blob."""
        if not isinstance(raw, dict):
            raise InvalidCriteriaError(f"Criteria must be an object, got {raw!r}")
        try:
            kind = CriteriaKind(raw.get("type"))
        except ValueError as exc:
            raise InvalidCriteriaError(
                f"Unknown criteria type: {raw.get('type')!r}"
            ) from exc
        target = raw.get("target")
        try:
            target_value = float(target) if target is not None else 1.0
        except (TypeError, ValueError) as exc:
            raise InvalidCriteriaError(f"Invalid criteria target: {target!r}") from exc
        return cls(kind=kind, target=target_value)


@dataclass(frozen=True)
class AchievementType:
    """Achievement definition."""

    id: UUID
    name: str
    description: str
    icon: str | None
    criteria: AchievementCriteria
    reward_points: int


@dataclass(frozen=True)
class UserAchievement:
    """Record that a user was awarded an achievement."""

    id: UUID | None
    user_id: UUID
    achievement_type_id: UUID
    achieved_at: datetime | None


@dataclass(frozen=True)
class UserStats:
    """Activity counters for a single user."""

    meal_count: int = 0
    recipe_count: int = 0
    photo_count: int = 0
    shopping_lists_completed: int = 0
    nutrition_days_tracked: int = 0
    unique_recipes_tried: int = 0
    cooking_streak_days: int = 0
    planning_weeks: int = 0

    def value_for(self, kind: CriteriaKind) -> int:
        """Return the counter that drives the given criteria kind."""
        return {
            CriteriaKind.MEAL_COUNT: self.meal_count,
            CriteriaKind.RECIPE_COUNT: self.recipe_count,
            CriteriaKind.PHOTO_COUNT: self.photo_count,
            CriteriaKind.SHOPPING_LISTS: self.shopping_lists_completed,
            CriteriaKind.NUTRITION_DAYS: self.nutrition_days_tracked,
            CriteriaKind.UNIQUE_RECIPES: self.unique_recipes_tried,
            CriteriaKind.COOKING_STREAK: self.cooking_streak_days,
            CriteriaKind.PLANNING_WEEKS: self.planning_weeks,
        }[kind]


@dataclass(frozen=True)
class AchievementProgress:
    """An achievement with the user's completion percentage."""

    achievement: AchievementType
    progress: float
    achieved_at: datetime | None = None

    @property
    def is_awarded(self) -> bool:
        return self.achieved_at is not None


@dataclass(frozen=True)
class AchievementBoard:
    """All achievements for a user split by completion."""

    stats: UserStats
    completed: list[AchievementProgress]
    in_progress: list[AchievementProgress]
    total_points: int
    newly_awarded: list[UUID] = field(default_factory=list)

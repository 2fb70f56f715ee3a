"""Achievement progress and award detection."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from meal_planner.clock import utc_today
from meal_planner.domain.achievements import (
    AchievementBoard,
    AchievementCriteria,
    AchievementProgress,
    AchievementType,
    UserAchievement,
    UserStats,
)

_logger = logging.getLogger(__name__)


class AchievementRepository(Protocol):
    """Persistence interface for achievements and activity counters."""

    def list_achievement_types(self) -> list[AchievementType]:
        """Return all achievement types ordered by reward points."""

    def list_user_achievements(self, user_id: UUID) -> list[UserAchievement]:
        """Return achievements awarded to a user."""

    def award(self, user_id: UUID, achievement_type_id: UUID) -> bool:
        """Insert an award row; return False if it already exists."""

    def count_rows(self, table: str, user_id: UUID) -> int:
        """Return the number of rows a user owns in a table."""

    def list_nutrition_log_dates(self, user_id: UUID) -> list[date]:
        """Return the date of every nutrition log entry."""

    def list_meal_recipe_ids(self, user_id: UUID) -> list[UUID]:
        """Return recipe ids of meals that reference a recipe."""

    def list_meal_dates_since(self, user_id: UUID, since: date) -> list[date]:
        """Return meal dates on or after a day."""


def calculate_progress(criteria: AchievementCriteria, stats: UserStats) -> float:
    """Return completion percentage in [0, 100] for an achievement."""
    value = stats.value_for(criteria.kind)
    if criteria.target <= 0:
        return 100.0 if value > 0 else 0.0
    return max(0.0, min(value / criteria.target * 100, 100.0))


@dataclass
class AchievementService:
    """Service computing achievement progress and awarding completions."""

    repository: AchievementRepository
    cooking_window_days: int = 7

    def compute_stats(self, user_id: UUID, today: date | None = None) -> UserStats:
        """Compute every activity counter for a user."""
        today = today or utc_today()
        window_start = today - timedelta(days=self.cooking_window_days)
        recent_meal_days = self.repository.list_meal_dates_since(user_id, window_start)
        return UserStats(
            meal_count=self.repository.count_rows("meals", user_id),
            recipe_count=self.repository.count_rows("recipes", user_id),
            photo_count=self.repository.count_rows("meal_photos", user_id),
            # Every list counts, completed or not.
            shopping_lists_completed=self.repository.count_rows(
                "shopping_lists", user_id
            ),
            nutrition_days_tracked=len(
                set(self.repository.list_nutrition_log_dates(user_id))
            ),
            unique_recipes_tried=len(
                set(self.repository.list_meal_recipe_ids(user_id))
            ),
            cooking_streak_days=len(set(recent_meal_days)),
            planning_weeks=self.repository.count_rows("meal_plans", user_id),
        )

    def load_board(
        self, user_id: UUID, stats: UserStats | None = None
    ) -> AchievementBoard:
        """Merge achievement types with the user's awards and progress."""
        types = self.repository.list_achievement_types()
        awarded = {
            award.achievement_type_id: award
            for award in self.repository.list_user_achievements(user_id)
        }
        stats = stats or self.compute_stats(user_id)
        completed: list[AchievementProgress] = []
        in_progress: list[AchievementProgress] = []
        for achievement in types:
            award = awarded.get(achievement.id)
            entry = AchievementProgress(
                achievement=achievement,
                progress=calculate_progress(achievement.criteria, stats),
                achieved_at=award.achieved_at if award else None,
            )
            if award:
                completed.append(entry)
            else:
                in_progress.append(entry)
        return AchievementBoard(
            stats=stats,
            completed=completed,
            in_progress=in_progress,
            total_points=sum(entry.achievement.reward_points for entry in completed),
        )

    def award_completed(
        self, user_id: UUID, board: AchievementBoard | None = None
    ) -> list[UUID]:
        """Award every fully-progressed achievement the user lacks."""
        board = board or self.load_board(user_id)
        awarded: list[UUID] = []
        for entry in board.in_progress:
            if entry.progress < 100:
                continue
            achievement_id = entry.achievement.id
            if self.repository.award(user_id, achievement_id):
                _logger.info(
                    "Achievement unlocked",
                    extra={
                        "user_id": str(user_id),
                        "achievement": entry.achievement.name,
                    },
                )
                awarded.append(achievement_id)
        return awarded

    def refresh(self, user_id: UUID) -> AchievementBoard:
        """Award completed achievements and return the reloaded board."""
        stats = self.compute_stats(user_id)
        newly_awarded = self.award_completed(
            user_id, self.load_board(user_id, stats=stats)
        )
        board = self.load_board(user_id, stats=stats)
        return AchievementBoard(
            stats=board.stats,
            completed=board.completed,
            in_progress=board.in_progress,
            total_points=board.total_points,
            newly_awarded=newly_awarded,
        )

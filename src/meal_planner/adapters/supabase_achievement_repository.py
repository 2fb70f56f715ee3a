"""Supabase repository for achievements and activity counters."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from meal_planner.adapters.supabase_support import (
    UNIQUE_VIOLATION,
    parse_date,
    parse_datetime,
    store_call,
)
from meal_planner.domain.achievements import (
    AchievementCriteria,
    AchievementType,
    UserAchievement,
)
from meal_planner.errors import InvalidCriteriaError
from meal_planner.services.achievements import AchievementRepository

_COUNTED_TABLES = {"meals", "recipes", "meal_photos", "shopping_lists", "meal_plans"}

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAchievementRepository(AchievementRepository):
    """Supabase implementation for achievement queries."""

    client: Client

    def list_achievement_types(self) -> list[AchievementType]:
        """Return achievement types ordered by reward points."""
        with store_call("load achievements"):
            response = (
                self.client.table("achievement_types")
                .select("id, name, description, icon, criteria, reward_points")
                .order("reward_points")
                .execute()
            )
        types = []
        for row in response.data or []:
            try:
                criteria = AchievementCriteria.parse(row.get("criteria"))
            except InvalidCriteriaError:
                _logger.warning(
                    "Skipping achievement with invalid criteria",
                    extra={"achievement_type_id": row.get("id")},
                    exc_info=True,
                )
                continue
            types.append(
                AchievementType(
                    id=UUID(row["id"]),
                    name=str(row.get("name", "")),
                    description=str(row.get("description", "")),
                    icon=row.get("icon"),
                    criteria=criteria,
                    reward_points=int(row.get("reward_points") or 0),
                )
            )
        return types

    def list_user_achievements(self, user_id: UUID) -> list[UserAchievement]:
        """Return achievements awarded to a user."""
        with store_call("load user achievements"):
            response = (
                self.client.table("user_achievements")
                .select("id, user_id, achievement_type_id, achieved_at")
                .eq("user_id", str(user_id))
                .execute()
            )
        return [
            UserAchievement(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                achievement_type_id=UUID(row["achievement_type_id"]),
                achieved_at=parse_datetime(row.get("achieved_at")),
            )
            for row in response.data or []
            if row.get("achievement_type_id")
        ]

    def award(self, user_id: UUID, achievement_type_id: UUID) -> bool:
        """Insert an award; a unique-constraint violation means already awarded."""
        with store_call("award achievement"):
            try:
                self.client.table("user_achievements").insert(
                    {
                        "user_id": str(user_id),
                        "achievement_type_id": str(achievement_type_id),
                    }
                ).execute()
            except APIError as exc:
                if exc.code != UNIQUE_VIOLATION:
                    raise
                _logger.info(
                    "Achievement already awarded",
                    extra={"achievement_type_id": str(achievement_type_id)},
                )
                return False
        return True

    def count_rows(self, table: str, user_id: UUID) -> int:
        """Return the number of rows owned by the user."""
        if table not in _COUNTED_TABLES:
            raise ValueError(f"Unsupported table for counting: {table}")
        with store_call(f"count {table}"):
            response = (
                self.client.table(table)
                .select("id", count="exact")
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        return response.count or 0

    def list_nutrition_log_dates(self, user_id: UUID) -> list[date]:
        """Return dates of all nutrition log entries."""
        with store_call("load nutrition days"):
            response = (
                self.client.table("nutrition_logs")
                .select("date")
                .eq("user_id", str(user_id))
                .execute()
            )
        return _dates(response.data)

    def list_meal_recipe_ids(self, user_id: UUID) -> list[UUID]:
        """Return recipe ids referenced by the user's meals."""
        with store_call("load meal recipes"):
            response = (
                self.client.table("meals")
                .select("recipe_id")
                .eq("user_id", str(user_id))
                .not_.is_("recipe_id", "null")
                .execute()
            )
        return [
            UUID(row["recipe_id"])
            for row in response.data or []
            if row.get("recipe_id")
        ]

    def list_meal_dates_since(self, user_id: UUID, since: date) -> list[date]:
        """Return dates of meals on or after a day."""
        with store_call("load recent meals"):
            response = (
                self.client.table("meals")
                .select("date")
                .eq("user_id", str(user_id))
                .gte("date", since.isoformat())
                .execute()
            )
        return _dates(response.data)


def _dates(rows: list[dict[str, object]] | None) -> list[date]:
    parsed = (parse_date(row.get("date")) for row in rows or [])
    return [day for day in parsed if day is not None]

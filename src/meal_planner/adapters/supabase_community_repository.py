"""Supabase repository for community recipe sharing."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import (
    parse_datetime,
    parse_uuid,
    store_call,
)
from meal_planner.domain.community import RecipeComment, SharedRecipe
from meal_planner.errors import StoreError
from meal_planner.services.community import CommunityRepository

_COLUMNS = (
    "id, recipe_id, user_id, is_public, featured, average_rating, "
    "total_ratings, recipe:recipes(name)"
)


@dataclass
class SupabaseCommunityRepository(CommunityRepository):
    """Supabase implementation for shared recipes and ratings."""

    client: Client

    def has_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the user owns the recipe."""
        with store_call("load recipe"):
            response = (
                self.client.table("recipes")
                .select("id")
                .eq("id", str(recipe_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        return bool(response.data)

    def share_recipe(self, user_id: UUID, recipe_id: UUID) -> SharedRecipe:
        """Publish a recipe."""
        with store_call("share recipe"):
            response = (
                self.client.table("shared_recipes")
                .insert(
                    {
                        "user_id": str(user_id),
                        "recipe_id": str(recipe_id),
                        "is_public": True,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreError("share recipe", "Failed to share recipe")
        return _parse_shared(response.data[0])

    def get_shared(self, shared_recipe_id: UUID) -> SharedRecipe | None:
        """Return a shared recipe by id."""
        with store_call("load shared recipe"):
            response = (
                self.client.table("shared_recipes")
                .select(_COLUMNS)
                .eq("id", str(shared_recipe_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_shared(response.data[0])

    def list_public(self, limit: int) -> list[SharedRecipe]:
        """Return public recipes ordered by rating."""
        with store_call("load community recipes"):
            response = (
                self.client.table("shared_recipes")
                .select(_COLUMNS)
                .eq("is_public", True)
                .order("average_rating", desc=True)
                .limit(limit)
                .execute()
            )
        return [_parse_shared(row) for row in response.data or []]

    def list_featured(self, limit: int) -> list[SharedRecipe]:
        """Return featured recipes."""
        with store_call("load featured recipes"):
            response = (
                self.client.table("shared_recipes")
                .select(_COLUMNS)
                .eq("featured", True)
                .eq("is_public", True)
                .limit(limit)
                .execute()
            )
        return [_parse_shared(row) for row in response.data or []]

    def list_shared_by(self, user_id: UUID) -> list[SharedRecipe]:
        """Return recipes shared by a user."""
        with store_call("load my shared recipes"):
            response = (
                self.client.table("shared_recipes")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_shared(row) for row in response.data or []]

    def upsert_rating(
        self, user_id: UUID, shared_recipe_id: UUID, rating: int, comment: str | None
    ) -> None:
        """Create or replace a rating."""
        with store_call("rate recipe"):
            self.client.table("recipe_ratings").upsert(
                {
                    "shared_recipe_id": str(shared_recipe_id),
                    "user_id": str(user_id),
                    "rating": rating,
                    "comment": comment,
                },
                on_conflict="shared_recipe_id,user_id",
            ).execute()

    def list_ratings(self, shared_recipe_id: UUID) -> list[int]:
        """Return every rating of a shared recipe."""
        with store_call("load ratings"):
            response = (
                self.client.table("recipe_ratings")
                .select("rating")
                .eq("shared_recipe_id", str(shared_recipe_id))
                .execute()
            )
        return [int(row["rating"]) for row in response.data or []]

    def update_rating_summary(
        self, shared_recipe_id: UUID, average: float, count: int
    ) -> None:
        """Store the rating aggregate."""
        with store_call("update rating summary"):
            self.client.table("shared_recipes").update(
                {"average_rating": average, "total_ratings": count}
            ).eq("id", str(shared_recipe_id)).execute()

    def add_comment(
        self, user_id: UUID, shared_recipe_id: UUID, comment: str
    ) -> RecipeComment:
        """Insert a top-level comment."""
        with store_call("add comment"):
            response = (
                self.client.table("recipe_comments")
                .insert(
                    {
                        "shared_recipe_id": str(shared_recipe_id),
                        "user_id": str(user_id),
                        "comment": comment,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreError("add comment", "Failed to add comment")
        return _parse_comment(response.data[0])

    def list_comments(self, shared_recipe_id: UUID) -> list[RecipeComment]:
        """Return top-level comments, newest first."""
        with store_call("load comments"):
            response = (
                self.client.table("recipe_comments")
                .select("id, shared_recipe_id, user_id, comment, created_at")
                .eq("shared_recipe_id", str(shared_recipe_id))
                .is_("parent_comment_id", "null")
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_comment(row) for row in response.data or []]


def _parse_shared(row: dict[str, object]) -> SharedRecipe:
    recipe = row.get("recipe")
    return SharedRecipe(
        id=UUID(row["id"]),
        recipe_id=parse_uuid(row.get("recipe_id")),
        user_id=UUID(row["user_id"]),
        recipe_name=recipe.get("name") if isinstance(recipe, dict) else None,
        is_public=bool(row.get("is_public")),
        featured=bool(row.get("featured")),
        average_rating=float(row.get("average_rating") or 0.0),
        total_ratings=int(row.get("total_ratings") or 0),
    )


def _parse_comment(row: dict[str, object]) -> RecipeComment:
    return RecipeComment(
        id=UUID(row["id"]),
        shared_recipe_id=UUID(row["shared_recipe_id"]),
        user_id=UUID(row["user_id"]),
        comment=str(row.get("comment", "")),
        created_at=parse_datetime(row.get("created_at")),
    )

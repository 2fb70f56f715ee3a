"""Community recipe sharing and ratings."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_planner.domain.community import RecipeComment, SharedRecipe
from meal_planner.errors import NotFoundError, ValidationError

MIN_RATING = 1
MAX_RATING = 5


class CommunityRepository(Protocol):
    """Persistence interface for shared recipes and ratings."""

    def has_recipe(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return whether the recipe belongs to the user."""

    def share_recipe(self, user_id: UUID, recipe_id: UUID) -> SharedRecipe:
        """Publish a recipe and return the shared row."""

    def get_shared(self, shared_recipe_id: UUID) -> SharedRecipe | None:
        """Return a shared recipe by id."""

    def list_public(self, limit: int) -> list[SharedRecipe]:
        """Return public shared recipes by rating."""

    def list_featured(self, limit: int) -> list[SharedRecipe]:
        """Return featured shared recipes."""

    def list_shared_by(self, user_id: UUID) -> list[SharedRecipe]:
        """Return recipes a user has shared."""

    def upsert_rating(
        self, user_id: UUID, shared_recipe_id: UUID, rating: int, comment: str | None
    ) -> None:
        """Create or replace the user's rating of a shared recipe."""

    def list_ratings(self, shared_recipe_id: UUID) -> list[int]:
        """Return every rating of a shared recipe."""

    def update_rating_summary(
        self, shared_recipe_id: UUID, average: float, count: int
    ) -> None:
        """Store the aggregate rating on the shared recipe."""

    def add_comment(
        self, user_id: UUID, shared_recipe_id: UUID, comment: str
    ) -> RecipeComment:
        """Insert a top-level comment."""

    def list_comments(self, shared_recipe_id: UUID) -> list[RecipeComment]:
        """Return top-level comments, newest first."""


def summarize_ratings(ratings: Iterable[int]) -> tuple[float, int]:
    """Return the average rating and the number of ratings."""
    values = list(ratings)
    if not values:
        return 0.0, 0
    return round(sum(values) / len(values), 2), len(values)


@dataclass
class CommunityService:
    """Service for sharing recipes with the community."""

    repository: CommunityRepository

    def share_recipe(self, user_id: UUID, recipe_id: UUID) -> SharedRecipe:
        """Share one of the user's recipes."""
        if not self.repository.has_recipe(user_id, recipe_id):
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return self.repository.share_recipe(user_id, recipe_id)

    def list_community(self, limit: int = 20) -> list[SharedRecipe]:
        """Return public recipes, best rated first."""
        return self.repository.list_public(limit)

    def list_featured(self, limit: int = 6) -> list[SharedRecipe]:
        """Return featured recipes."""
        return self.repository.list_featured(limit)

    def list_mine(self, user_id: UUID) -> list[SharedRecipe]:
        """Return the recipes this user shared."""
        return self.repository.list_shared_by(user_id)

    def rate_recipe(
        self,
        user_id: UUID,
        shared_recipe_id: UUID,
        rating: int,
        comment: str | None = None,
    ) -> tuple[float, int]:
        """Rate a shared recipe and refresh its aggregate."""
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}"
            )
        self._require_public(shared_recipe_id)
        self.repository.upsert_rating(user_id, shared_recipe_id, rating, comment)
        average, count = summarize_ratings(
            self.repository.list_ratings(shared_recipe_id)
        )
        self.repository.update_rating_summary(shared_recipe_id, average, count)
        return average, count

    def add_comment(
        self, user_id: UUID, shared_recipe_id: UUID, comment: str
    ) -> RecipeComment:
        """Comment on a public shared recipe."""
        text = comment.strip()
        if not text:
            raise ValidationError("Comment cannot be empty")
        self._require_public(shared_recipe_id)
        return self.repository.add_comment(user_id, shared_recipe_id, text)

    def list_comments(self, shared_recipe_id: UUID) -> list[RecipeComment]:
        """Return comments of a public shared recipe, newest first."""
        self._require_public(shared_recipe_id)
        return self.repository.list_comments(shared_recipe_id)

    def _require_public(self, shared_recipe_id: UUID) -> SharedRecipe:
        shared = self.repository.get_shared(shared_recipe_id)
        if shared is None or not shared.is_public:
            raise NotFoundError(f"Shared recipe {shared_recipe_id} not found")
        return shared

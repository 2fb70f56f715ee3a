"""Domain models for community recipe sharing."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SharedRecipe:
    """A recipe published to the community."""

    id: UUID
    recipe_id: UUID | None
    user_id: UUID
    recipe_name: str | None
    is_public: bool
    featured: bool
    average_rating: float
    total_ratings: int


@dataclass(frozen=True)
class RecipeComment:
    """Top-level comment on a shared recipe."""

    id: UUID
    shared_recipe_id: UUID
    user_id: UUID
    comment: str
    created_at: datetime | None = None

"""Models for AI meal recommendations."""

from pydantic import BaseModel, ConfigDict, Field


class MealRecommendation(BaseModel):
    """Single suggested meal."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    description: str = ""
    prep_time: int = Field(default=0, alias="prepTime", ge=0)
    cook_time: int = Field(default=0, alias="cookTime", ge=0)
    servings: int = Field(default=1, ge=1)
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    ingredients: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    reason: str = ""


class RecommendationResult(BaseModel):
    """Recommendations plus whether they came from the model."""

    success: bool
    recommendations: list[MealRecommendation]
    generated_at: str
    error: str | None = None

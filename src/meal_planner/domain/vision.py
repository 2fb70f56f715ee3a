"""Models for photo identification results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Confidence = Literal["high", "medium", "low"]


class FoodIdentification(BaseModel):
    """Food names and search terms identified in a photo."""

    model_config = ConfigDict(populate_by_name=True)

    identified_foods: list[str] = Field(alias="identifiedFoods")
    confidence: Confidence = "low"
    search_terms: list[str] = Field(default_factory=list, alias="searchTerms")
    notes: str | None = None


class EstimatedNutrition(BaseModel):
    """Macro estimate for a photographed meal."""

    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)


class MealAnalysis(BaseModel):
    """Structured output for meal photo analysis."""

    model_config = ConfigDict(populate_by_name=True)

    estimated_nutrition: EstimatedNutrition = Field(alias="estimatedNutrition")
    identified_foods: list[str] = Field(alias="identifiedFoods")
    portion_size: str | None = Field(default=None, alias="portionSize")
    confidence: Confidence = "low"
    notes: str | None = None

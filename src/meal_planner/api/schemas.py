"""Pydantic models for API request bodies."""

from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from meal_planner.domain.meals import MealDraft
from meal_planner.domain.nutrition import Macros, RecipeDraft, RecipeIngredient
from meal_planner.domain.planning import MealType


class MacrosPayload(BaseModel):
    """Macro amounts as sent by clients."""

    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)

    def to_macros(self) -> Macros:
        return Macros(
            calories=self.calories,
            protein_g=self.protein,
            carbs_g=self.carbs,
            fat_g=self.fat,
            fiber_g=self.fiber,
            sugar_g=self.sugar,
            sodium_mg=self.sodium,
        )


class IngredientLine(BaseModel):
    """Ingredient of a recipe that has not been saved yet."""

    food_item_id: UUID | None = None
    quantity: float = Field(default=0.0, ge=0)
    unit: str = "g"
    ingredient_name: str | None = None


class NutritionPreviewRequest(BaseModel):
    """Ingredients to compute nutrition for before saving a recipe."""

    servings: int | None = 1
    ingredients: list[IngredientLine] = Field(default_factory=list)


class NutritionLogRequest(MacrosPayload):
    """Nutrition log entry for a day."""

    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    meal_id: UUID | None = None


class ShoppingItemUpdate(BaseModel):
    """Edits applied to a shopping list item."""

    is_purchased: bool | None = None
    actual_cost: float | None = Field(default=None, ge=0)


class GenerateShoppingListRequest(BaseModel):
    """Meal plan to build a shopping list from."""

    meal_plan_id: UUID
    name: str


class MealPlanEventRequest(BaseModel):
    """Calendar event as entered in the planner form."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    day: date | None = Field(default=None, alias="date")
    meal_type: str | None = None
    start_time: time | None = None
    end_time: time | None = None
    notes: str | None = None
    recipe_id: str | None = None


class PhotoRequest(BaseModel):
    """Photo to identify, either as a URL or base64 encoded bytes."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")
    image_base64: str | None = Field(default=None, alias="imageBase64")
    description: str | None = None


class RecommendationRequest(BaseModel):
    """Context used to personalise meal recommendations."""

    model_config = ConfigDict(populate_by_name=True)

    preferences: dict[str, object] = Field(default_factory=dict)
    meal_history: list[dict[str, object]] = Field(
        default_factory=list, alias="mealHistory"
    )
    nutritional_goals: dict[str, object] = Field(
        default_factory=dict, alias="nutritionalGoals"
    )


class ImportProductRequest(BaseModel):
    """Barcode of a product to copy into the food database."""

    barcode: str


class ShareRecipeRequest(BaseModel):
    recipe_id: UUID


class RateRecipeRequest(BaseModel):
    rating: int
    comment: str | None = None


class RecipeRequest(BaseModel):
    """Recipe as submitted by the recipe form."""

    name: str
    description: str | None = None
    instructions: str | None = None
    servings: int | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    meal_times: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientLine] = Field(default_factory=list)

    def to_draft(self) -> RecipeDraft:
        return RecipeDraft(
            name=self.name,
            servings=self.servings,
            description=self.description,
            instructions=self.instructions,
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            meal_times=list(self.meal_times),
            tags=list(self.tags),
            ingredients=[
                RecipeIngredient(
                    quantity=line.quantity,
                    unit=line.unit,
                    ingredient_name=line.ingredient_name,
                    food_item_id=line.food_item_id,
                )
                for line in self.ingredients
            ],
        )


class MealLogRequest(BaseModel):
    """Meal eaten by the caller, with an optional photo and its nutrition."""

    model_config = ConfigDict(populate_by_name=True)

    meal_plan_id: UUID
    day: date = Field(alias="date")
    meal_type: MealType
    meal_name: str | None = None
    recipe_id: UUID | None = None
    food_item_id: UUID | None = None
    quantity: float | None = Field(default=None, ge=0)
    unit: str | None = None
    notes: str | None = None
    photo_url: str | None = None
    photo_description: str | None = None
    nutrition: MacrosPayload | None = None

    def to_draft(self) -> MealDraft:
        return MealDraft(
            meal_plan_id=self.meal_plan_id,
            day=self.day,
            meal_type=self.meal_type,
            meal_name=self.meal_name,
            recipe_id=self.recipe_id,
            food_item_id=self.food_item_id,
            quantity=self.quantity,
            unit=self.unit,
            notes=self.notes,
            photo_url=self.photo_url,
            photo_description=self.photo_description,
            macros=self.nutrition.to_macros() if self.nutrition else None,
        )


class CommentRequest(BaseModel):
    comment: str

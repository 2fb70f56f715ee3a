"""Nutrition domain models."""

from dataclasses import dataclass, field, fields
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class Macros:
    """Nutrient tuple, either absolute amounts or values per 100g."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0

    @classmethod
    def zero(cls) -> "Macros":
        """Return an all-zero macro tuple."""
        return cls()

    @classmethod
    def from_mapping(cls, values: dict[str, object], suffix: str = "") -> "Macros":
        """Build macros from a row, treating missing or null columns as 0."""
        return cls(
            calories=_as_float(values.get(f"calories{suffix}")),
            protein_g=_as_float(values.get(f"protein{suffix}")),
            carbs_g=_as_float(values.get(f"carbs{suffix}")),
            fat_g=_as_float(values.get(f"fat{suffix}")),
            fiber_g=_as_float(values.get(f"fiber{suffix}")),
            sugar_g=_as_float(values.get(f"sugar{suffix}")),
            sodium_mg=_as_float(values.get(f"sodium{suffix}")),
        )

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            **{
                item.name: getattr(self, item.name) + getattr(other, item.name)
                for item in fields(self)
            }
        )

    def scaled(self, factor: float) -> "Macros":
        """Return every field multiplied by factor."""
        return Macros(
            **{item.name: getattr(self, item.name) * factor for item in fields(self)}
        )

    def as_dict(self) -> dict[str, float]:
        """Return macros keyed by the store's column names."""
        return {
            "calories": self.calories,
            "protein": self.protein_g,
            "carbs": self.carbs_g,
            "fat": self.fat_g,
            "fiber": self.fiber_g,
            "sugar": self.sugar_g,
            "sodium": self.sodium_mg,
        }


@dataclass(frozen=True)
class FoodItem:
    """A food with macros per 100g."""

    id: UUID | None
    name: str
    per_100g: Macros
    brand: str | None = None
    barcode: str | None = None
    serving_size: float | None = None
    serving_unit: str | None = None


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient line of a recipe."""

    quantity: float
    unit: str
    food_item: FoodItem | None = None
    ingredient_name: str | None = None
    food_item_id: UUID | None = None
    id: UUID | None = None


@dataclass(frozen=True)
class Recipe:
    """Recipe with its ingredient lines."""

    id: UUID
    user_id: UUID
    name: str
    servings: int | None
    description: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    meal_times: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    instructions: str | None = None


@dataclass(frozen=True)
class RecipeDraft:
    """Recipe fields and ingredient lines as submitted for saving."""

    name: str
    servings: int | None = None
    description: str | None = None
    instructions: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    meal_times: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    ingredients: list[RecipeIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class RecipeNutrition:
    """Total and per-serving nutrition of a recipe.

    ``servings`` is the stored value; per-serving figures divide by at
    least 1.
    """

    total: Macros
    per_serving: Macros
    servings: int | None


@dataclass(frozen=True)
class NutritionLogEntry:
    """A date-stamped row of consumed macros."""

    id: UUID | None
    day: date
    macros: Macros
    meal_id: UUID | None = None


@dataclass(frozen=True)
class GoalProgress:
    """Progress of a single nutrient against its daily target."""

    name: str
    current: float
    target: float
    percentage: float
    remaining: float
    over_target: bool


def _as_float(value: object) -> float:
    if value is None:
        return 0.0
    return float(value)

"""Models for products from Open Food Facts."""

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Packaged product normalised to per-100g macros."""

    barcode: str
    name: str
    brand: str | None = None
    calories_per_100g: float | None = None
    protein_per_100g: float | None = None
    carbs_per_100g: float | None = None
    fat_per_100g: float | None = None
    fiber_per_100g: float | None = None
    sugar_per_100g: float | None = None
    sodium_per_100g: float | None = None
    serving_size: float | None = None
    serving_unit: str = "g"
    image_url: str | None = None
    categories: list[str] = Field(default_factory=list)

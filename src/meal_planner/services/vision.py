"""Photo identification service using LLM vision models."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from meal_planner.domain.vision import (
    EstimatedNutrition,
    FoodIdentification,
    MealAnalysis,
)
from meal_planner.errors import ValidationError

FALLBACK_SEARCH_TERMS = ["oats", "cereal", "bread", "milk", "pasta"]

_logger = logging.getLogger(__name__)

_CONFIDENCE = {"type": "string", "enum": ["high", "medium", "low"]}
_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}

FOOD_IDENTIFICATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "identifiedFoods": {"type": "array", "items": {"type": "string"}},
        "confidence": _CONFIDENCE,
        "searchTerms": {"type": "array", "items": {"type": "string"}},
        "notes": _NULLABLE_STRING,
    },
    "required": ["identifiedFoods", "confidence", "searchTerms", "notes"],
    "additionalProperties": False,
}

MEAL_ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "estimatedNutrition": {
            "type": "object",
            "properties": {
                name: {"type": "number", "minimum": 0}
                for name in (
                    "calories",
                    "protein",
                    "carbs",
                    "fat",
                    "fiber",
                    "sodium",
                    "sugar",
                )
            },
            "required": [
                "calories",
                "protein",
                "carbs",
                "fat",
                "fiber",
                "sodium",
                "sugar",
            ],
            "additionalProperties": False,
        },
        "identifiedFoods": {"type": "array", "items": {"type": "string"}},
        "portionSize": _NULLABLE_STRING,
        "confidence": _CONFIDENCE,
        "notes": _NULLABLE_STRING,
    },
    "required": [
        "estimatedNutrition",
        "identifiedFoods",
        "portionSize",
        "confidence",
        "notes",
    ],
    "additionalProperties": False,
}

_IDENTIFY_PROMPT = (
    "You are a food identification expert. Identify the food items in this "
    "image that could be found in the Open Food Facts database. Focus on "
    "packaged foods, branded products and items with barcodes. Make search "
    'terms specific and likely to find results (e.g. "oats", "pasta", '
    '"milk").'
)

_ANALYZE_PROMPT = (
    "You are a nutrition expert analyzing meal photos. Estimate the "
    "nutrition of the whole meal shown: calories, protein, carbs, fat, "
    "fiber (g), sodium (mg) and sugar (g), list the identified foods and "
    "describe the portion size."
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(
        self,
        *,
        model: str,
        image_url: str,
        schema_name: str,
        schema: dict[str, object],
        prompt: str,
    ) -> str:
        """Return the raw JSON text produced by the model."""


@dataclass
class VisionService:
    """Service that prepares vision prompts and validates results."""

    client: VisionClient
    model: str

    async def identify_foods(
        self,
        *,
        image_url: str | None = None,
        image_bytes: bytes | None = None,
        description: str | None = None,
    ) -> FoodIdentification:
        """Return candidate food names and search terms for a photo."""
        raw = await self.client.extract(
            model=self.model,
            image_url=_resolve_image(image_url, image_bytes),
            schema_name="food_identification",
            schema=FOOD_IDENTIFICATION_SCHEMA,
            prompt=_with_context(_IDENTIFY_PROMPT, description),
        )
        try:
            return FoodIdentification.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError):
            _logger.warning("Unexpected food identification output: %s", raw)
            return FoodIdentification(
                identified_foods=["Unknown food items"],
                confidence="low",
                search_terms=list(FALLBACK_SEARCH_TERMS),
                notes="AI analysis completed but response format was unexpected",
            )

    async def analyze_meal(
        self,
        *,
        image_url: str | None = None,
        image_bytes: bytes | None = None,
        description: str | None = None,
    ) -> MealAnalysis:
        """Return a nutrition estimate for a meal photo."""
        raw = await self.client.extract(
            model=self.model,
            image_url=_resolve_image(image_url, image_bytes),
            schema_name="meal_analysis",
            schema=MEAL_ANALYSIS_SCHEMA,
            prompt=_with_context(_ANALYZE_PROMPT, description),
        )
        try:
            return MealAnalysis.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError):
            _logger.warning("Unexpected meal analysis output: %s", raw)
            return MealAnalysis(
                estimated_nutrition=EstimatedNutrition(),
                identified_foods=["Unknown food items"],
                portion_size="Unable to estimate",
                confidence="low",
                notes="Analysis could not be completed due to parsing error",
            )


def _with_context(prompt: str, description: str | None) -> str:
    if description:
        return f"{prompt} Additional context: {description}"
    return prompt


def _resolve_image(image_url: str | None, image_bytes: bytes | None) -> str:
    if image_bytes:
        return _to_data_url(image_bytes)
    if image_url:
        return image_url
    raise ValidationError("Missing required field: image_url is required")


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"

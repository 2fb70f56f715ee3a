"""AI meal recommendations."""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from meal_planner.domain.recommendations import MealRecommendation, RecommendationResult

_RATE_LIMITED = 429
_HISTORY_LIMIT = 10

_SYSTEM_PROMPT = (
    "You are a helpful nutritionist and meal planning assistant specialized "
    "in UK cuisine and ingredients."
)

_RECOMMENDATIONS = TypeAdapter(list[MealRecommendation])

FALLBACK_RECOMMENDATIONS = [
    MealRecommendation(
        name="Overnight Oats with Berries",
        type="breakfast",
        description="Creamy oats with fresh berries and nuts",
        prep_time=5,
        cook_time=0,
        servings=1,
        calories=350,
        protein=12,
        carbs=55,
        fat=8,
        ingredients=["rolled oats", "milk", "berries", "honey"],
        tags=["vegetarian", "quick", "healthy"],
        reason="Perfect for busy mornings with balanced nutrition",
    ),
]

ERROR_RECOMMENDATIONS = [
    MealRecommendation(
        name="Quick Veggie Stir Fry",
        type="dinner",
        description="Fresh vegetables in a savory sauce",
        prep_time=10,
        cook_time=15,
        servings=2,
        calories=280,
        protein=8,
        carbs=35,
        fat=12,
        ingredients=["mixed vegetables", "soy sauce", "garlic", "ginger"],
        tags=["vegetarian", "quick", "healthy"],
        reason="Balanced and quick meal option",
    ),
]

_logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """Interface for chat completions."""

    async def complete(self, *, model: str, system: str, prompt: str) -> str:
        """Return the assistant's reply text."""


@dataclass
class RecommendationService:
    """Generates personalised meal suggestions with an LLM."""

    client: ChatClient
    model: str
    max_attempts: int = 3
    backoff_seconds: float = 1.0

    async def recommend(
        self,
        user_id: UUID,
        preferences: dict[str, object] | None = None,
        meal_history: list[dict[str, object]] | None = None,
        nutritional_goals: dict[str, object] | None = None,
    ) -> RecommendationResult:
        """Return three meal suggestions, or fixed fallbacks on failure."""
        _logger.info(
            "Generating meal recommendations", extra={"user_id": str(user_id)}
        )
        prompt = build_prompt(
            preferences or {}, meal_history or [], nutritional_goals or {}
        )
        generated_at = datetime.now(tz=UTC).isoformat()
        try:
            reply = await self._complete_with_retry(prompt)
        except Exception as exc:
            _logger.exception("Meal recommendation request failed")
            return RecommendationResult(
                success=False,
                recommendations=list(ERROR_RECOMMENDATIONS),
                generated_at=generated_at,
                error=str(exc),
            )
        try:
            recommendations = _RECOMMENDATIONS.validate_json(reply)
        except PydanticValidationError:
            _logger.warning("Failed to parse AI response as JSON: %s", reply)
            recommendations = list(FALLBACK_RECOMMENDATIONS)
        return RecommendationResult(
            success=True,
            recommendations=recommendations,
            generated_at=generated_at,
        )

    async def _complete_with_retry(self, prompt: str) -> str:
        """Call the chat model, backing off exponentially when rate limited."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.client.complete(
                    model=self.model, system=_SYSTEM_PROMPT, prompt=prompt
                )
            except Exception as exc:
                if attempt == self.max_attempts:
                    raise
                if _status_code_from_exception(exc) == _RATE_LIMITED:
                    delay = self.backoff_seconds * 2**attempt
                    _logger.info(
                        "Rate limited, retrying in %ss (attempt %s/%s)",
                        delay,
                        attempt,
                        self.max_attempts,
                    )
                    await asyncio.sleep(delay)
                else:
                    _logger.warning("Attempt %s failed, retrying: %s", attempt, exc)
        raise RuntimeError("No recommendation attempts were made")


def build_prompt(
    preferences: dict[str, object],
    meal_history: list[dict[str, object]],
    nutritional_goals: dict[str, object],
) -> str:
    """Render the recommendation prompt from the user's context."""
    return f"""Generate 3 personalized meal recommendations based on the \
following information:

User Preferences: {json.dumps(preferences)}
Recent Meal History: {json.dumps(meal_history[-_HISTORY_LIMIT:])}
Nutritional Goals: {json.dumps(nutritional_goals)}

Requirements:
1. Suggest varied meals (breakfast, lunch, dinner)
2. Consider user's dietary restrictions and preferences
3. Ensure nutritional balance based on their goals
4. Avoid recently eaten meals to provide variety
5. Include UK-available ingredients

Respond with a JSON array of exactly 3 meal suggestions, each containing:
{{"name", "type", "description", "prepTime", "cookTime", "servings",
"calories", "protein", "carbs", "fat", "ingredients", "tags", "reason"}}"""


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract HTTP status code from an exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None

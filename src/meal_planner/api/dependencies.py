"""Request-scoped dependencies shared by the API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header, HTTPException, Request, status

from meal_planner.domain.nutrition import Macros

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer


async def current_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the caller from the bearer token or reject the request."""
    container: AppContainer = request.app.state.container
    user_id = container.auth_service.authenticate(authorization)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def nutrition_goals(
    calories: float = 0.0,
    protein: float = 0.0,
    carbs: float = 0.0,
    fat: float = 0.0,
    fiber: float = 0.0,
    sugar: float = 0.0,
    sodium: float = 0.0,
) -> Macros:
    """Daily targets passed as query parameters; omitted goals are 0."""
    return Macros(
        calories=calories,
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
        fiber_g=fiber,
        sugar_g=sugar,
        sodium_mg=sodium,
    )

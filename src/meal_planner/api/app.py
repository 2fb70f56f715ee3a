"""FastAPI application factory."""

import base64
import binascii
import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from meal_planner.api.admin import router as admin_router
from meal_planner.api.dependencies import current_user, nutrition_goals
from meal_planner.api.schemas import (
    CommentRequest,
    GenerateShoppingListRequest,
    ImportProductRequest,
    MealLogRequest,
    MealPlanEventRequest,
    NutritionLogRequest,
    NutritionPreviewRequest,
    PhotoRequest,
    RateRecipeRequest,
    RecipeRequest,
    RecommendationRequest,
    ShareRecipeRequest,
    ShoppingItemUpdate,
)
from meal_planner.app_logging import configure_logging
from meal_planner.clock import utc_today
from meal_planner.config import parse_allowed_origins
from meal_planner.containers import AppContainer
from meal_planner.domain.nutrition import Macros
from meal_planner.domain.shopping import ShoppingListView
from meal_planner.errors import (
    NotFoundError,
    StoreError,
    UpstreamServiceError,
    ValidationError,
)
from meal_planner.services.nutrition import compute_recipe_nutrition


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    allowed_origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(admin_router)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Data store request failed", extra={"action": exc.action}, exc_info=exc
        )
        return _error_response(
            request.app.state.container,
            exc,
            status.HTTP_502_BAD_GATEWAY,
            "Couldn't reach the database. Please try again.",
        )

    @app.exception_handler(UpstreamServiceError)
    async def upstream_error_handler(
        request: Request, exc: UpstreamServiceError
    ) -> JSONResponse:
        logger.error(
            "Upstream service failed", extra={"service": exc.service}, exc_info=exc
        )
        return _error_response(
            request.app.state.container,
            exc,
            status.HTTP_502_BAD_GATEWAY,
            f"{exc.service} is unavailable right now. Please try again.",
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/recipes/{recipe_id}/nutrition")
    async def recipe_nutrition(
        recipe_id: UUID, request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return total and per-serving nutrition of a saved recipe."""
        state_container: AppContainer = request.app.state.container
        nutrition = state_container.nutrition_service.get_recipe_nutrition(
            user_id, recipe_id
        )
        return {"recipe_id": recipe_id, "nutrition": nutrition}

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def create_recipe(
        body: RecipeRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Save a new recipe with its ingredients."""
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.save_recipe(user_id, body.to_draft())
        return {"recipe": recipe}

    @app.put("/recipes/{recipe_id}")
    async def update_recipe(
        recipe_id: UUID,
        body: RecipeRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Edit a recipe; the submitted ingredients replace the old ones."""
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.save_recipe(
            user_id, body.to_draft(), recipe_id=recipe_id
        )
        return {"recipe": recipe}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(
        body: MealLogRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Log an eaten meal with its photo and nutrition."""
        state_container: AppContainer = request.app.state.container
        logged = state_container.meal_log_service.log_meal(user_id, body.to_draft())
        return {"meal": logged}

    @app.post("/nutrition/preview")
    async def nutrition_preview(
        body: NutritionPreviewRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Compute nutrition for ingredients of a recipe being edited."""
        state_container: AppContainer = request.app.state.container
        ingredients = state_container.food_item_service.resolve_ingredients(
            user_id, [line.model_dump() for line in body.ingredients]
        )
        return {"nutrition": compute_recipe_nutrition(ingredients, body.servings)}

    @app.get("/nutrition/daily")
    async def daily_nutrition(
        request: Request,
        day: date | None = None,
        goals: Macros = Depends(nutrition_goals),
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Return a day's totals and progress towards the given goals."""
        state_container: AppContainer = request.app.state.container
        resolved_day = day or utc_today()
        totals, progress = state_container.nutrition_service.get_daily_progress(
            user_id, resolved_day, goals
        )
        return {"day": resolved_day, "totals": totals, "progress": progress}

    @app.post("/nutrition/logs", status_code=status.HTTP_201_CREATED)
    async def log_nutrition(
        body: NutritionLogRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Record macros eaten on a day."""
        state_container: AppContainer = request.app.state.container
        entry = state_container.nutrition_service.log_entry(
            user_id, body.day, body.to_macros(), body.meal_id
        )
        return {"entry": entry}

    @app.get("/food-items")
    async def list_food_items(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return the caller's food items plus public ones."""
        state_container: AppContainer = request.app.state.container
        food_items = state_container.food_item_service.list_food_items(user_id)
        return {"food_items": food_items}

    @app.post("/food-items/import", status_code=status.HTTP_201_CREATED)
    async def import_food_item(
        body: ImportProductRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Look up a barcode and save the product as a public food item."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.barcode_service.lookup(body.barcode)
        if product is None:
            raise NotFoundError(f"No product found for barcode {body.barcode}")
        food_item = state_container.food_item_service.import_product(user_id, product)
        return {"food_item": food_item}

    @app.get("/food-search", dependencies=[Depends(current_user)])
    async def food_search(q: str, request: Request) -> dict[str, object]:
        """Search Open Food Facts by product name."""
        state_container: AppContainer = request.app.state.container
        products = await state_container.food_search_service.by_name(q)
        return {"products": products}

    @app.get("/achievements")
    async def achievements(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return the caller's achievement board."""
        state_container: AppContainer = request.app.state.container
        return {"board": state_container.achievement_service.load_board(user_id)}

    @app.post("/achievements/check")
    async def check_achievements(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Award every achievement the caller has completed."""
        state_container: AppContainer = request.app.state.container
        return {"board": state_container.achievement_service.refresh(user_id)}

    @app.get("/shopping-lists")
    async def shopping_lists(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return the caller's shopping lists."""
        state_container: AppContainer = request.app.state.container
        return {"lists": state_container.shopping_service.list_lists(user_id)}

    @app.post("/shopping-lists/generate", status_code=status.HTTP_201_CREATED)
    async def generate_shopping_list(
        body: GenerateShoppingListRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Build a shopping list from a meal plan."""
        state_container: AppContainer = request.app.state.container
        list_id = state_container.shopping_service.generate_from_meal_plan(
            user_id, body.meal_plan_id, body.name
        )
        return {"shopping_list_id": list_id}

    @app.patch("/shopping-lists/items/{item_id}")
    async def update_shopping_item(
        item_id: UUID,
        body: ShoppingItemUpdate,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Tick an item off or record what it cost."""
        state_container: AppContainer = request.app.state.container
        item = state_container.shopping_service.update_item(
            user_id,
            item_id,
            is_purchased=body.is_purchased,
            actual_cost=body.actual_cost,
        )
        return {"item": item}

    @app.get("/shopping-lists/{list_id}")
    async def shopping_list_view(
        list_id: UUID, request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return a list's items grouped by category with its total cost."""
        state_container: AppContainer = request.app.state.container
        view = state_container.shopping_service.get_list_view(user_id, list_id)
        return _shopping_view_payload(view)

    @app.get("/meal-plans")
    async def meal_plans(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return the caller's meal plans."""
        state_container: AppContainer = request.app.state.container
        return {"meal_plans": state_container.meal_plan_service.list_plans(user_id)}

    @app.get("/meal-plan/events")
    async def meal_plan_week(
        request: Request,
        week_of: date | None = None,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Return the seven days of a week with their events."""
        state_container: AppContainer = request.app.state.container
        days = state_container.meal_plan_service.get_week(
            user_id, week_of or utc_today()
        )
        return {"days": days}

    @app.post("/meal-plan/events", status_code=status.HTTP_201_CREATED)
    async def create_meal_plan_event(
        body: MealPlanEventRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Add an event to the calendar."""
        state_container: AppContainer = request.app.state.container
        event = state_container.meal_plan_service.save_event(
            user_id, body.model_dump(by_alias=True)
        )
        return {"event": event}

    @app.put("/meal-plan/events/{event_id}")
    async def update_meal_plan_event(
        event_id: UUID,
        body: MealPlanEventRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Edit a calendar event."""
        state_container: AppContainer = request.app.state.container
        event = state_container.meal_plan_service.save_event(
            user_id, body.model_dump(by_alias=True), event_id=event_id
        )
        return {"event": event}

    @app.delete("/meal-plan/events/{event_id}")
    async def delete_meal_plan_event(
        event_id: UUID, request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, str]:
        """Remove a calendar event."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_plan_service.delete_event(user_id, event_id)
        return {"status": "deleted"}

    @app.post("/identify/photo", dependencies=[Depends(current_user)])
    async def identify_photo(body: PhotoRequest, request: Request) -> dict[str, object]:
        """Identify foods in a photo and search for matching products."""
        state_container: AppContainer = request.app.state.container
        identification = await state_container.vision_service.identify_foods(
            image_url=body.image_url,
            image_bytes=_decode_image(body.image_base64),
            description=body.description,
        )
        products = await state_container.food_search_service.search_terms(
            identification.search_terms
        )
        return {"identification": identification, "products": products}

    @app.post("/identify/meal-photo", dependencies=[Depends(current_user)])
    async def analyze_meal_photo(
        body: PhotoRequest, request: Request
    ) -> dict[str, object]:
        """Estimate the nutrition of a plated meal."""
        state_container: AppContainer = request.app.state.container
        analysis = await state_container.vision_service.analyze_meal(
            image_url=body.image_url,
            image_bytes=_decode_image(body.image_base64),
            description=body.description,
        )
        return {"analysis": analysis}

    @app.get("/barcodes/{code}", dependencies=[Depends(current_user)])
    async def barcode_lookup(code: str, request: Request) -> dict[str, object]:
        """Look up a manually entered barcode."""
        state_container: AppContainer = request.app.state.container
        product = await state_container.barcode_service.lookup(code)
        if product is None:
            raise NotFoundError(f"No product found for barcode {code}")
        return {"product": product}

    @app.post("/recommendations")
    async def recommendations(
        body: RecommendationRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Suggest meals based on preferences, history and goals."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.recommendation_service.recommend(
            user_id,
            preferences=body.preferences,
            meal_history=body.meal_history,
            nutritional_goals=body.nutritional_goals,
        )
        return result.model_dump(by_alias=True)

    @app.get("/community/recipes", dependencies=[Depends(current_user)])
    async def community_recipes(request: Request, limit: int = 20) -> dict[str, object]:
        """Return public shared recipes, best rated first."""
        state_container: AppContainer = request.app.state.container
        return {"recipes": state_container.community_service.list_community(limit)}

    @app.get("/community/featured", dependencies=[Depends(current_user)])
    async def community_featured(request: Request) -> dict[str, object]:
        """Return featured shared recipes."""
        state_container: AppContainer = request.app.state.container
        return {"recipes": state_container.community_service.list_featured()}

    @app.get("/community/mine")
    async def community_mine(
        request: Request, user_id: UUID = Depends(current_user)
    ) -> dict[str, object]:
        """Return the recipes the caller has shared."""
        state_container: AppContainer = request.app.state.container
        return {"recipes": state_container.community_service.list_mine(user_id)}

    @app.post("/community/recipes", status_code=status.HTTP_201_CREATED)
    async def share_recipe(
        body: ShareRecipeRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Publish one of the caller's recipes."""
        state_container: AppContainer = request.app.state.container
        shared = state_container.community_service.share_recipe(
            user_id, body.recipe_id
        )
        return {"recipe": shared}

    @app.post("/community/recipes/{shared_recipe_id}/ratings")
    async def rate_recipe(
        shared_recipe_id: UUID,
        body: RateRecipeRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Rate a shared recipe and return its refreshed aggregate."""
        state_container: AppContainer = request.app.state.container
        average, count = state_container.community_service.rate_recipe(
            user_id, shared_recipe_id, body.rating, body.comment
        )
        return {"average_rating": average, "total_ratings": count}

    @app.get(
        "/community/recipes/{shared_recipe_id}/comments",
        dependencies=[Depends(current_user)],
    )
    async def recipe_comments(
        shared_recipe_id: UUID, request: Request
    ) -> dict[str, object]:
        """Return top-level comments on a shared recipe, newest first."""
        state_container: AppContainer = request.app.state.container
        comments = state_container.community_service.list_comments(shared_recipe_id)
        return {"comments": comments}

    @app.post(
        "/community/recipes/{shared_recipe_id}/comments",
        status_code=status.HTTP_201_CREATED,
    )
    async def add_recipe_comment(
        shared_recipe_id: UUID,
        body: CommentRequest,
        request: Request,
        user_id: UUID = Depends(current_user),
    ) -> dict[str, object]:
        """Comment on a shared recipe."""
        state_container: AppContainer = request.app.state.container
        comment = state_container.community_service.add_comment(
            user_id, shared_recipe_id, body.comment
        )
        return {"comment": comment}

    return app


def _error_response(
    state_container: AppContainer, exc: Exception, status_code: int, fallback: str
) -> JSONResponse:
    """Return a user-facing error with debug info in the local environment."""
    content: dict[str, str] = {"detail": fallback}
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            content["debug"] = detail
    return JSONResponse(status_code=status_code, content=content)


def _decode_image(image_base64: str | None) -> bytes | None:
    """Decode a base64 image, accepting an optional data URL prefix."""
    if not image_base64:
        return None
    _, _, encoded = image_base64.rpartition(",")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Image is not valid base64") from exc


def _shopping_view_payload(view: ShoppingListView) -> dict[str, object]:
    return {
        "list_id": view.list_id,
        "total_cost": round(view.total_cost, 2),
        "purchased_count": view.purchased_count,
        "item_count": view.item_count,
        "groups": [
            {
                "name": group.name,
                "sort_order": (
                    None if math.isinf(group.sort_order) else group.sort_order
                ),
                "items": group.items,
            }
            for group in view.groups
        ],
    }

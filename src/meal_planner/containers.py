"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_planner.adapters.openai_chat_client import OpenAIChatClient
from meal_planner.adapters.openai_vision_client import OpenAIVisionClient
from meal_planner.adapters.openfoodfacts_client import HttpxProductClient
from meal_planner.adapters.supabase_achievement_repository import (
    SupabaseAchievementRepository,
)
from meal_planner.adapters.supabase_auth_client import SupabaseAuthClient
from meal_planner.adapters.supabase_community_repository import (
    SupabaseCommunityRepository,
)
from meal_planner.adapters.supabase_food_item_repository import (
    SupabaseFoodItemRepository,
)
from meal_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from meal_planner.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_planner.adapters.supabase_nutrition_log_repository import (
    SupabaseNutritionLogRepository,
)
from meal_planner.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from meal_planner.adapters.supabase_shopping_repository import (
    SupabaseShoppingRepository,
)
from meal_planner.config import Settings
from meal_planner.services.achievements import AchievementService
from meal_planner.services.auth import AuthService
from meal_planner.services.barcodes import BarcodeService
from meal_planner.services.community import CommunityService
from meal_planner.services.food_items import FoodItemService
from meal_planner.services.food_search import FoodSearchService
from meal_planner.services.meals import MealLogService
from meal_planner.services.nutrition import NutritionService
from meal_planner.services.planning import MealPlanService
from meal_planner.services.recipes import RecipeService
from meal_planner.services.recommendations import RecommendationService
from meal_planner.services.shopping import ShoppingService
from meal_planner.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    nutrition_service: NutritionService
    food_item_service: FoodItemService
    recipe_service: RecipeService
    meal_log_service: MealLogService
    achievement_service: AchievementService
    shopping_service: ShoppingService
    meal_plan_service: MealPlanService
    vision_service: VisionService
    food_search_service: FoodSearchService
    barcode_service: BarcodeService
    recommendation_service: RecommendationService
    community_service: CommunityService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    vision_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    chat_client = OpenAIChatClient.create(resolved_settings.openai_api_key)
    product_client = HttpxProductClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    food_search_service = FoodSearchService(product_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    food_item_repository = SupabaseFoodItemRepository(supabase_client)
    nutrition_log_repository = SupabaseNutritionLogRepository(supabase_client)

    async def close_resources() -> None:
        await vision_client.close()
        await chat_client.close()
        await product_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthClient(supabase_client)),
        nutrition_service=NutritionService(
            recipe_repository=recipe_repository,
            log_repository=nutrition_log_repository,
        ),
        food_item_service=FoodItemService(food_item_repository),
        recipe_service=RecipeService(recipe_repository, food_item_repository),
        meal_log_service=MealLogService(
            SupabaseMealRepository(supabase_client), nutrition_log_repository
        ),
        achievement_service=AchievementService(
            SupabaseAchievementRepository(supabase_client),
            cooking_window_days=resolved_settings.cooking_window_days,
        ),
        shopping_service=ShoppingService(SupabaseShoppingRepository(supabase_client)),
        meal_plan_service=MealPlanService(SupabaseMealPlanRepository(supabase_client)),
        vision_service=VisionService(
            client=vision_client, model=resolved_settings.openai_model
        ),
        food_search_service=food_search_service,
        barcode_service=BarcodeService(food_search_service),
        recommendation_service=RecommendationService(
            client=chat_client, model=resolved_settings.openai_recommendation_model
        ),
        community_service=CommunityService(
            SupabaseCommunityRepository(supabase_client)
        ),
        close_resources=close_resources,
    )

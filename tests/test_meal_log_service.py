"""Tests for meal logging."""

from datetime import date
from uuid import UUID, uuid4

import pytest

from meal_planner.domain.meals import MealDraft
from meal_planner.domain.nutrition import Macros
from meal_planner.domain.planning import MealType
from meal_planner.errors import NotFoundError, StoreError, ValidationError
from meal_planner.services.meals import MealLogService
from tests.conftest import InMemoryMealRepository, InMemoryNutritionLogRepository


def _draft(plan_id: UUID, **overrides: object) -> MealDraft:
    values: dict[str, object] = {
        "meal_plan_id": plan_id,
        "day": date(2024, 5, 1),
        "meal_type": MealType.DINNER,
        "meal_name": "Curry",
    }
    values.update(overrides)
    return MealDraft(**values)


def test_log_meal_with_photo_and_macros() -> None:
    user_id, plan_id = uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(user_id, plan_id)})
    logs = InMemoryNutritionLogRepository()
    macros = Macros(calories=650, protein_g=30)

    logged = MealLogService(meals, logs).log_meal(
        user_id,
        _draft(
            plan_id,
            photo_url="https://img.example/curry.jpg",
            photo_description=" ",
            macros=macros,
        ),
    )

    assert logged.meal.meal_type is MealType.DINNER
    assert logged.photo is not None
    assert logged.photo.meal_id == logged.meal.id
    assert meals.photo_payloads[0]["description"] is None
    assert meals.photo_payloads[0]["ai_analyzed_nutrition"]["calories"] == 650
    assert logged.nutrition is not None
    assert logged.nutrition.meal_id == logged.meal.id
    assert logs.list_entries(user_id, date(2024, 5, 1))[0].macros == macros


def test_log_meal_without_photo_or_macros_writes_only_the_meal() -> None:
    user_id, plan_id = uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(user_id, plan_id)})
    logs = InMemoryNutritionLogRepository()

    logged = MealLogService(meals, logs).log_meal(user_id, _draft(plan_id))

    assert logged.photo is None
    assert logged.nutrition is None
    assert list(meals.meals) == [logged.meal.id]
    assert logs.entries == []


def test_meal_in_someone_elses_plan_is_not_found() -> None:
    owner, other, plan_id = uuid4(), uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(owner, plan_id)})

    with pytest.raises(NotFoundError):
        MealLogService(meals, InMemoryNutritionLogRepository()).log_meal(
            other, _draft(plan_id)
        )

    assert meals.meals == {}


def test_meal_with_someone_elses_recipe_is_not_found() -> None:
    user_id, plan_id = uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(user_id, plan_id)})

    with pytest.raises(NotFoundError):
        MealLogService(meals, InMemoryNutritionLogRepository()).log_meal(
            user_id, _draft(plan_id, recipe_id=uuid4())
        )


@pytest.mark.parametrize(
    "overrides", [{"meal_name": "  "}, {"quantity": -1.0}]
)
def test_invalid_meal_is_rejected(overrides: dict[str, object]) -> None:
    user_id, plan_id = uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(user_id, plan_id)})

    with pytest.raises(ValidationError):
        MealLogService(meals, InMemoryNutritionLogRepository()).log_meal(
            user_id, _draft(plan_id, **overrides)
        )

    assert meals.meals == {}


def test_failed_photo_rolls_back_the_meal() -> None:
    user_id, plan_id = uuid4(), uuid4()
    meals = InMemoryMealRepository(meal_plans={(user_id, plan_id)}, fail_photos=True)
    logs = InMemoryNutritionLogRepository()

    with pytest.raises(StoreError):
        MealLogService(meals, logs).log_meal(
            user_id,
            _draft(
                plan_id,
                photo_url="https://img.example/curry.jpg",
                macros=Macros(calories=650),
            ),
        )

    assert meals.meals == {}
    assert meals.photos == {}
    assert logs.entries == []

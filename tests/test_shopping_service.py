"""Tests for shopping list grouping and edits."""

from uuid import UUID, uuid4

import pytest

from meal_planner.domain.shopping import ShoppingCategory, ShoppingListItem
from meal_planner.errors import NotFoundError, ValidationError
from meal_planner.services.shopping import (
    UNCATEGORIZED,
    ShoppingService,
    build_view,
    group_by_category,
    item_cost,
    total_cost,
)
from tests.conftest import InMemoryShoppingRepository

PRODUCE = ShoppingCategory(id=uuid4(), name="Produce", sort_order=1)
DAIRY = ShoppingCategory(id=uuid4(), name="Dairy", sort_order=2)
MISC = ShoppingCategory(id=uuid4(), name="Misc", sort_order=None)


def _item(
    name: str,
    list_id: UUID | None = None,
    category: ShoppingCategory | None = None,
    estimated: float | None = None,
    actual: float | None = None,
    purchased: bool = False,
) -> ShoppingListItem:
    return ShoppingListItem(
        id=uuid4(),
        shopping_list_id=list_id or uuid4(),
        item_name=name,
        category=category,
        estimated_cost=estimated,
        actual_cost=actual,
        is_purchased=purchased,
    )


def test_total_cost_prefers_actual_then_estimate() -> None:
    items = [
        _item("a", actual=2.50),
        _item("b", estimated=1.00, actual=None),
        _item("c"),
    ]

    assert total_cost(items) == pytest.approx(3.50)
    assert [item_cost(item) for item in items] == [2.50, 1.00, 0.0]


def test_total_cost_includes_purchased_items() -> None:
    items = [_item("a", estimated=4.0, purchased=True), _item("b", actual=1.5)]

    assert total_cost(items) == pytest.approx(5.5)


def test_group_by_category_orders_groups_and_keeps_item_order() -> None:
    milk = _item("milk", category=DAIRY)
    apple = _item("apple", category=PRODUCE)
    foil = _item("foil")
    cheese = _item("cheese", category=DAIRY)
    pear = _item("pear", category=PRODUCE)

    groups = group_by_category([milk, apple, foil, cheese, pear])

    assert [group.name for group in groups] == ["Produce", "Dairy", UNCATEGORIZED]
    assert [item.item_name for item in groups[0].items] == ["apple", "pear"]
    assert [item.item_name for item in groups[1].items] == ["milk", "cheese"]
    assert [item.item_name for item in groups[2].items] == ["foil"]


def test_group_by_category_puts_unordered_categories_before_uncategorized() -> None:
    groups = group_by_category(
        [_item("tape"), _item("string", category=MISC), _item("kale", category=PRODUCE)]
    )

    assert [group.name for group in groups] == ["Produce", "Misc", UNCATEGORIZED]


def test_group_by_category_breaks_ties_by_first_appearance() -> None:
    bakery = ShoppingCategory(id=uuid4(), name="Bakery", sort_order=1)

    groups = group_by_category(
        [_item("bread", category=bakery), _item("kale", category=PRODUCE)]
    )

    assert [group.name for group in groups] == ["Bakery", "Produce"]


def test_group_by_category_without_items() -> None:
    assert group_by_category([]) == []


def test_build_view_counts_items() -> None:
    list_id = uuid4()
    items = [
        _item("milk", list_id, DAIRY, estimated=1.2, purchased=True),
        _item("eggs", list_id, DAIRY, estimated=2.0),
    ]

    view = build_view(list_id, items)

    assert view.item_count == 2
    assert view.purchased_count == 1
    assert view.total_cost == pytest.approx(3.2)


def test_toggle_and_cost_update_return_fresh_items() -> None:
    item = _item("milk", category=DAIRY, estimated=1.0)
    repository = InMemoryShoppingRepository(items={item.id: item})
    service = ShoppingService(repository)
    user_id = uuid4()

    toggled = service.toggle_purchased(user_id, item.id, True)
    costed = service.update_item_cost(user_id, item.id, 1.35)

    assert toggled.is_purchased is True
    assert costed.actual_cost == 1.35
    assert repository.updates == [
        (item.id, {"is_purchased": True}),
        (item.id, {"actual_cost": 1.35}),
    ]
    view = service.get_list_view(user_id, item.shopping_list_id)
    assert view.total_cost == pytest.approx(1.35)


def test_update_item_writes_both_columns_at_once() -> None:
    item = _item("milk", category=DAIRY)
    repository = InMemoryShoppingRepository(items={item.id: item})
    service = ShoppingService(repository)

    updated = service.update_item(uuid4(), item.id, is_purchased=True, actual_cost=0.99)

    assert updated.is_purchased is True
    assert updated.actual_cost == 0.99
    assert repository.updates == [
        (item.id, {"is_purchased": True, "actual_cost": 0.99})
    ]


def test_rejected_edit_leaves_item_untouched() -> None:
    item = _item("milk", category=DAIRY)
    repository = InMemoryShoppingRepository(items={item.id: item})
    service = ShoppingService(repository)

    with pytest.raises(ValidationError):
        service.update_item(uuid4(), item.id, is_purchased=True, actual_cost=-1)
    with pytest.raises(ValidationError):
        service.update_item(uuid4(), item.id)

    assert repository.updates == []
    assert repository.items[item.id].is_purchased is False


def test_update_rejects_missing_items_and_negative_costs() -> None:
    service = ShoppingService(InMemoryShoppingRepository())

    with pytest.raises(NotFoundError):
        service.toggle_purchased(uuid4(), uuid4(), True)
    with pytest.raises(ValidationError):
        service.update_item_cost(uuid4(), uuid4(), -1)


def test_generate_requires_a_name() -> None:
    owner, plan_id = uuid4(), uuid4()
    repository = InMemoryShoppingRepository(meal_plans={(owner, plan_id)})
    service = ShoppingService(repository)

    with pytest.raises(ValidationError):
        service.generate_from_meal_plan(owner, plan_id, "   ")

    service.generate_from_meal_plan(owner, plan_id, " Weekly shop ")
    assert repository.generated == [(owner, plan_id, "Weekly shop")]


def test_generate_from_someone_elses_plan_is_not_found() -> None:
    owner, other, plan_id = uuid4(), uuid4(), uuid4()
    repository = InMemoryShoppingRepository(meal_plans={(owner, plan_id)})
    service = ShoppingService(repository)

    with pytest.raises(NotFoundError):
        service.generate_from_meal_plan(other, plan_id, "Weekly shop")

    assert repository.generated == []

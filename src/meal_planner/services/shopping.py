"""Shopping list grouping, cost totals and item updates."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from meal_planner.domain.shopping import (
    CategoryGroup,
    ShoppingCategory,
    ShoppingList,
    ShoppingListItem,
    ShoppingListView,
)
from meal_planner.errors import NotFoundError, ValidationError

UNCATEGORIZED = "Uncategorized"
# Named categories without a sort order go after every ordered one.
_UNORDERED_CATEGORY = math.inf
_UNCATEGORIZED_ORDER = math.inf

_logger = logging.getLogger(__name__)


class ShoppingRepository(Protocol):
    """Persistence interface for shopping lists."""

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return a user's shopping lists, newest first."""

    def list_categories(self) -> list[ShoppingCategory]:
        """Return shopping categories ordered by sort order."""

    def list_items(self, user_id: UUID, list_id: UUID) -> list[ShoppingListItem]:
        """Return items of a list in creation order."""

    def get_item(self, user_id: UUID, item_id: UUID) -> ShoppingListItem | None:
        """Return a single item, if present."""

    def update_item(
        self, user_id: UUID, item_id: UUID, payload: dict[str, object]
    ) -> None:
        """Update columns of an item."""

    def has_meal_plan(self, user_id: UUID, meal_plan_id: UUID) -> bool:
        """Return whether the meal plan belongs to the user."""

    def generate_from_meal_plan(
        self, user_id: UUID, meal_plan_id: UUID, name: str
    ) -> UUID:
        """Generate a list owned by the user and return its id."""


def item_cost(item: ShoppingListItem) -> float:
    """Actual cost when known, otherwise the estimate, otherwise 0."""
    if item.actual_cost is not None:
        return item.actual_cost
    if item.estimated_cost is not None:
        return item.estimated_cost
    return 0.0


def total_cost(items: Iterable[ShoppingListItem]) -> float:
    """Sum the cost of every item, purchased or not."""
    return sum((item_cost(item) for item in items), 0.0)


def group_by_category(items: Iterable[ShoppingListItem]) -> list[CategoryGroup]:
    """Bucket items by category ordered by the category's sort order.

    Items keep their input order inside a bucket. Items without a
    category land in a trailing "Uncategorized" bucket.
    """
    buckets: dict[str, list[ShoppingListItem]] = {}
    orders: dict[str, float] = {}
    uncategorized: list[ShoppingListItem] = []
    for item in items:
        if item.category is None:
            uncategorized.append(item)
            continue
        name = item.category.name
        if name not in buckets:
            buckets[name] = []
            sort_order = item.category.sort_order
            orders[name] = _UNORDERED_CATEGORY if sort_order is None else sort_order
        buckets[name].append(item)

    first_seen = {name: index for index, name in enumerate(buckets)}
    ordered = sorted(buckets, key=lambda name: (orders[name], first_seen[name]))
    groups = [
        CategoryGroup(name=name, sort_order=orders[name], items=buckets[name])
        for name in ordered
    ]
    if uncategorized:
        groups.append(
            CategoryGroup(
                name=UNCATEGORIZED,
                sort_order=_UNCATEGORIZED_ORDER,
                items=uncategorized,
            )
        )
    return groups


def build_view(list_id: UUID, items: list[ShoppingListItem]) -> ShoppingListView:
    """Return the grouped view of a list with its running total."""
    return ShoppingListView(
        list_id=list_id,
        groups=group_by_category(items),
        total_cost=total_cost(items),
        purchased_count=sum(1 for item in items if item.is_purchased),
        item_count=len(items),
    )


@dataclass
class ShoppingService:
    """Application service for shopping list views and edits."""

    repository: ShoppingRepository

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return the user's shopping lists."""
        return self.repository.list_lists(user_id)

    def list_categories(self) -> list[ShoppingCategory]:
        """Return all shopping categories."""
        return self.repository.list_categories()

    def get_list_view(self, user_id: UUID, list_id: UUID) -> ShoppingListView:
        """Fetch a list's items and group them for display."""
        items = self.repository.list_items(user_id, list_id)
        return build_view(list_id, items)

    def update_item(
        self,
        user_id: UUID,
        item_id: UUID,
        *,
        is_purchased: bool | None = None,
        actual_cost: float | None = None,
    ) -> ShoppingListItem:
        """Apply purchase and cost edits in a single write.

        Every edit is validated before anything is stored, so a rejected
        request leaves the item unchanged.
        """
        payload: dict[str, object] = {}
        if is_purchased is not None:
            payload["is_purchased"] = is_purchased
        if actual_cost is not None:
            if actual_cost < 0:
                raise ValidationError("Cost cannot be negative")
            payload["actual_cost"] = actual_cost
        if not payload:
            raise ValidationError("Nothing to update")
        item = self._require_item(user_id, item_id)
        self.repository.update_item(user_id, item_id, payload)
        return replace(item, **payload)

    def toggle_purchased(
        self, user_id: UUID, item_id: UUID, purchased: bool
    ) -> ShoppingListItem:
        """Mark an item purchased or not."""
        return self.update_item(user_id, item_id, is_purchased=purchased)

    def update_item_cost(
        self, user_id: UUID, item_id: UUID, cost: float
    ) -> ShoppingListItem:
        """Record what an item actually cost."""
        return self.update_item(user_id, item_id, actual_cost=cost)

    def generate_from_meal_plan(
        self, user_id: UUID, meal_plan_id: UUID, name: str
    ) -> UUID:
        """Create a shopping list from the ingredients of a meal plan."""
        if not name.strip():
            raise ValidationError("Please select a meal plan and enter a list name")
        if not self.repository.has_meal_plan(user_id, meal_plan_id):
            raise NotFoundError(f"Meal plan {meal_plan_id} not found")
        list_id = self.repository.generate_from_meal_plan(
            user_id, meal_plan_id, name.strip()
        )
        _logger.info(
            "Shopping list generated",
            extra={"user_id": str(user_id), "meal_plan_id": str(meal_plan_id)},
        )
        return list_id

    def _require_item(self, user_id: UUID, item_id: UUID) -> ShoppingListItem:
        item = self.repository.get_item(user_id, item_id)
        if item is None:
            raise NotFoundError(f"Shopping list item {item_id} not found")
        return item

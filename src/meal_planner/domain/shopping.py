"""Domain models for shopping lists."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ShoppingCategory:
    """Display category for shopping list items."""

    id: UUID | None
    name: str
    sort_order: int | None


@dataclass(frozen=True)
class ShoppingListItem:
    """Line on a shopping list."""

    id: UUID
    shopping_list_id: UUID
    item_name: str
    quantity: float | None = None
    unit: str | None = None
    category: ShoppingCategory | None = None
    estimated_cost: float | None = None
    actual_cost: float | None = None
    is_purchased: bool = False


@dataclass(frozen=True)
class ShoppingList:
    """Shopping list header row."""

    id: UUID
    user_id: UUID
    name: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class CategoryGroup:
    """Items of a shopping list that share a category."""

    name: str
    sort_order: float
    items: list[ShoppingListItem] = field(default_factory=list)


@dataclass(frozen=True)
class ShoppingListView:
    """Grouped shopping list with its running cost."""

    list_id: UUID
    groups: list[CategoryGroup]
    total_cost: float
    purchased_count: int
    item_count: int

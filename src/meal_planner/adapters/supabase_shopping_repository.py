"""Supabase repository for shopping lists."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_planner.adapters.supabase_support import (
    optional_float,
    parse_datetime,
    parse_uuid,
    store_call,
)
from meal_planner.domain.shopping import (
    ShoppingCategory,
    ShoppingList,
    ShoppingListItem,
)
from meal_planner.errors import StoreError
from meal_planner.services.shopping import ShoppingRepository

_ITEM_COLUMNS = (
    "id, shopping_list_id, item_name, quantity, unit, category_id, "
    "estimated_cost, actual_cost, is_purchased, "
    "category:shopping_categories(id, name, sort_order)"
)


@dataclass
class SupabaseShoppingRepository(ShoppingRepository):
    """Supabase implementation for shopping lists."""

    client: Client

    def list_lists(self, user_id: UUID) -> list[ShoppingList]:
        """Return a user's shopping lists, newest first."""
        with store_call("load shopping lists"):
            response = (
                self.client.table("shopping_lists")
                .select("id, user_id, name, created_at")
                .eq("user_id", str(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        return [
            ShoppingList(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                name=str(row.get("name", "")),
                created_at=parse_datetime(row.get("created_at")),
            )
            for row in response.data or []
        ]

    def list_categories(self) -> list[ShoppingCategory]:
        """Return categories ordered for display."""
        with store_call("load categories"):
            response = (
                self.client.table("shopping_categories")
                .select("id, name, sort_order")
                .order("sort_order")
                .execute()
            )
        return [_parse_category(row) for row in response.data or []]

    def list_items(self, user_id: UUID, list_id: UUID) -> list[ShoppingListItem]:
        """Return items of a list in creation order."""
        with store_call("load shopping list items"):
            response = (
                self.client.table("shopping_list_items")
                .select(_ITEM_COLUMNS)
                .eq("shopping_list_id", str(list_id))
                .eq("user_id", str(user_id))
                .order("created_at")
                .execute()
            )
        return [_parse_item(row) for row in response.data or []]

    def get_item(self, user_id: UUID, item_id: UUID) -> ShoppingListItem | None:
        """Return an item by id."""
        with store_call("load shopping list item"):
            response = (
                self.client.table("shopping_list_items")
                .select(_ITEM_COLUMNS)
                .eq("id", str(item_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def update_item(
        self, user_id: UUID, item_id: UUID, payload: dict[str, object]
    ) -> None:
        """Update columns of an item."""
        with store_call("update item"):
            self.client.table("shopping_list_items").update(payload).eq(
                "id", str(item_id)
            ).eq("user_id", str(user_id)).execute()

    def has_meal_plan(self, user_id: UUID, meal_plan_id: UUID) -> bool:
        """Return whether the user owns the meal plan."""
        with store_call("load meal plan"):
            response = (
                self.client.table("meal_plans")
                .select("id")
                .eq("id", str(meal_plan_id))
                .eq("user_id", str(user_id))
                .limit(1)
                .execute()
            )
        return bool(response.data)

    def generate_from_meal_plan(
        self, user_id: UUID, meal_plan_id: UUID, name: str
    ) -> UUID:
        """Run the list generation procedure and assign the list to the user.

        The procedure runs with the service key and has no caller identity,
        so the new list and its items are stamped with the owner afterwards.
        """
        with store_call("generate shopping list"):
            response = self.client.rpc(
                "generate_shopping_list_from_meal_plan",
                {
                    "p_meal_plan_id": str(meal_plan_id),
                    "p_shopping_list_name": name,
                },
            ).execute()
        if not response.data:
            raise StoreError(
                "generate shopping list", "Failed to generate shopping list"
            )
        list_id = UUID(str(response.data))
        with store_call("assign shopping list"):
            self.client.table("shopping_lists").update({"user_id": str(user_id)}).eq(
                "id", str(list_id)
            ).execute()
            self.client.table("shopping_list_items").update(
                {"user_id": str(user_id)}
            ).eq("shopping_list_id", str(list_id)).execute()
        return list_id


def _parse_category(row: dict[str, object]) -> ShoppingCategory:
    sort_order = row.get("sort_order")
    return ShoppingCategory(
        id=parse_uuid(row.get("id")),
        name=str(row.get("name", "")),
        sort_order=int(sort_order) if sort_order is not None else None,
    )


def _parse_item(row: dict[str, object]) -> ShoppingListItem:
    category = row.get("category")
    return ShoppingListItem(
        id=UUID(row["id"]),
        shopping_list_id=UUID(row["shopping_list_id"]),
        item_name=str(row.get("item_name", "")),
        quantity=optional_float(row.get("quantity")),
        unit=row.get("unit"),
        category=_parse_category(category) if isinstance(category, dict) else None,
        estimated_cost=optional_float(row.get("estimated_cost")),
        actual_cost=optional_float(row.get("actual_cost")),
        is_purchased=bool(row.get("is_purchased")),
    )

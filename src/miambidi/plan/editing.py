"""Edits applied to a shopping list after generation.

Every edit returns a new ShoppingList and recomputes the stats from the
categories, so counters can never drift from the items they describe.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from miambidi.categories import CATEGORY_INFO
from miambidi.logging_config import get_logger
from miambidi.plan.shopping_list import compute_stats
from miambidi.schemas import ShoppingList, ShoppingListItem

logger = get_logger(__name__)


class UnknownCategoryError(KeyError):
    """Raised when a category is not part of the grocery vocabulary."""


class ShoppingListItemNotFoundError(LookupError):
    """Raised when an item id does not exist in the given category."""


def _check_category(category: str) -> None:
    if category not in CATEGORY_INFO:
        raise UnknownCategoryError(category)


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _with_categories(
    shopping_list: ShoppingList,
    categories: dict[str, list[ShoppingListItem]],
    now: datetime | None,
) -> ShoppingList:
    """Copy the list with new categories, a fresh timestamp and recomputed stats."""
    return shopping_list.model_copy(
        update={
            "categories": categories,
            "last_modified": _now(now),
            "stats": compute_stats(categories),
        }
    )


def _update_item(
    shopping_list: ShoppingList,
    item_id: str,
    category: str,
    changes: Callable[[ShoppingListItem], dict[str, Any]],
    now: datetime | None,
) -> ShoppingList:
    _check_category(category)

    items = list(shopping_list.categories[category])
    for index, item in enumerate(items):
        if item.id == item_id:
            items[index] = item.model_copy(update=changes(item))
            break
    else:
        raise ShoppingListItemNotFoundError(f"Item {item_id} not found in {category}")

    categories = {**shopping_list.categories, category: items}
    return _with_categories(shopping_list, categories, now)


def _completion_changes(
    is_completed: bool, completed_by: str, now: datetime | None
) -> dict[str, Any]:
    return {
        "is_completed": is_completed,
        "completed_by": completed_by if is_completed else None,
        "completed_at": _now(now) if is_completed else None,
    }


def toggle_item_completion(
    shopping_list: ShoppingList,
    item_id: str,
    category: str,
    is_completed: bool,
    completed_by: str = "current-user",
    now: datetime | None = None,
) -> ShoppingList:
    """Mark one item as bought (or not)."""
    changes = _completion_changes(is_completed, completed_by, now)
    return _update_item(shopping_list, item_id, category, lambda _: changes, now)


def toggle_category_completion(
    shopping_list: ShoppingList,
    category: str,
    is_completed: bool,
    completed_by: str = "current-user",
    now: datetime | None = None,
) -> ShoppingList:
    """
    Mark every item of a category as bought (or not).

    Items already in the requested state keep their completedBy and completedAt.
    """
    _check_category(category)

    changes = _completion_changes(is_completed, completed_by, now)
    items = [
        item if item.is_completed == is_completed else item.model_copy(update=changes)
        for item in shopping_list.categories[category]
    ]
    categories = {**shopping_list.categories, category: items}
    return _with_categories(shopping_list, categories, now)


def update_item_notes(
    shopping_list: ShoppingList,
    item_id: str,
    category: str,
    notes: str | None,
    now: datetime | None = None,
) -> ShoppingList:
    """Replace the free-text notes of one item."""
    return _update_item(shopping_list, item_id, category, lambda _: {"notes": notes}, now)


def clear_completed_items(
    shopping_list: ShoppingList,
    now: datetime | None = None,
) -> ShoppingList:
    """Remove completed items from every category."""
    categories = {
        category: [item for item in items if not item.is_completed]
        for category, items in shopping_list.categories.items()
    }
    removed = shopping_list.stats.total_items - sum(len(items) for items in categories.values())
    logger.info(f"Cleared {removed} completed items from {shopping_list.id}")
    return _with_categories(shopping_list, categories, now)


def clear_completed_items_in_category(
    shopping_list: ShoppingList,
    category: str,
    now: datetime | None = None,
) -> ShoppingList:
    """Remove completed items from one category."""
    _check_category(category)

    items = [item for item in shopping_list.categories[category] if not item.is_completed]
    categories = {**shopping_list.categories, category: items}
    return _with_categories(shopping_list, categories, now)


def get_shopping_list_stats(shopping_list: ShoppingList | None) -> dict[str, Any]:
    """Get list statistics plus the number of categories that have items."""
    if shopping_list is None:
        return {
            "totalItems": 0,
            "completedItems": 0,
            "totalRecipes": 0,
            "estimatedCost": None,
            "completionPercentage": 0,
            "categoriesWithItems": 0,
        }

    stats = compute_stats(shopping_list.categories).model_dump(by_alias=True)
    stats["categoriesWithItems"] = sum(1 for items in shopping_list.categories.values() if items)
    return stats

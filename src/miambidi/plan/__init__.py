"""Shopping list generation and editing."""

from miambidi.plan.editing import (
    ShoppingListItemNotFoundError,
    UnknownCategoryError,
    clear_completed_items,
    clear_completed_items_in_category,
    get_shopping_list_stats,
    toggle_category_completion,
    toggle_item_completion,
    update_item_notes,
)
from miambidi.plan.export import export_shopping_list
from miambidi.plan.shopping_list import (
    AggregatedItem,
    ShoppingListGenerator,
    SourcedIngredient,
    aggregate_ingredients,
    compute_stats,
    generate_shopping_list,
)

__all__ = [
    "AggregatedItem",
    "ShoppingListGenerator",
    "ShoppingListItemNotFoundError",
    "SourcedIngredient",
    "UnknownCategoryError",
    "aggregate_ingredients",
    "clear_completed_items",
    "clear_completed_items_in_category",
    "compute_stats",
    "export_shopping_list",
    "generate_shopping_list",
    "get_shopping_list_stats",
    "toggle_category_completion",
    "toggle_item_completion",
    "update_item_notes",
]

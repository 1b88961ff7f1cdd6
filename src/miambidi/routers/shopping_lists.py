"""API routes for shopping list generation and editing."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from pydantic import Field

from miambidi.config import Settings, get_settings
from miambidi.logging_config import get_logger
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
from miambidi.plan.shopping_list import ShoppingListGenerator
from miambidi.schemas import (
    CamelModel,
    GenerationOptions,
    MealSlotKey,
    PlannedMeal,
    RecipeRef,
    ShoppingList,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# =============================================================================
# Request Schemas
# =============================================================================


class MealSlotEntry(CamelModel):
    """One planned meal, addressed by an explicit slot key."""

    slot: MealSlotKey
    recipe: RecipeRef | None = None
    servings: int | None = Field(None, ge=1)


class GenerateShoppingListRequest(CamelModel):
    """Request to generate a shopping list from a meal plan."""

    meal_plan: list[MealSlotEntry] = Field(default_factory=list)
    recipes: list[RecipeRef] = Field(default_factory=list)
    options: GenerationOptions = Field(default_factory=GenerationOptions)

    def to_meal_plan(self) -> dict[MealSlotKey, PlannedMeal]:
        """Key the entries by slot; a repeated slot keeps its last entry."""
        return {
            entry.slot: PlannedMeal(recipe=entry.recipe, servings=entry.servings)
            for entry in self.meal_plan
        }


class ToggleCompletionRequest(CamelModel):
    """Set the completion flag of an item or a whole category."""

    is_completed: bool
    completed_by: str | None = None


class ToggleItemRequest(ToggleCompletionRequest):
    category: str


class ItemNotesRequest(CamelModel):
    category: str
    notes: str | None = None


# =============================================================================
# In-memory List Store
# =============================================================================


class ShoppingListStore:
    """
    Holds the current shopping list and the previously generated ones.

    Lists are never edited in place: every write swaps in a new object.
    """

    def __init__(self) -> None:
        self.current: ShoppingList | None = None
        self.history: list[ShoppingList] = []

    def add(self, shopping_list: ShoppingList) -> None:
        """Make a freshly generated list current and record it, newest first."""
        self.current = shopping_list
        self.history.insert(0, shopping_list)

    def replace(self, shopping_list: ShoppingList) -> None:
        """Swap in an edited version of the current list."""
        self.current = shopping_list
        self.history = [
            shopping_list if existing.id == shopping_list.id else existing
            for existing in self.history
        ]

    def clear(self) -> None:
        self.current = None
        self.history = []


_store = ShoppingListStore()


def get_store() -> ShoppingListStore:
    """Dependency for the shared list store."""
    return _store


StoreDep = Annotated[ShoppingListStore, Depends(get_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


# =============================================================================
# Helper Functions
# =============================================================================


def require_current(store: ShoppingListStore) -> ShoppingList:
    """Get the current list or fail with 404."""
    if store.current is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No shopping list has been generated yet",
        )
    return store.current


def _not_found(e: Exception) -> HTTPException:
    detail = f"Unknown category: {e.args[0]}" if isinstance(e, UnknownCategoryError) else str(e)
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/generate", response_model=ShoppingList, status_code=status.HTTP_201_CREATED)
async def generate_list(
    request: GenerateShoppingListRequest,
    store: StoreDep,
    settings: SettingsDep,
) -> ShoppingList:
    """
    Generate a shopping list from a meal plan and make it the current list.

    Ingredients are scaled to the household size, merged across meals,
    grouped into the ten grocery categories and prioritized by meal date.
    """
    logger.info(f"Generating shopping list from {len(request.meal_plan)} planned meals")

    generator = ShoppingListGenerator(settings)
    try:
        shopping_list = generator.generate(
            request.to_meal_plan(),
            request.recipes,
            request.options,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    store.add(shopping_list)
    return shopping_list


@router.get("/current", response_model=ShoppingList)
async def get_current_list(store: StoreDep) -> ShoppingList:
    """Get the current shopping list."""
    return require_current(store)


@router.get("/history", response_model=list[ShoppingList])
async def get_history(store: StoreDep) -> list[ShoppingList]:
    """Get every generated list, newest first."""
    return store.history


@router.get("/current/stats")
async def get_current_stats(store: StoreDep) -> dict:
    """Get statistics of the current list."""
    return get_shopping_list_stats(store.current)


@router.post("/current/items/{item_id}/toggle", response_model=ShoppingList)
async def toggle_item(
    item_id: str,
    request: ToggleItemRequest,
    store: StoreDep,
    settings: SettingsDep,
) -> ShoppingList:
    """Mark an item as bought or not bought."""
    current = require_current(store)
    try:
        updated = toggle_item_completion(
            current,
            item_id,
            request.category,
            request.is_completed,
            request.completed_by or settings.default_completed_by,
        )
    except (UnknownCategoryError, ShoppingListItemNotFoundError) as e:
        raise _not_found(e) from e

    store.replace(updated)
    return updated


@router.patch("/current/items/{item_id}/notes", response_model=ShoppingList)
async def edit_item_notes(
    item_id: str,
    request: ItemNotesRequest,
    store: StoreDep,
) -> ShoppingList:
    """Replace an item's notes."""
    current = require_current(store)
    try:
        updated = update_item_notes(current, item_id, request.category, request.notes)
    except (UnknownCategoryError, ShoppingListItemNotFoundError) as e:
        raise _not_found(e) from e

    store.replace(updated)
    return updated


@router.post("/current/categories/{category}/toggle", response_model=ShoppingList)
async def toggle_category(
    category: str,
    request: ToggleCompletionRequest,
    store: StoreDep,
    settings: SettingsDep,
) -> ShoppingList:
    """Mark every item of a category as bought or not bought."""
    current = require_current(store)
    try:
        updated = toggle_category_completion(
            current,
            category,
            request.is_completed,
            request.completed_by or settings.default_completed_by,
        )
    except UnknownCategoryError as e:
        raise _not_found(e) from e

    store.replace(updated)
    return updated


@router.delete("/current/completed", response_model=ShoppingList)
async def clear_completed(
    store: StoreDep,
    category: str | None = Query(None, description="Only clear this category"),
) -> ShoppingList:
    """Remove completed items from the whole list or from one category."""
    current = require_current(store)
    try:
        if category is None:
            updated = clear_completed_items(current)
        else:
            updated = clear_completed_items_in_category(current, category)
    except UnknownCategoryError as e:
        raise _not_found(e) from e

    store.replace(updated)
    return updated


@router.get("/current/export", response_class=PlainTextResponse)
async def export_current(
    store: StoreDep,
    format: Literal["text", "json"] = Query("text"),
) -> PlainTextResponse:
    """Export the current list as plain text or JSON."""
    current = require_current(store)
    media_type = "application/json" if format == "json" else "text/plain"
    return PlainTextResponse(export_shopping_list(current, format), media_type=media_type)

"""Input and output contracts of the shopping list engine."""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from miambidi.categories import CATEGORY_NAMES
from miambidi.logging_config import get_logger

logger = get_logger(__name__)

Priority = Literal["high", "medium", "low"]
ListStatus = Literal["draft", "active", "completed", "archived"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the UI and export consumers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Meal Plan Input
# =============================================================================


class Ingredient(CamelModel):
    """Ingredient as declared by a recipe."""

    name: str
    quantity: float = Field(0.0, ge=0)
    unit: str = ""
    category: str | None = None

    @field_validator("unit", mode="before")
    @classmethod
    def _missing_unit_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class RecipeRef(CamelModel):
    """Recipe resolved inside a meal plan entry."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    servings: int | None = None
    ingredients: list[Ingredient] | None = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _drop_malformed_ingredients(cls, value: Any) -> Any:
        """Validate line by line so one bad ingredient never hides the others."""
        if not isinstance(value, list):
            return value

        ingredients = []
        for position, entry in enumerate(value):
            try:
                ingredients.append(Ingredient.model_validate(entry))
            except ValidationError as e:
                logger.debug(f"Skipping ingredient {position}: {e.error_count()} errors")
        return ingredients


class MealSlotKey(CamelModel):
    """Structured key of a meal plan slot."""

    model_config = ConfigDict(frozen=True)

    date: str
    meal_type: str
    slot_id: str | None = None

    @classmethod
    def from_composite(cls, key: str) -> "MealSlotKey":
        """
        Parse a legacy ``<...>-<date>-<mealType>`` key.

        The last two ``-`` segments become ``date`` and ``meal_type``; whatever
        precedes them is kept as ``slot_id``.
        """
        parts = key.split("-")
        if len(parts) < 2:
            return cls(date="", meal_type=key)
        prefix = "-".join(parts[:-2])
        return cls(date=parts[-2], meal_type=parts[-1], slot_id=prefix or None)

    def __str__(self) -> str:
        parts = [self.slot_id] if self.slot_id else []
        return "-".join([*parts, self.date, self.meal_type])


class PlannedMeal(CamelModel):
    """A meal plan entry: the recipe to cook and optional planned servings."""

    recipe: RecipeRef | None = None
    servings: int | None = Field(None, ge=1)


class GenerationOptions(CamelModel):
    """Options for a generation run. Unset values fall back to settings."""

    start_date: date | None = None
    end_date: date | None = None
    family_size: int | None = Field(None, ge=1, le=50)
    title: str | None = None


# =============================================================================
# Shopping List Output
# =============================================================================


class IngredientSource(CamelModel):
    """Where an ingredient line comes from."""

    model_config = ConfigDict(frozen=True)

    recipe_id: str
    recipe_name: str
    meal_key: str
    date: str
    meal_type: str
    original_servings: int | None = None
    planned_servings: int | None = None


class ShoppingListItem(CamelModel):
    """A single row of the shopping list."""

    id: str
    name: str
    quantity: float
    unit: str
    original_quantity: float
    original_unit: str
    category: str
    is_completed: bool = False
    completed_by: str | None = None
    completed_at: datetime | None = None
    recipes: list[str] = Field(default_factory=list)
    recipe_names: list[str] = Field(default_factory=list)
    priority: Priority = "low"
    notes: str | None = None
    estimated_cost: float | None = None
    store: str | None = None
    sources: list[IngredientSource] = Field(default_factory=list)


class ShoppingListStats(CamelModel):
    """Derived counters; always recomputed from the categories."""

    total_items: int = 0
    completed_items: int = 0
    total_recipes: int = 0
    estimated_cost: float | None = None
    completion_percentage: int = 0


class ShoppingList(CamelModel):
    """A generated shopping list, grouped by grocery category."""

    id: str
    title: str
    start_date: date
    end_date: date
    created_at: datetime
    last_modified: datetime
    status: ListStatus = "active"
    categories: dict[str, list[ShoppingListItem]]
    stats: ShoppingListStats = Field(default_factory=ShoppingListStats)

    @field_validator("categories")
    @classmethod
    def _all_categories_present(
        cls, value: dict[str, list[ShoppingListItem]]
    ) -> dict[str, list[ShoppingListItem]]:
        unknown = set(value) - set(CATEGORY_NAMES)
        if unknown:
            raise ValueError(f"Unknown categories: {sorted(unknown)}")
        return {name: value.get(name, []) for name in CATEGORY_NAMES}

    def iter_items(self):
        """Iterate over every item, category by category."""
        for items in self.categories.values():
            yield from items

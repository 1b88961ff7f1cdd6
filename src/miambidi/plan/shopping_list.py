"""Shopping list generation from meal plans."""

import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any

from pydantic import ValidationError

from miambidi.categories import empty_categories, resolve_category
from miambidi.config import Settings, get_settings
from miambidi.logging_config import LoggingContext, get_logger
from miambidi.normalize.names import normalize_ingredient_name
from miambidi.normalize.units import (
    base_family,
    from_base,
    scale_quantity,
    scaling_factor,
    to_base,
)
from miambidi.schemas import (
    GenerationOptions,
    IngredientSource,
    MealSlotKey,
    PlannedMeal,
    Priority,
    ShoppingList,
    ShoppingListItem,
    ShoppingListStats,
)

logger = get_logger(__name__)

MealPlanInput = Mapping[MealSlotKey | str, PlannedMeal | Mapping[str, Any] | None]


@dataclass
class SourcedIngredient:
    """A recipe ingredient tagged with the meal it is needed for."""

    name: str
    quantity: float
    unit: str
    category: str | None
    source: IngredientSource
    original_quantity: float | None = None
    scaling_factor: float | None = None


@dataclass
class AggregatedItem:
    """An ingredient with quantities merged across every meal that needs it."""

    name: str
    normalized_name: str
    quantity: float
    unit: str
    category: str | None
    original_quantity: float
    original_unit: str
    sources: list[IngredientSource] = field(default_factory=list)
    # Unrounded running total in the family base unit, set once merged
    base_value: float | None = None

    @classmethod
    def from_sourced(cls, ingredient: SourcedIngredient) -> "AggregatedItem":
        """Start an aggregate from a single ingredient line."""
        original_quantity = ingredient.original_quantity
        return cls(
            name=ingredient.name,
            normalized_name=normalize_ingredient_name(ingredient.name),
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            category=ingredient.category,
            original_quantity=(
                original_quantity if original_quantity is not None else ingredient.quantity
            ),
            original_unit=ingredient.unit,
            sources=[ingredient.source],
        )


# =============================================================================
# Extraction
# =============================================================================


def _coerce_entry(
    key: MealSlotKey | str,
    entry: PlannedMeal | Mapping[str, Any] | None,
) -> tuple[MealSlotKey, str, PlannedMeal] | None:
    """Validate one plan entry, returning None for entries that have nothing to buy."""
    if entry is None:
        return None

    if isinstance(key, MealSlotKey):
        slot, meal_key = key, str(key)
    else:
        slot, meal_key = MealSlotKey.from_composite(str(key)), str(key)

    try:
        planned = entry if isinstance(entry, PlannedMeal) else PlannedMeal.model_validate(entry)
    except ValidationError as e:
        logger.debug(f"Skipping malformed plan entry {meal_key}: {e.error_count()} errors")
        return None

    if planned.recipe is None or not planned.recipe.ingredients:
        logger.debug(f"Skipping plan entry {meal_key}: no recipe or no ingredients")
        return None

    return slot, meal_key, planned


def extract_ingredients(meal_plan: MealPlanInput) -> list[SourcedIngredient]:
    """
    Flatten a meal plan into ingredient lines tagged with their source meal.

    A recipe planned for three meals yields its ingredients three times.
    Entries without a recipe or without ingredients are skipped.
    """
    extracted: list[SourcedIngredient] = []

    for key, entry in meal_plan.items():
        coerced = _coerce_entry(key, entry)
        if coerced is None:
            continue

        slot, meal_key, planned = coerced
        recipe = planned.recipe
        source = IngredientSource(
            recipe_id=recipe.id,
            recipe_name=recipe.name,
            meal_key=meal_key,
            date=slot.date,
            meal_type=slot.meal_type,
            original_servings=recipe.servings,
            planned_servings=planned.servings,
        )

        for ingredient in recipe.ingredients:
            extracted.append(
                SourcedIngredient(
                    name=ingredient.name,
                    quantity=ingredient.quantity,
                    unit=ingredient.unit,
                    category=ingredient.category,
                    source=source,
                )
            )

    return extracted


# =============================================================================
# Scaling
# =============================================================================


def scale_ingredient(ingredient: SourcedIngredient, factor: float) -> SourcedIngredient:
    """Return a copy of the ingredient with its quantity multiplied by ``factor``."""
    return replace(
        ingredient,
        quantity=scale_quantity(ingredient.quantity, factor),
        original_quantity=ingredient.quantity,
        scaling_factor=factor,
    )


def scale_for_family(
    ingredients: Iterable[SourcedIngredient],
    family_size: int,
    default_servings: int = 4,
) -> list[SourcedIngredient]:
    """
    Scale every ingredient from its recipe's servings to the requested servings.

    A slot's own planned servings win over the household size.
    """
    scaled = []
    for ingredient in ingredients:
        requested = ingredient.source.planned_servings or family_size
        factor = scaling_factor(requested, ingredient.source.original_servings, default_servings)
        scaled.append(scale_ingredient(ingredient, factor))
    return scaled


# =============================================================================
# Aggregation
# =============================================================================


def _merge(existing: AggregatedItem, incoming: SourcedIngredient) -> AggregatedItem:
    """
    Sum two compatible quantities through their base unit.

    The exact base total is carried along so that rounding for display never
    accumulates across merges.
    """
    base_existing = to_base(existing.quantity, existing.unit)
    base_incoming = to_base(incoming.quantity, incoming.unit)
    if existing.base_value is not None:
        total = existing.base_value + base_incoming.value
    else:
        total = base_existing.value + base_incoming.value
    display = from_base(total, base_existing.family)

    return replace(
        existing,
        quantity=display.quantity,
        unit=display.unit,
        original_quantity=display.quantity,
        original_unit=display.unit,
        sources=[*existing.sources, incoming.source],
        base_value=total,
    )


def aggregate_ingredients(ingredients: Iterable[SourcedIngredient]) -> list[AggregatedItem]:
    """
    Merge ingredient lines sharing a normalized name and a unit family.

    The first line seen for a name keeps its spelling and category; later
    lines only add quantity and sources. Lines whose units cannot be summed
    (different families, or unknown units) stay as separate items. A line
    that fails to merge is kept on its own rather than aborting the run.
    """
    # Keys are (normalized name, family) or, for lines that never merge,
    # (normalized name, unit, position). dict keeps first-seen order.
    aggregated: dict[tuple, AggregatedItem] = {}

    for position, ingredient in enumerate(ingredients):
        normalized = normalize_ingredient_name(ingredient.name)
        family = base_family(ingredient.unit)

        if family == "unknown":
            logger.debug(f"Not merging {ingredient.name}: unknown unit '{ingredient.unit}'")
            aggregated[(normalized, ingredient.unit, position)] = AggregatedItem.from_sourced(
                ingredient
            )
            continue

        key = (normalized, family)
        existing = aggregated.get(key)

        if existing is None:
            aggregated[key] = AggregatedItem.from_sourced(ingredient)
            continue

        try:
            aggregated[key] = _merge(existing, ingredient)
        except Exception as e:
            logger.warning(f"Failed to aggregate {ingredient.name} ({ingredient.unit}): {e}")
            aggregated[(normalized, ingredient.unit, position)] = AggregatedItem.from_sourced(
                ingredient
            )

    return list(aggregated.values())


# =============================================================================
# Categorization
# =============================================================================


def categorize_items(items: Iterable[AggregatedItem]) -> dict[str, list[AggregatedItem]]:
    """Group items by their own category; unknown or missing categories go to Autres."""
    categorized: dict[str, list[AggregatedItem]] = empty_categories()
    for item in items:
        categorized[resolve_category(item.category)].append(item)
    return categorized


# =============================================================================
# Enrichment
# =============================================================================


def _parse_meal_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def compute_priority(
    sources: Sequence[IngredientSource],
    today: date,
    urgency_window_days: int = 2,
) -> Priority:
    """
    Rank an item by how soon it is needed.

    - high: a source meal is due within the urgency window (or already past)
    - medium: several meals need the item
    - low: everything else
    """
    for source in sources:
        meal_date = _parse_meal_date(source.date)
        if meal_date is None:
            continue
        if (meal_date - today).days <= urgency_window_days:
            return "high"

    if len(sources) > 1:
        return "medium"
    return "low"


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def new_item_id() -> str:
    """Generate an opaque shopping list item identifier."""
    return f"item-{uuid.uuid4().hex}"


def enrich_items(
    categorized: Mapping[str, list[AggregatedItem]],
    today: date,
    urgency_window_days: int = 2,
) -> dict[str, list[ShoppingListItem]]:
    """Turn aggregated items into shopping list rows with priority and provenance."""
    enriched: dict[str, list[ShoppingListItem]] = empty_categories()

    for category, items in categorized.items():
        for item in items:
            enriched[category].append(
                ShoppingListItem(
                    id=new_item_id(),
                    name=item.name,
                    quantity=item.quantity,
                    unit=item.unit,
                    original_quantity=item.original_quantity,
                    original_unit=item.original_unit,
                    category=category,
                    recipes=_unique(source.recipe_id for source in item.sources),
                    recipe_names=_unique(source.recipe_name for source in item.sources),
                    priority=compute_priority(item.sources, today, urgency_window_days),
                    sources=list(item.sources),
                )
            )

    return enriched


# =============================================================================
# Assembly
# =============================================================================


def compute_stats(categories: Mapping[str, list[ShoppingListItem]]) -> ShoppingListStats:
    """Recompute list statistics from scratch."""
    items = [item for category_items in categories.values() for item in category_items]
    total_items = len(items)
    completed_items = sum(1 for item in items if item.is_completed)
    total_recipes = len({recipe_id for item in items for recipe_id in item.recipes})

    completion_percentage = 0
    if total_items:
        completion_percentage = int(completed_items * 100 / total_items + 0.5)

    return ShoppingListStats(
        total_items=total_items,
        completed_items=completed_items,
        total_recipes=total_recipes,
        completion_percentage=completion_percentage,
    )


def default_title(start_date: date) -> str:
    """Build the fallback list title."""
    return f"Liste de courses - Semaine du {start_date.strftime('%d/%m/%Y')}"


def build_shopping_list(
    categories: dict[str, list[ShoppingListItem]],
    start_date: date,
    end_date: date,
    title: str | None = None,
    now: datetime | None = None,
    list_id: str | None = None,
) -> ShoppingList:
    """Wrap categorized items into the final shopping list record."""
    now = now or datetime.now(timezone.utc)

    return ShoppingList(
        id=list_id or f"shopping-list-{uuid.uuid4()}",
        title=title or default_title(start_date),
        start_date=start_date,
        end_date=end_date,
        created_at=now,
        last_modified=now,
        status="active",
        categories=categories,
        stats=compute_stats(categories),
    )


# =============================================================================
# Generator
# =============================================================================


class ShoppingListGenerator:
    """
    Generates shopping lists from meal plans with:
    - Serving scaling per planned meal
    - Unit normalization (e.g., 500 g + 1 kg -> 1.5 kg)
    - Aggregation of the same ingredient across recipes
    - Category grouping and urgency-based priorities
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def _resolve_options(
        self,
        options: GenerationOptions | Mapping[str, Any] | None,
        today: date,
    ) -> tuple[date, date, int, str | None]:
        if options is None:
            options = GenerationOptions()
        elif not isinstance(options, GenerationOptions):
            options = GenerationOptions.model_validate(options)

        start_date = options.start_date or today
        end_date = options.end_date or start_date + timedelta(
            days=self.settings.default_plan_days
        )
        if end_date < start_date:
            raise ValueError(f"end_date {end_date} is before start_date {start_date}")

        family_size = options.family_size or self.settings.default_family_size
        return start_date, end_date, family_size, options.title

    def generate(
        self,
        meal_plan: MealPlanInput,
        recipes: Sequence[Any],
        options: GenerationOptions | Mapping[str, Any] | None = None,
        today: date | None = None,
    ) -> ShoppingList:
        """
        Generate a shopping list from a meal plan.

        Args:
            meal_plan: Mapping of slot key to planned meal. Keys are
                MealSlotKey instances or legacy "<...>-<date>-<mealType>" strings.
            recipes: The recipe catalog the plan was built from. Plan entries
                already carry their resolved recipe.
            options: Date range, household size and title.
            today: Reference day for priorities. Defaults to the current day.

        Returns:
            A new ShoppingList with all ten categories present.

        Raises:
            ValueError: If the meal plan or the recipe catalog is missing, or
                the date range is inverted.
        """
        if meal_plan is None:
            raise ValueError("meal_plan is required to generate a shopping list")
        if recipes is None:
            raise ValueError("recipe catalog is required to generate a shopping list")

        today = today or date.today()
        start_date, end_date, family_size, title = self._resolve_options(options, today)
        list_id = f"shopping-list-{uuid.uuid4()}"

        with LoggingContext(list_id=list_id, run_id=uuid.uuid4().hex):
            logger.info(
                f"Generating shopping list for {len(meal_plan)} planned slots "
                f"({len(recipes)} recipes in catalog), family_size={family_size}"
            )

            # Step 1: Extract ingredients from every planned meal
            extracted = extract_ingredients(meal_plan)

            # Step 2: Scale once, before any aggregation
            scaled = scale_for_family(
                extracted, family_size, self.settings.default_recipe_servings
            )

            # Step 3: Merge the same ingredient across meals
            aggregated = aggregate_ingredients(scaled)

            # Step 4: Group by grocery category
            categorized = categorize_items(aggregated)

            # Step 5: Priority, ids and provenance
            enriched = enrich_items(categorized, today, self.settings.urgency_window_days)

            # Step 6: Final record
            shopping_list = build_shopping_list(
                enriched, start_date, end_date, title, list_id=list_id
            )

            logger.info(
                f"Generated shopping list: {shopping_list.stats.total_items} items "
                f"from {len(extracted)} ingredient lines, "
                f"{shopping_list.stats.total_recipes} recipes"
            )

        return shopping_list


def generate_shopping_list(
    meal_plan: MealPlanInput,
    recipes: Sequence[Any],
    options: GenerationOptions | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
    today: date | None = None,
) -> ShoppingList:
    """Generate a shopping list with a one-off generator."""
    return ShoppingListGenerator(settings).generate(meal_plan, recipes, options, today=today)

"""Fixed grocery category vocabulary."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class GroceryCategory(str, Enum):
    """Grocery aisles, declared in display order."""

    LEAFY_GREENS = "Légumes-feuilles & Aromates"
    MEAT_FISH = "Viandes & Poissons"
    GRAINS_LEGUMES = "Céréales & Légumineuses"
    TUBERS_PLANTAINS = "Tubercules & Plantains"
    SPICES_PEPPERS = "Épices & Piments"
    OILS_CONDIMENTS = "Huiles & Condiments"
    DAIRY = "Produits laitiers"
    FRUITS = "Fruits"
    DRINKS = "Boissons"
    OTHER = "Autres"


@dataclass(frozen=True)
class CategoryInfo:
    """Display metadata for a grocery category."""

    icon: str
    color: str
    priority: int
    description: str


DEFAULT_CATEGORY = GroceryCategory.OTHER.value

CATEGORY_NAMES: tuple[str, ...] = tuple(category.value for category in GroceryCategory)

CATEGORY_INFO: Mapping[str, CategoryInfo] = MappingProxyType(
    {
        GroceryCategory.LEAFY_GREENS.value: CategoryInfo(
            "🥬", "#4CAF50", 1, "Légumes frais, herbes et aromates"
        ),
        GroceryCategory.MEAT_FISH.value: CategoryInfo(
            "🥩", "#F44336", 2, "Viandes, poissons et fruits de mer"
        ),
        GroceryCategory.GRAINS_LEGUMES.value: CategoryInfo(
            "🌾", "#FF9800", 3, "Riz, haricots, lentilles et céréales"
        ),
        GroceryCategory.TUBERS_PLANTAINS.value: CategoryInfo(
            "🥔", "#8BC34A", 4, "Pommes de terre, ignames, plantains"
        ),
        GroceryCategory.SPICES_PEPPERS.value: CategoryInfo(
            "🌶️", "#E91E63", 5, "Épices, piments et assaisonnements"
        ),
        GroceryCategory.OILS_CONDIMENTS.value: CategoryInfo(
            "🫒", "#FFC107", 6, "Huiles, vinaigres et condiments"
        ),
        GroceryCategory.DAIRY.value: CategoryInfo(
            "🥛", "#2196F3", 7, "Lait, fromages et produits laitiers"
        ),
        GroceryCategory.FRUITS.value: CategoryInfo("🍎", "#4CAF50", 8, "Fruits frais et secs"),
        GroceryCategory.DRINKS.value: CategoryInfo("🥤", "#00BCD4", 9, "Boissons et liquides"),
        GroceryCategory.OTHER.value: CategoryInfo("📦", "#9E9E9E", 10, "Autres produits"),
    }
)


def resolve_category(category: str | None) -> str:
    """Map an ingredient category to its bucket, falling back to the catch-all."""
    if category in CATEGORY_INFO:
        return category
    return DEFAULT_CATEGORY


def empty_categories() -> dict[str, list]:
    """Build a fresh mapping with every category present, in display order."""
    return {name: [] for name in CATEGORY_NAMES}

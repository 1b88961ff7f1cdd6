"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from miambidi.config import Settings
from miambidi.schemas import MealSlotKey, PlannedMeal, RecipeRef

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: marks tests that exercise the HTTP layer")


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings():
    """Settings with the documented defaults, independent of the environment."""
    return Settings(
        _env_file=None,
        default_family_size=4,
        default_recipe_servings=4,
        urgency_window_days=2,
        default_plan_days=7,
    )


@pytest.fixture
def today():
    """Fixed reference day for priority computations."""
    return date(2026, 10, 12)


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def tomato_salad():
    """Recipe A: serves 2, needs 100 g of tomatoes."""
    return RecipeRef.model_validate(
        {
            "id": "recipe-a",
            "name": "Salade de tomates",
            "servings": 2,
            "ingredients": [
                {
                    "name": "tomates",
                    "quantity": 100,
                    "unit": "g",
                    "category": "Légumes-feuilles & Aromates",
                },
            ],
        }
    )


@pytest.fixture
def tomato_sauce():
    """Recipe B: serves 4, needs 1 kg of tomatoes."""
    return RecipeRef.model_validate(
        {
            "id": "recipe-b",
            "name": "Sauce tomate",
            "servings": 4,
            "ingredients": [
                {
                    "name": "Tomates",
                    "quantity": 1,
                    "unit": "kg",
                    "category": "Légumes-feuilles & Aromates",
                },
                {
                    "name": "huile de palme",
                    "quantity": 2,
                    "unit": "cuillère à soupe",
                    "category": "Huiles & Condiments",
                },
            ],
        }
    )


@pytest.fixture
def ndole():
    """Recipe with garlic, ginger and an unknown unit, serving 4."""
    return RecipeRef.model_validate(
        {
            "id": "recipe-ndole",
            "name": "Ndolé",
            "servings": 4,
            "ingredients": [
                {"name": "ail", "quantity": 2, "unit": "gousses", "category": "Épices & Piments"},
                {"name": "gingembre", "quantity": 200, "unit": "g", "category": "Épices & Piments"},
                {
                    "name": "feuilles de ndolé",
                    "quantity": 500,
                    "unit": "g",
                    "category": "Légumes-feuilles & Aromates",
                },
                {
                    "name": "crevettes séchées",
                    "quantity": 1,
                    "unit": "poignée",
                    "category": "Viandes & Poissons",
                },
            ],
        }
    )


@pytest.fixture
def poulet_dg():
    """Recipe with garlic and ginger counted in pieces, serving 4."""
    return RecipeRef.model_validate(
        {
            "id": "recipe-poulet-dg",
            "name": "Poulet DG",
            "servings": 4,
            "ingredients": [
                {"name": "Ail", "quantity": 3, "unit": "pièces", "category": "Épices & Piments"},
                {
                    "name": "gingembre",
                    "quantity": 2,
                    "unit": "pièces",
                    "category": "Épices & Piments",
                },
                {
                    "name": "plantains mûrs",
                    "quantity": 4,
                    "unit": "pièces",
                    "category": "Tubercules & Plantains",
                },
                {
                    "name": "crevettes séchées",
                    "quantity": 1,
                    "unit": "poignée",
                    "category": "Viandes & Poissons",
                },
                {"name": "bouillon", "quantity": 1, "unit": "cube", "category": "Assaisonnements"},
            ],
        }
    )


@pytest.fixture
def make_slot():
    """Build a structured slot key."""

    def _make(day: str, meal_type: str = "Dîner", slot_id: str | None = None) -> MealSlotKey:
        return MealSlotKey(date=day, meal_type=meal_type, slot_id=slot_id)

    return _make


@pytest.fixture
def tomato_plan(tomato_salad, tomato_sauce, make_slot):
    """Recipe A and recipe B, each planned once, far from the reference day."""
    return {
        make_slot("2026-10-20", "Déjeuner"): PlannedMeal(recipe=tomato_salad),
        make_slot("2026-10-21", "Dîner"): PlannedMeal(recipe=tomato_sauce),
    }

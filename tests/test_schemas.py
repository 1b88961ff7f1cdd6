"""Tests for the input and output schemas."""

import pytest
from pydantic import ValidationError

from miambidi.categories import CATEGORY_NAMES
from miambidi.schemas import GenerationOptions, Ingredient, MealSlotKey, RecipeRef, ShoppingList


class TestMealSlotKey:
    """Tests for MealSlotKey."""

    def test_from_composite(self):
        """Test that the last two segments are date and meal type."""
        key = MealSlotKey.from_composite("semaine-42-20261020-Dîner")

        assert key.date == "20261020"
        assert key.meal_type == "Dîner"
        assert key.slot_id == "semaine-42"

    def test_from_composite_without_prefix(self):
        key = MealSlotKey.from_composite("20261020-Déjeuner")

        assert key.date == "20261020"
        assert key.slot_id is None

    def test_iso_dates_are_split(self):
        """Test the known limitation of hyphenated dates in composite keys."""
        key = MealSlotKey.from_composite("2026-10-20-Dîner")

        assert key.date == "20"
        assert key.slot_id == "2026-10"

    def test_hashable_and_round_trips_to_string(self):
        """Test that keys can index a plan and render as composite strings."""
        key = MealSlotKey(date="2026-10-20", meal_type="Dîner", slot_id="plan")

        assert {key: 1}[MealSlotKey(date="2026-10-20", meal_type="Dîner", slot_id="plan")] == 1
        assert str(key) == "plan-2026-10-20-Dîner"

    def test_camel_case_input(self):
        key = MealSlotKey.model_validate({"date": "2026-10-20", "mealType": "Dîner", "slotId": "x"})
        assert key.meal_type == "Dîner"


class TestInputValidation:
    """Tests for input models."""

    def test_negative_quantity_rejected(self):
        """Test that ingredient quantities are non-negative."""
        with pytest.raises(ValidationError):
            Ingredient(name="sel", quantity=-1)

    def test_malformed_ingredient_only_drops_its_line(self):
        """Test that a bad line is skipped and its siblings are kept."""
        recipe = RecipeRef.model_validate(
            {
                "id": "r",
                "name": "r",
                "ingredients": [
                    {"name": "sel", "quantity": -1},
                    {"name": "ail", "quantity": 2, "unit": "gousses"},
                    None,
                ],
            }
        )

        assert [ingredient.name for ingredient in recipe.ingredients] == ["ail"]

    def test_null_unit_is_empty(self):
        """Test that a missing unit is read as an unknown unit."""
        ingredient = Ingredient.model_validate({"name": "sel", "quantity": 1, "unit": None})
        assert ingredient.unit == ""

    def test_numeric_recipe_id(self):
        """Test that integer recipe ids are accepted as strings."""
        recipe = RecipeRef.model_validate({"id": 7, "name": "Eru", "ingredients": []})
        assert recipe.id == "7"

    def test_family_size_positive(self):
        with pytest.raises(ValidationError):
            GenerationOptions(family_size=0)


class TestShoppingListCategories:
    """Tests for the category invariant of ShoppingList."""

    def _list(self, categories):
        return ShoppingList(
            id="shopping-list-1",
            title="Liste",
            start_date="2026-10-12",
            end_date="2026-10-19",
            created_at="2026-10-12T10:00:00Z",
            last_modified="2026-10-12T10:00:00Z",
            categories=categories,
        )

    def test_missing_categories_filled(self):
        """Test that omitted categories are present as empty lists, in display order."""
        shopping_list = self._list({"Fruits": []})
        assert list(shopping_list.categories) == list(CATEGORY_NAMES)

    def test_unknown_category_rejected(self):
        """Test that extra categories are refused."""
        with pytest.raises(ValidationError):
            self._list({"Surgelés": []})

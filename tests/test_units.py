"""Unit tests for unit classification, conversion and scaling."""

import pytest

from miambidi.normalize.units import (
    base_family,
    can_aggregate,
    classify,
    format_quantity_unit,
    from_base,
    round_half_up,
    scale_quantity,
    scaling_factor,
    to_base,
)

# =============================================================================
# Classification
# =============================================================================


class TestClassify:
    """Tests for classify function."""

    @pytest.mark.parametrize("unit", ["g", "kg", "mg", "KG", " g "])
    def test_weight_units(self, unit):
        """Test that metric weights are weight."""
        assert classify(unit) == "weight"

    @pytest.mark.parametrize("unit", ["ml", "L", "l", "cl", "dl"])
    def test_volume_units(self, unit):
        """Test that metric volumes are volume, whatever the case."""
        assert classify(unit) == "volume"

    @pytest.mark.parametrize(
        "unit", ["cuillère à café", "cuillère à soupe", "tasse", "verre", "Cuillère à Soupe"]
    )
    def test_spoon_units(self, unit):
        """Test that spoon and cup measures form their own family."""
        assert classify(unit) == "spoon"

    @pytest.mark.parametrize(
        "unit",
        ["pièce", "pièces", "gousse", "gousses", "morceau", "morceaux", "tranche", "tranches"],
    )
    def test_count_units(self, unit):
        """Test that countable units are count."""
        assert classify(unit) == "count"

    @pytest.mark.parametrize("unit", ["poignée", "kilo", "cuillere a soupe", "", None, "pincée"])
    def test_unknown_units(self, unit):
        """Test that anything outside the tables is unknown, with no fuzzy matching."""
        assert classify(unit) == "unknown"

    def test_spoon_converts_through_volume(self):
        """Test that spoon measures share the volume base family."""
        assert base_family("tasse") == "volume"
        assert base_family("ml") == "volume"


class TestCanAggregate:
    """Tests for can_aggregate function."""

    def test_same_family(self):
        """Test that units of one family aggregate."""
        assert can_aggregate("g", "kg")
        assert can_aggregate("gousses", "pièce")

    def test_spoon_and_volume(self):
        """Test that spoons and plain volumes aggregate."""
        assert can_aggregate("cuillère à soupe", "ml")
        assert can_aggregate("L", "verre")

    def test_different_families(self):
        """Test that different families never aggregate."""
        assert not can_aggregate("g", "pièces")
        assert not can_aggregate("ml", "kg")

    def test_unknown_units_never_aggregate(self):
        """Test that identical unknown units still do not aggregate."""
        assert not can_aggregate("poignée", "poignée")
        assert not can_aggregate("poignée", "g")


# =============================================================================
# Conversion
# =============================================================================


class TestToBase:
    """Tests for to_base function."""

    def test_kilograms(self):
        """Test converting kilograms to grams."""
        result = to_base(1.5, "kg")
        assert result.value == 1500.0
        assert result.base_unit == "g"
        assert result.family == "weight"

    def test_milligrams(self):
        """Test converting milligrams to grams."""
        assert to_base(500, "mg").value == pytest.approx(0.5)

    @pytest.mark.parametrize(
        ("quantity", "unit", "expected"),
        [
            (1, "L", 1000.0),
            (2, "cl", 20.0),
            (3, "dl", 300.0),
            (1, "cuillère à café", 5.0),
            (2, "cuillère à soupe", 30.0),
            (1, "tasse", 250.0),
            (1, "verre", 200.0),
        ],
    )
    def test_volumes_and_spoons(self, quantity, unit, expected):
        """Test converting volumes and spoon measures to ml."""
        result = to_base(quantity, unit)
        assert result.value == pytest.approx(expected)
        assert result.base_unit == "ml"
        assert result.family == "volume"

    def test_count_passthrough(self):
        """Test that counts keep their value with pièces as base unit."""
        result = to_base(3, "gousses")
        assert result.value == 3
        assert result.base_unit == "pièces"
        assert result.family == "count"

    def test_unknown_passthrough(self):
        """Test that unknown units keep their value and unit string."""
        result = to_base(2, "poignée")
        assert result.value == 2
        assert result.base_unit == "poignée"
        assert result.family == "unknown"


class TestFromBase:
    """Tests for from_base function."""

    def test_grams_below_threshold(self):
        """Test that weights under 1000 g stay in grams with one decimal."""
        result = from_base(333.333, "weight")
        assert result.quantity == 333.3
        assert result.unit == "g"

    def test_kilograms_at_threshold(self):
        """Test that 1000 g switches to kilograms."""
        result = from_base(1000, "weight")
        assert result.quantity == 1
        assert result.unit == "kg"

    def test_kilograms_two_decimals(self):
        """Test that kilograms keep two decimals."""
        result = from_base(1234.5, "weight")
        assert result.quantity == 1.23
        assert result.unit == "kg"

    def test_liters(self):
        """Test that large volumes are expressed in liters."""
        result = from_base(1500, "volume")
        assert result.quantity == 1.5
        assert result.unit == "L"

    def test_milliliters(self):
        """Test that small volumes stay in ml."""
        result = from_base(45, "volume")
        assert result.quantity == 45
        assert result.unit == "ml"

    def test_count_plural(self):
        """Test that counts above one are pluralized."""
        result = from_base(5, "count")
        assert result.quantity == 5
        assert result.unit == "pièces"

    def test_count_singular_after_rounding(self):
        """Test that counts round to whole pieces before choosing the label."""
        result = from_base(1.2, "count")
        assert result.quantity == 1
        assert result.unit == "pièce"

    def test_rounding_goes_half_up(self):
        """Test that halves round up rather than to even."""
        assert from_base(2.5, "count").quantity == 3
        assert round_half_up(0.25, 1) == 0.3


class TestUnitFamilyClosure:
    """Summing through the base unit matches the displayed total."""

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ((250, "g"), (1.5, "kg")),
            ((2, "cuillère à soupe"), (100, "ml")),
            ((0.5, "L"), (30, "cl")),
            ((1, "tasse"), (1, "verre")),
            ((2, "gousses"), (3, "pièces")),
            ((500, "mg"), (2, "g")),
        ],
    )
    def test_merge_preserves_total(self, first, second):
        """Test that the base value of the merged quantity equals the sum."""
        base1 = to_base(*first)
        base2 = to_base(*second)
        merged = from_base(base1.value + base2.value, base1.family)

        assert to_base(merged.quantity, merged.unit).value == pytest.approx(
            base1.value + base2.value, abs=0.01
        )


# =============================================================================
# Scaling and Display
# =============================================================================


class TestScaling:
    """Tests for scaling helpers."""

    def test_factor_from_servings(self):
        """Test the requested / native servings ratio."""
        assert scaling_factor(4, 2) == 2.0
        assert scaling_factor(2, 4) == 0.5

    def test_factor_defaults_to_four_servings(self):
        """Test that recipes without servings are assumed to serve four."""
        assert scaling_factor(6, None) == 1.5
        assert scaling_factor(6, 0) == 1.5
        assert scaling_factor(6, None, default_servings=3) == 2.0

    def test_scale_identity(self):
        """Test that a factor of one keeps the quantity."""
        assert scale_quantity(123.45, 1) == 123.45

    def test_scale_double(self):
        """Test that a factor of two doubles the quantity."""
        assert scale_quantity(1.5, 2) == pytest.approx(3.0)

    def test_scale_rounds_to_two_decimals(self):
        """Test that scaled quantities keep two decimals."""
        assert scale_quantity(1, 1 / 3) == 0.33

    def test_negative_factor_rejected(self):
        """Test that scaling never produces negative quantities."""
        with pytest.raises(ValueError):
            scale_quantity(1, -1)
        with pytest.raises(ValueError):
            scaling_factor(-2, 4)


class TestFormatQuantityUnit:
    """Tests for format_quantity_unit function."""

    def test_integer(self):
        assert format_quantity_unit(2.0, "kg") == "2 kg"

    def test_decimal(self):
        assert format_quantity_unit(1.25, "kg") == "1.2 kg"

    def test_pluralize_piece(self):
        assert format_quantity_unit(3, "pièce") == "3 pièces"
        assert format_quantity_unit(1, "pièce") == "1 pièce"

    def test_no_unit(self):
        assert format_quantity_unit(2, "") == "2"

"""Unit classification, conversion and quantity scaling for French cooking measures."""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

UnitFamily = Literal["weight", "volume", "spoon", "count", "unknown"]
BaseFamily = Literal["weight", "volume", "count", "unknown"]


# =============================================================================
# Unit Conversion Tables
# =============================================================================
# Keys are lowercase; lookups fold the incoming unit to lowercase first.

# Weight conversions (base unit: g)
WEIGHT_UNITS: Mapping[str, float] = MappingProxyType(
    {
        "g": 1.0,
        "kg": 1000.0,
        "mg": 0.001,
    }
)

# Volume conversions (base unit: ml)
VOLUME_UNITS: Mapping[str, float] = MappingProxyType(
    {
        "ml": 1.0,
        "l": 1000.0,
        "cl": 10.0,
        "dl": 100.0,
    }
)

# Spoon and cup measures, converted through ml like volume
SPOON_UNITS: Mapping[str, float] = MappingProxyType(
    {
        "cuillère à café": 5.0,
        "cuillère à soupe": 15.0,
        "tasse": 250.0,
        "verre": 200.0,
    }
)

# Count-based units (no conversion, base unit: pièces)
COUNT_UNITS: Mapping[str, float] = MappingProxyType(
    {
        "pièce": 1.0,
        "pièces": 1.0,
        "gousse": 1.0,
        "gousses": 1.0,
        "morceau": 1.0,
        "morceaux": 1.0,
        "tranche": 1.0,
        "tranches": 1.0,
    }
)

BASE_UNITS: Mapping[str, str] = MappingProxyType(
    {
        "weight": "g",
        "volume": "ml",
        "count": "pièces",
    }
)

_FAMILY_TABLES: tuple[tuple[UnitFamily, Mapping[str, float]], ...] = (
    ("weight", WEIGHT_UNITS),
    ("volume", VOLUME_UNITS),
    ("spoon", SPOON_UNITS),
    ("count", COUNT_UNITS),
)

# Spoon measures aggregate with plain volumes
_BASE_FAMILY: Mapping[str, BaseFamily] = MappingProxyType(
    {
        "weight": "weight",
        "volume": "volume",
        "spoon": "volume",
        "count": "count",
        "unknown": "unknown",
    }
)


@dataclass(frozen=True)
class BaseQuantity:
    """A quantity expressed in the base unit of its family."""

    value: float
    base_unit: str
    family: BaseFamily


@dataclass(frozen=True)
class DisplayQuantity:
    """A quantity expressed in the most readable unit of its family."""

    quantity: float
    unit: str


# =============================================================================
# Classification and Conversion
# =============================================================================


def _fold(unit: str | None) -> str:
    return (unit or "").lower().strip()


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a cash register: halves always go up."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def classify(unit: str | None) -> UnitFamily:
    """
    Classify a unit string into its unit family.

    Lookup is case-insensitive and exact: "Kg" is weight, "kilo" is unknown.
    """
    folded = _fold(unit)
    for family, table in _FAMILY_TABLES:
        if folded in table:
            return family
    return "unknown"


def base_family(unit: str | None) -> BaseFamily:
    """Get the family a unit converts through (spoon measures become volume)."""
    return _BASE_FAMILY[classify(unit)]


def can_aggregate(unit1: str | None, unit2: str | None) -> bool:
    """
    Check if two units can be summed together.

    Both units must resolve to the same known base family. Two unknown units
    never aggregate, even when the strings are identical.
    """
    family1 = base_family(unit1)
    return family1 != "unknown" and family1 == base_family(unit2)


def to_base(quantity: float, unit: str | None) -> BaseQuantity:
    """Convert a quantity to the base unit of its family."""
    family = classify(unit)
    folded = _fold(unit)

    if family == "weight":
        return BaseQuantity(quantity * WEIGHT_UNITS[folded], "g", "weight")
    if family == "volume":
        return BaseQuantity(quantity * VOLUME_UNITS[folded], "ml", "volume")
    if family == "spoon":
        return BaseQuantity(quantity * SPOON_UNITS[folded], "ml", "volume")
    if family == "count":
        return BaseQuantity(quantity, "pièces", "count")

    # Unknown units pass through untouched
    return BaseQuantity(quantity, unit or "", "unknown")


def from_base(value: float, family: str) -> DisplayQuantity:
    """
    Convert a base-unit value to the most readable unit of its family.

    Values of 1000 g / 1000 ml and above switch to kg / L with two decimals;
    smaller values keep g / ml with one decimal. Counts round to whole pieces.
    """
    if family == "weight":
        if value >= 1000:
            return DisplayQuantity(round_half_up(value / 1000, 2), "kg")
        return DisplayQuantity(round_half_up(value, 1), "g")

    if family == "volume":
        if value >= 1000:
            return DisplayQuantity(round_half_up(value / 1000, 2), "L")
        return DisplayQuantity(round_half_up(value, 1), "ml")

    if family == "count":
        quantity = round_half_up(value)
        return DisplayQuantity(quantity, "pièces" if quantity > 1 else "pièce")

    return DisplayQuantity(value, "unité")


# =============================================================================
# Scaling and Display
# =============================================================================


def scaling_factor(
    requested_servings: float,
    native_servings: float | None,
    default_servings: int = 4,
) -> float:
    """
    Compute the multiplier that adapts a recipe to the requested servings.

    Recipes declaring no (or non-positive) servings are assumed to serve
    ``default_servings``.
    """
    if requested_servings < 0:
        raise ValueError(f"requested servings must be non-negative, got {requested_servings}")
    native = native_servings if native_servings and native_servings > 0 else default_servings
    return requested_servings / native


def scale_quantity(quantity: float, factor: float) -> float:
    """Multiply a quantity by a scaling factor, rounded to two decimals."""
    if factor < 0:
        raise ValueError(f"scaling factor must be non-negative, got {factor}")
    return round_half_up(quantity * factor, 2)


def format_quantity_unit(quantity: float, unit: str) -> str:
    """Format a quantity and unit for display, e.g. "1.5 kg" or "3 pièces"."""
    if float(quantity).is_integer():
        formatted_quantity = str(int(quantity))
    else:
        formatted_quantity = f"{quantity:.1f}"

    formatted_unit = "pièces" if quantity > 1 and unit == "pièce" else unit

    return f"{formatted_quantity} {formatted_unit}".strip()

"""Normalize units, quantities and ingredient names."""

from miambidi.normalize.names import normalize_ingredient_name
from miambidi.normalize.units import (
    BaseQuantity,
    DisplayQuantity,
    base_family,
    can_aggregate,
    classify,
    format_quantity_unit,
    from_base,
    scale_quantity,
    scaling_factor,
    to_base,
)

__all__ = [
    "BaseQuantity",
    "DisplayQuantity",
    "base_family",
    "can_aggregate",
    "classify",
    "format_quantity_unit",
    "from_base",
    "normalize_ingredient_name",
    "scale_quantity",
    "scaling_factor",
    "to_base",
]

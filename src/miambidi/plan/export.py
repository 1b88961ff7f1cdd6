"""Export a shopping list for sharing or printing."""

from typing import Literal

from miambidi.categories import CATEGORY_INFO, DEFAULT_CATEGORY
from miambidi.normalize.units import format_quantity_unit
from miambidi.schemas import ShoppingList

ExportFormat = Literal["text", "json"]


def to_json(shopping_list: ShoppingList) -> str:
    """Serialize a list to the camelCase JSON document consumed by the UI."""
    return shopping_list.model_dump_json(by_alias=True, indent=2)


def to_text(shopping_list: ShoppingList) -> str:
    """Render a list as plain text, skipping empty categories."""
    lines = [
        shopping_list.title,
        f"Généré le {shopping_list.created_at.strftime('%d/%m/%Y')}",
        "",
    ]

    for category, items in shopping_list.categories.items():
        if not items:
            continue

        icon = CATEGORY_INFO.get(category, CATEGORY_INFO[DEFAULT_CATEGORY]).icon
        lines.append(f"{icon} {category.upper()}")

        for item in items:
            status = "✅" if item.is_completed else "⬜"
            line = f"{status} {format_quantity_unit(item.quantity, item.unit)} {item.name}"
            if item.notes:
                line += f" ({item.notes})"
            lines.append(line)
        lines.append("")

    return "\n".join(lines)


def export_shopping_list(shopping_list: ShoppingList, format: ExportFormat = "text") -> str:
    """Export a list in the requested format."""
    if format == "json":
        return to_json(shopping_list)
    if format == "text":
        return to_text(shopping_list)
    raise ValueError(f"Unsupported export format: {format}")

"""API routers for the miambidi application."""

from miambidi.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "shopping_lists_router",
]

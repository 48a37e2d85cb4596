"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep src/main.py from building a live application at import time
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402

from cafe_menu_service.models.menu_models import MenuItem, MenuSnapshot, MenuSource  # noqa: E402


@pytest.fixture
def sample_items() -> list[MenuItem]:
    """Fixture providing a small two-category menu."""
    return [
        MenuItem(name="Latte", description="Espresso with steamed milk", price="$4.50", category="COFFEE"),
        MenuItem(name="Cold Brew", description="Steeped overnight", price="$4.75", category="COFFEE"),
        MenuItem(name="Green Tea", description="", price="$2.50", category="TEA"),
    ]


@pytest.fixture
def sample_snapshot(sample_items: list[MenuItem]) -> MenuSnapshot:
    """Fixture providing a snapshot built from sample_items."""
    return MenuSnapshot.from_items(sample_items, source=MenuSource.RENDERED_PAGE)


@pytest.fixture
def espresso_html() -> str:
    """Fixture providing the smallest server-rendered menu page."""
    return (
        "<html><body>"
        '<div class="menu-item"><h3 class="name">Espresso</h3><span class="price">$3.50</span></div>'
        "</body></html>"
    )

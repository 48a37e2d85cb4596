"""Unit tests for menu data models."""

import pytest
from pydantic import ValidationError

from cafe_menu_service.models.menu_models import (
    DEFAULT_CATEGORY,
    PRICE_NOT_AVAILABLE,
    MenuItem,
    MenuSnapshot,
    MenuSource,
    distinct_categories,
)


@pytest.mark.unit
class TestMenuItem:
    """Test suite for MenuItem."""

    def test_defaults(self) -> None:
        """Test that description, price and category fall back to defaults."""
        item = MenuItem(name="Espresso")

        assert item.description == ""
        assert item.price == PRICE_NOT_AVAILABLE
        assert item.category == DEFAULT_CATEGORY

    def test_empty_name_rejected(self) -> None:
        """Test that an item must have a name."""
        with pytest.raises(ValidationError):
            MenuItem(name="")

    def test_empty_category_rejected(self) -> None:
        """Test that an item must have a category."""
        with pytest.raises(ValidationError):
            MenuItem(name="Espresso", category="")

    def test_item_is_immutable(self) -> None:
        """Test that items cannot be modified after construction."""
        item = MenuItem(name="Espresso", price="$3.50")

        with pytest.raises(ValidationError):
            item.price = "$4.00"  # type: ignore[misc]

    def test_dedup_key(self) -> None:
        """Test that identity is the (name, category) pair."""
        item = MenuItem(name="Latte", price="$4.50", category="COFFEE")

        assert item.dedup_key == ("Latte", "COFFEE")


@pytest.mark.unit
class TestMenuSnapshot:
    """Test suite for MenuSnapshot."""

    def test_from_items_derives_categories_in_first_seen_order(
        self, sample_items: list[MenuItem]
    ) -> None:
        """Test that categories are the distinct item categories, first seen first."""
        snapshot = MenuSnapshot.from_items(sample_items, source=MenuSource.STATIC_PAGE)

        assert snapshot.categories == ["COFFEE", "TEA"]
        assert snapshot.item_count == 3
        assert snapshot.source == MenuSource.STATIC_PAGE
        assert snapshot.cached is False
        assert snapshot.stale is False
        assert snapshot.cache_timestamp is None

    def test_mismatched_categories_rejected(self, sample_items: list[MenuItem]) -> None:
        """Test that categories listing a value no item has is invalid."""
        with pytest.raises(ValidationError):
            MenuSnapshot(items=sample_items, categories=["COFFEE", "TEA", "PASTRY"])

    def test_missing_category_rejected(self, sample_items: list[MenuItem]) -> None:
        """Test that categories omitting an item's category is invalid."""
        with pytest.raises(ValidationError):
            MenuSnapshot(items=sample_items, categories=["COFFEE"])

    def test_serializes_with_camel_case_keys(self, sample_snapshot: MenuSnapshot) -> None:
        """Test that snapshots dump with camelCase aliases."""
        data = sample_snapshot.model_dump(mode="json", by_alias=True)

        assert "lastUpdated" in data
        assert "cacheTimestamp" in data
        assert data["source"] == "rendered-page"

    def test_distinct_categories_empty(self) -> None:
        """Test that no items means no categories."""
        assert distinct_categories([]) == []

"""Menu data models.

These models represent the normalized menu produced by the acquisition pipeline.
Items are immutable once built; a snapshot always derives its category list from
its items so the two can never drift apart.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PRICE_NOT_AVAILABLE = "price not available"
DEFAULT_CATEGORY = "General"


class MenuSource(str, Enum):
    """Acquisition stage that produced a snapshot."""

    STRUCTURED_ENDPOINT = "structured-endpoint"
    RENDERED_PAGE = "rendered-page"
    STATIC_PAGE = "static-page"
    NONE = "none"


class MenuItem(BaseModel):
    """Menu item model.

    Identity is the (name, category) pair; two items sharing it are duplicates.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Item display name")
    description: str = Field(default="", description="Item description, possibly empty")
    price: str = Field(
        default=PRICE_NOT_AVAILABLE,
        description="Price formatted as $D.DD, a range, or the not-available sentinel",
    )
    category: str = Field(default=DEFAULT_CATEGORY, min_length=1, description="Menu category")

    @property
    def dedup_key(self) -> tuple[str, str]:
        """Key used to collapse duplicate items."""
        return (self.name, self.category)


def distinct_categories(items: list[MenuItem]) -> list[str]:
    """Return the distinct categories of items in first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item.category, None)
    return list(seen)


class MenuSnapshot(BaseModel):
    """Full normalized menu at a point in time.

    `cached`, `cache_timestamp` and `stale` are annotations applied by the cache
    and the refresh policy, never by adapters.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    items: list[MenuItem] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: MenuSource = MenuSource.NONE
    cached: bool = False
    cache_timestamp: datetime | None = None
    stale: bool = False

    @model_validator(mode="after")
    def validate_categories(self) -> "MenuSnapshot":
        """Ensure categories is exactly the distinct set of item categories."""
        expected = distinct_categories(self.items)
        if self.categories != expected:
            raise ValueError(
                f"categories {self.categories} do not match item categories {expected}"
            )
        return self

    @classmethod
    def from_items(cls, items: list[MenuItem], source: MenuSource) -> "MenuSnapshot":
        """Build a snapshot, deriving categories from the items.

        Args:
            items: Normalized menu items in discovery order
            source: Stage that produced the items

        Returns:
            MenuSnapshot stamped with the current time
        """
        return cls(
            items=list(items),
            categories=distinct_categories(items),
            last_updated=datetime.now(UTC),
            source=source,
        )

    @property
    def item_count(self) -> int:
        return len(self.items)


class CacheStatus(BaseModel):
    """Read-only view of the menu cache."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cached: bool
    cache_timestamp: datetime | None = None
    age_minutes: float | None = None
    ttl_minutes: float
    valid: bool
    item_count: int = Field(default=0, ge=0)


class CacheClearResult(BaseModel):
    """Outcome of an administrative cache clear."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    had_entry: bool
    items_cleared: int = Field(default=0, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

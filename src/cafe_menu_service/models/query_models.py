"""Response models for menu queries.

Shared by the REST endpoints and the tool-calling surfaces; serialized with
camelCase keys.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cafe_menu_service.models.menu_models import MenuItem, MenuSource


class QueryResponse(BaseModel):
    """Base class for query payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class MenuResponse(QueryResponse):
    """Full menu listing."""

    restaurant: str
    total_items: int
    categories: list[str]
    items: list[MenuItem]
    last_updated: datetime
    cached: bool
    stale: bool
    source: MenuSource


class SearchResponse(QueryResponse):
    """Items matching a free-text query."""

    query: str
    results_found: int
    items: list[MenuItem]


class CategoriesResponse(QueryResponse):
    """Distinct menu categories."""

    categories: list[str]
    total_categories: int


class CategoryItemsResponse(QueryResponse):
    """Items belonging to one category."""

    category: str
    item_count: int
    items: list[MenuItem]

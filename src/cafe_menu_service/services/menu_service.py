"""Menu service: cache refresh policy and read-only menu queries."""

import logging

from cafe_menu_service.exceptions import AcquisitionFailure, NoDataAvailable
from cafe_menu_service.models.menu_models import CacheClearResult, CacheStatus, MenuSnapshot
from cafe_menu_service.models.query_models import (
    CategoriesResponse,
    CategoryItemsResponse,
    MenuResponse,
    SearchResponse,
)
from cafe_menu_service.observability.metrics import record_cache_lookup
from cafe_menu_service.services.acquisition_service import MenuAcquisitionService
from cafe_menu_service.services.menu_cache import MenuCache

logger = logging.getLogger(__name__)


class MenuService:
    """Service answering menu queries from the cache, refreshing it when needed.

    Refresh policy:
    1. Serve a valid cache entry when there is one
    2. Otherwise run the acquisition pipeline and cache the result
    3. If acquisition fails, serve the expired entry flagged as stale
    4. If there is nothing cached at all, raise NoDataAvailable
    """

    def __init__(
        self,
        acquisition_service: MenuAcquisitionService,
        cache: MenuCache,
        restaurant_name: str = "For Five Coffee",
    ) -> None:
        """Initialize the MenuService.

        Args:
            acquisition_service: Orchestrator used on cache misses
            cache: Cache owned by this service for the life of the process
            restaurant_name: Display name included in full-menu responses
        """
        self.acquisition_service = acquisition_service
        self.cache = cache
        self.restaurant_name = restaurant_name

    async def fetch_menu(self) -> MenuSnapshot:
        """Return the current menu snapshot, refreshing the cache if needed.

        Returns:
            Cached, fresh, or stale snapshot (see class docstring)

        Raises:
            NoDataAvailable: If acquisition failed and nothing is cached
        """
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Using cached menu data")
            record_cache_lookup("hit")
            return cached

        record_cache_lookup("miss")
        logger.info("Fetching fresh menu data")

        try:
            snapshot = await self.acquisition_service.acquire()
        except AcquisitionFailure as e:
            expired = self.cache.peek()
            if expired is None:
                raise NoDataAvailable(f"Failed to fetch menu data: {e}", failures=e.failures) from e

            logger.warning("Using expired cache due to fetch error")
            record_cache_lookup("stale")
            return expired.model_copy(update={"stale": True})

        self.cache.put(snapshot)
        return snapshot

    async def get_full_menu(self) -> MenuResponse:
        """Return the complete menu."""
        menu = await self.fetch_menu()
        return MenuResponse(
            restaurant=self.restaurant_name,
            total_items=menu.item_count,
            categories=menu.categories,
            items=menu.items,
            last_updated=menu.last_updated,
            cached=menu.cached,
            stale=menu.stale,
            source=menu.source,
        )

    async def search_items(self, query: str) -> SearchResponse:
        """Find items whose name, description or category contains the query.

        Args:
            query: Search term, matched case-insensitively

        Returns:
            Matching items in menu order
        """
        menu = await self.fetch_menu()
        term = query.lower()
        results = [
            item
            for item in menu.items
            if term in item.name.lower()
            or term in item.description.lower()
            or term in item.category.lower()
        ]
        return SearchResponse(query=query, results_found=len(results), items=results)

    async def get_categories(self) -> CategoriesResponse:
        """Return the distinct menu categories."""
        menu = await self.fetch_menu()
        return CategoriesResponse(categories=menu.categories, total_categories=len(menu.categories))

    async def get_items_by_category(self, category: str) -> CategoryItemsResponse:
        """Return the items of one category, matched case-insensitively."""
        menu = await self.fetch_menu()
        wanted = category.lower()
        items = [item for item in menu.items if item.category.lower() == wanted]
        return CategoryItemsResponse(category=category, item_count=len(items), items=items)

    def clear_cache(self) -> CacheClearResult:
        return self.cache.clear()

    def cache_status(self) -> CacheStatus:
        return self.cache.status()

"""Structured-endpoint adapter.

Probes a list of candidate JSON endpoints on the ordering platform and maps the
first recognizable response to menu items.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cafe_menu_service.adapters.base_adapter import MenuSourceAdapter
from cafe_menu_service.extraction.html_extractor import format_minor_units
from cafe_menu_service.models.menu_models import DEFAULT_CATEGORY, MenuItem, MenuSource
from cafe_menu_service.observability.decorators import traced

logger = logging.getLogger(__name__)

API_USER_AGENT = "Mozilla/5.0 (compatible; MenuBot/1.0)"


def _map_item(item: Any, category: Any) -> MenuItem | None:
    if not isinstance(item, dict):
        return None
    try:
        return MenuItem(
            name=item.get("name") or "Unknown Item",
            description=item.get("description") or "",
            price=format_minor_units(item.get("price")),
            category=category or DEFAULT_CATEGORY,
        )
    except ValidationError as e:
        logger.debug(f"Skipping malformed menu item {item!r}: {e}")
        return None


def _map_grouped(groups: list[Any]) -> list[MenuItem]:
    items = []
    for group in groups:
        if not isinstance(group, dict) or not isinstance(group.get("items"), list):
            continue
        for raw in group["items"]:
            item = _map_item(raw, group.get("name"))
            if item is not None:
                items.append(item)
    return items


def parse_api_response(data: Any) -> list[MenuItem]:
    """Map a JSON menu payload to menu items.

    Recognized shapes, checked in order:
    - {"menu": [{"name": ..., "items": [...]}]}
    - {"items": [{"name": ..., "category": ...}]}
    - {"categories": [{"name": ..., "items": [...]}]}

    Prices are integer minor units (cents).

    Args:
        data: Decoded JSON body

    Returns:
        List of menu items, empty if the shape is not recognized
    """
    if not isinstance(data, dict):
        return []

    if isinstance(data.get("menu"), list):
        return _map_grouped(data["menu"])

    if isinstance(data.get("items"), list):
        items = []
        for raw in data["items"]:
            item = _map_item(raw, raw.get("category") if isinstance(raw, dict) else None)
            if item is not None:
                items.append(item)
        return items

    if isinstance(data.get("categories"), list):
        return _map_grouped(data["categories"])

    return []


class StructuredEndpointAdapter(MenuSourceAdapter):
    """Adapter that probes candidate JSON menu endpoints.

    Each URL gets exactly one bounded request; the first one yielding at least
    one item wins.
    """

    def __init__(
        self,
        endpoint_urls: list[str],
        timeout_seconds: float = 10.0,
        verify_tls: bool = False,
    ) -> None:
        """Initialize the structured-endpoint adapter.

        Args:
            endpoint_urls: Candidate endpoint URLs in probe order
            timeout_seconds: Per-request timeout
            verify_tls: Whether to verify upstream TLS certificates
        """
        super().__init__(MenuSource.STRUCTURED_ENDPOINT)
        self.endpoint_urls = endpoint_urls
        self.timeout_seconds = timeout_seconds
        self.verify_tls = verify_tls

    @traced("structured_endpoint_fetch", service_name="cafe-menu-svc")
    async def fetch_items(self) -> list[MenuItem] | None:
        """Probe each endpoint in order and return the first non-empty result.

        Returns:
            List of menu items, or None if no endpoint produced any
        """
        headers = {"User-Agent": API_USER_AGENT, "Accept": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout_seconds, verify=self.verify_tls) as client:
            for url in self.endpoint_urls:
                try:
                    response = await client.get(url, headers=headers)
                    response.raise_for_status()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    logger.debug(f"Menu endpoint {url} failed: {e}")
                    continue

                items = parse_api_response(data)
                if items:
                    logger.info(f"Menu endpoint {url} returned {len(items)} items")
                    return items

                logger.debug(f"Menu endpoint {url} returned no recognizable items")

        return None

"""Static-page adapter.

Fetches the menu page HTML directly and hands it to the extractor. Only works
when the upstream site server-renders some of its menu markup.
"""

import logging

import httpx
from bs4 import BeautifulSoup

from cafe_menu_service.adapters.base_adapter import MenuSourceAdapter
from cafe_menu_service.extraction.html_extractor import extract_menu_items
from cafe_menu_service.models.menu_models import MenuItem, MenuSource
from cafe_menu_service.observability.decorators import traced

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

PAGE_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
}


class StaticPageAdapter(MenuSourceAdapter):
    """Adapter that scrapes server-rendered menu HTML."""

    def __init__(self, page_url: str, timeout_seconds: float = 15.0, verify_tls: bool = False) -> None:
        """Initialize the static-page adapter.

        Args:
            page_url: URL of the menu page
            timeout_seconds: Page fetch timeout
            verify_tls: Whether to verify upstream TLS certificates
        """
        super().__init__(MenuSource.STATIC_PAGE)
        self.page_url = page_url
        self.timeout_seconds = timeout_seconds
        self.verify_tls = verify_tls

    @traced("static_page_fetch", service_name="cafe-menu-svc")
    async def fetch_items(self) -> list[MenuItem] | None:
        """Fetch the menu page and extract items from its markup.

        Returns:
            List of extracted items (possibly empty), or None if the fetch failed
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, verify=self.verify_tls, follow_redirects=True
            ) as client:
                response = await client.get(self.page_url, headers=PAGE_HEADERS)
                response.raise_for_status()
                html = response.text
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch menu page {self.page_url}: {e}")
            return None

        soup = BeautifulSoup(html, "html.parser")
        items = extract_menu_items(soup)
        logger.info(f"Extracted {len(items)} items from static menu page")
        return items

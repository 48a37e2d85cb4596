"""Rendered-page adapter.

Drives a headless Chromium session through the client-side rendered menu:
load the page, click each category tab, wait for prices to show up and read
the visible item blocks. Parsing of the scraped text happens in Python so it
can be exercised without a browser.
"""

import asyncio
import logging
import re

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Route, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from cafe_menu_service.adapters.base_adapter import MenuSourceAdapter
from cafe_menu_service.extraction.html_extractor import dedupe_items, format_price_range
from cafe_menu_service.models.menu_models import MenuItem, MenuSource
from cafe_menu_service.observability.decorators import traced

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

BLOCKED_RESOURCE_TYPES = frozenset({"image", "stylesheet", "font", "media"})
BLOCKED_HOST_FRAGMENTS = ("google-analytics", "googletagmanager", "facebook", "twitter")

MENU_MARKER_SELECTOR = '[data-testid*="menu"], .menu-section, .category, .menu-category'
CATEGORY_TAB_SELECTOR = ".cat-items"
MIN_VISIBLE_PRICES = 3

PRICE_PATTERN = re.compile(r"\$\d+\.\d{2}")
PRICE_RANGE_PATTERN = re.compile(r"\$\d+\.\d{2}(\s*[-–]\s*\$\d+\.\d{2})?")
CART_PREFIX_PATTERN = re.compile(r"^(Add to cart|Remove|Quantity:?\s*\d*)")
ZERO_PRICE = "$0.00"

MIN_BLOCK_LENGTH = 5
MAX_BLOCK_LENGTH = 300
MAX_LINE_LENGTH = 100
MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 80
MAX_NAME_WORDS = 5
MAX_DESCRIPTION_LENGTH = 200

# Fixed UI strings from the ordering site's header and pickup widgets
NAVIGATION_MARKERS: tuple[str, ...] = (
    "Boston",
    "Change Locations",
    "Pickup Details",
    "State Street",
    "200 State",
    "Search",
    "Edit",
    "ASAP",
)

CATEGORY_LABELS_JS = """(selector) => Array.from(document.querySelectorAll(selector))
    .map(el => (el.textContent || '').trim())
    .filter(label => label.length > 0)"""

CLICK_CATEGORY_JS = """({selector, label}) => {
    for (const el of document.querySelectorAll(selector)) {
        if ((el.textContent || '').trim() === label) {
            el.click();
            return true;
        }
    }
    return false;
}"""

PRICES_READY_JS = """({selector, minCount}) => {
    const seen = new Set();
    for (const el of document.querySelectorAll('div')) {
        if (el.offsetParent === null || el.closest(selector)) continue;
        const text = (el.innerText || '').trim();
        if (/\\$\\d+\\.\\d{2}/.test(text) && !text.includes('$0.00')) {
            seen.add(text);
        }
        if (seen.size >= minCount) return true;
    }
    return false;
}"""

PRICE_BLOCKS_JS = """(selector) => {
    const blocks = [];
    for (const el of document.querySelectorAll('div')) {
        if (el.offsetParent === null || el.closest(selector) || el.classList.contains('navbar')) continue;
        const text = (el.innerText || '').trim();
        if (text.includes('$')) blocks.push(text);
    }
    return blocks;
}"""


def is_navigation_text(name: str, category: str) -> bool:
    """Check whether a candidate item name is really site chrome."""
    return (
        any(marker in name for marker in NAVIGATION_MARKERS)
        or name.startswith(category)
        or "  " in name
        or len(name.split(" ")) > MAX_NAME_WORDS
        or not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH
    )


def parse_price_block(text: str, category: str) -> MenuItem | None:
    """Turn the visible text of one price-bearing block into a menu item.

    Args:
        text: innerText of the block, lines separated by newlines
        category: Category tab that was active when the block was read

    Returns:
        MenuItem, or None if the block is not a plausible menu item
    """
    text = text.strip()
    if not MIN_BLOCK_LENGTH < len(text) < MAX_BLOCK_LENGTH or ZERO_PRICE in text:
        return None

    prices = PRICE_PATTERN.findall(text)
    if not prices:
        return None
    price = prices[0] if len(prices) == 1 else format_price_range(prices[0], prices[-1])

    cleaned = PRICE_RANGE_PATTERN.sub("", text)
    lines = [
        line.strip()
        for line in cleaned.splitlines()
        if line.strip() and len(line.strip()) < MAX_LINE_LENGTH
    ]
    if not lines:
        return None

    name = CART_PREFIX_PATTERN.sub("", lines[0]).strip()
    if is_navigation_text(name, category):
        return None

    description = " ".join(lines[1:])[:MAX_DESCRIPTION_LENGTH]
    return MenuItem(name=name, description=description, price=price, category=category)


def parse_price_blocks(blocks: list[str], category: str) -> list[MenuItem]:
    """Parse every scraped block for a category, dropping the noise."""
    items = []
    for block in blocks:
        item = parse_price_block(block, category)
        if item is not None:
            items.append(item)
    return items


async def block_subresources(route: Route) -> None:
    """Abort requests the menu text does not depend on."""
    request = route.request
    if request.resource_type in BLOCKED_RESOURCE_TYPES or any(
        fragment in request.url for fragment in BLOCKED_HOST_FRAGMENTS
    ):
        await route.abort()
    else:
        await route.continue_()


class RenderedPageAdapter(MenuSourceAdapter):
    """Adapter that scrapes the client-side rendered menu with a headless browser.

    The browser is closed on every exit path. Timeouts on individual waits are
    not failures: the adapter proceeds with whatever has rendered.
    """

    def __init__(
        self,
        page_url: str,
        navigation_timeout_seconds: float = 30.0,
        marker_timeout_seconds: float = 10.0,
        category_wait_timeout_seconds: float = 3.0,
        settle_delay_seconds: float = 1.5,
        category_settle_seconds: float = 0.5,
    ) -> None:
        """Initialize the rendered-page adapter.

        Args:
            page_url: URL of the menu page
            navigation_timeout_seconds: Browser launch and navigation timeout
            marker_timeout_seconds: How long to wait for a menu marker element
            category_wait_timeout_seconds: How long to wait for prices after a tab click
            settle_delay_seconds: Fixed delay after initial DOM readiness
            category_settle_seconds: Safety margin after each category wait
        """
        super().__init__(MenuSource.RENDERED_PAGE)
        self.page_url = page_url
        self.navigation_timeout_seconds = navigation_timeout_seconds
        self.marker_timeout_seconds = marker_timeout_seconds
        self.category_wait_timeout_seconds = category_wait_timeout_seconds
        self.settle_delay_seconds = settle_delay_seconds
        self.category_settle_seconds = category_settle_seconds

    @traced("rendered_page_fetch", service_name="cafe-menu-svc")
    async def fetch_items(self) -> list[MenuItem] | None:
        """Launch a browser session and scrape every category tab.

        Returns:
            Deduplicated list of items (possibly empty), or None if the session failed
        """
        try:
            async with async_playwright() as playwright:
                logger.info("Starting headless browser")
                browser = await playwright.chromium.launch(
                    headless=True,
                    args=BROWSER_ARGS,
                    timeout=self.navigation_timeout_seconds * 1000,
                )
                try:
                    page = await browser.new_page(user_agent=BROWSER_USER_AGENT)
                    await page.route("**/*", block_subresources)
                    return await self.scrape_page(page)
                finally:
                    await browser.close()
        except Exception as e:
            logger.warning(f"Rendered-page scraping failed: {e}")
            return None

    async def scrape_page(self, page: Page) -> list[MenuItem]:
        """Load the menu page and collect items from each category tab.

        Args:
            page: Open browser page

        Returns:
            Items deduplicated by (name, category)
        """
        await page.goto(
            self.page_url,
            wait_until="domcontentloaded",
            timeout=self.navigation_timeout_seconds * 1000,
        )
        await asyncio.sleep(self.settle_delay_seconds)

        try:
            await page.wait_for_selector(
                MENU_MARKER_SELECTOR, timeout=self.marker_timeout_seconds * 1000
            )
        except PlaywrightTimeoutError:
            logger.info("Menu marker not found, proceeding with content extraction")

        categories: list[str] = await page.evaluate(CATEGORY_LABELS_JS, CATEGORY_TAB_SELECTOR)
        logger.info(f"Found {len(categories)} category tabs: {categories}")

        items: list[MenuItem] = []
        for category in categories:
            try:
                category_items = await self.scrape_category(page, category)
            except PlaywrightError as e:
                logger.warning(f"Error extracting category {category}: {e}")
                continue
            logger.debug(f"Found {len(category_items)} items in {category}")
            items.extend(category_items)

        unique_items = dedupe_items(items)
        logger.info(
            f"Rendered page yielded {len(unique_items)} unique items "
            f"across {len(categories)} categories"
        )
        return unique_items

    async def scrape_category(self, page: Page, category: str) -> list[MenuItem]:
        """Activate one category tab and parse the items it shows.

        Args:
            page: Open browser page with the menu loaded
            category: Visible label of the tab to click

        Returns:
            Items found under the tab, empty if the tab could not be clicked
        """
        clicked = await page.evaluate(
            CLICK_CATEGORY_JS, {"selector": CATEGORY_TAB_SELECTOR, "label": category}
        )
        if not clicked:
            logger.debug(f"Could not click category tab {category}")
            return []

        await self.wait_for_prices(page)

        blocks: list[str] = await page.evaluate(PRICE_BLOCKS_JS, CATEGORY_TAB_SELECTOR)
        return parse_price_blocks(blocks, category)

    async def wait_for_prices(self, page: Page) -> bool:
        """Wait until enough distinct prices are visible, or give up quietly.

        Returns:
            True if the readiness condition was met before the timeout
        """
        ready = True
        try:
            await page.wait_for_function(
                PRICES_READY_JS,
                arg={"selector": CATEGORY_TAB_SELECTOR, "minCount": MIN_VISIBLE_PRICES},
                timeout=self.category_wait_timeout_seconds * 1000,
            )
        except PlaywrightTimeoutError:
            logger.debug("Price readiness wait timed out, reading what has rendered")
            ready = False

        await asyncio.sleep(self.category_settle_seconds)
        return ready

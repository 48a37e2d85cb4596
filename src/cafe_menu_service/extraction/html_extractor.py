"""Menu extraction from raw HTML and plain text.

Pure functions only: no network access and no state. The static-page adapter
feeds parsed documents in here, and the orchestrator uses the validity check
on every stage's output.
"""

import logging
import math
import re

from bs4 import BeautifulSoup, Tag

from cafe_menu_service.models.menu_models import (
    DEFAULT_CATEGORY,
    PRICE_NOT_AVAILABLE,
    MenuItem,
)

logger = logging.getLogger(__name__)

# Tried in order; the first selector matching anything is used exclusively.
ITEM_CONTAINER_SELECTORS: list[str] = [
    ".menu-item",
    ".item",
    ".product",
    ".menu-product",
    ".food-item",
    "[data-item]",
    ".menu-section .item",
]

NAME_SELECTORS: list[str] = [
    ".name",
    ".item-name",
    ".title",
    ".product-name",
    "h3",
    "h4",
    ".menu-item-title",
]

DESCRIPTION_SELECTORS: list[str] = [
    ".description",
    ".item-description",
    ".desc",
    ".product-description",
    "p",
]

PRICE_SELECTORS: list[str] = [
    ".price",
    ".item-price",
    ".cost",
    ".amount",
    ".product-price",
]

# (ancestor selector, heading selectors) pairs used to resolve an item's category
CATEGORY_SCOPES: list[tuple[str, list[str]]] = [
    (".menu-section", [".section-title", ".category-title", "h2", "h3"]),
    (".category", [".title", "h2", "h3"]),
]

# Substrings that only show up when script or config text was scraped by mistake
SCRIPT_LEAKAGE_MARKERS: tuple[str, ...] = ("window.", "LOCATIONS", "tenant", "coordinates")
MAX_ITEM_NAME_LENGTH = 500

CATEGORY_LINE_PATTERN = re.compile(r"^[A-Z][A-Z\s&]+$")
MAX_CATEGORY_LINE_LENGTH = 50
PRICE_LINE_PATTERN = re.compile(r"\$\d+\.?\d*")
PRICE_AMOUNT_PATTERN = re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?")
PRICE_RANGE_TEXT_PATTERN = re.compile(
    rf"({PRICE_AMOUNT_PATTERN.pattern})\s*[-–]\s*\$?\s*({PRICE_AMOUNT_PATTERN.pattern})"
)
PRICE_RANGE_SEPARATOR = " – "
MIN_TEXT_ITEM_NAME_LENGTH = 3


def format_price_range(first: str, last: str) -> str:
    """Join the lowest and highest price of an item into one display string."""
    return f"{first}{PRICE_RANGE_SEPARATOR}{last}"


def _parse_amount(text: str) -> float:
    return float(text.replace(",", ""))


def normalize_price(raw: str | None) -> str:
    """Format a scraped price as $D.DD, or a $D.DD – $D.DD range.

    Args:
        raw: Price text as found on the page (e.g. "$3.5", "3.50 USD", "$3.50 - $4.50")

    Returns:
        Canonical price string, or the not-available sentinel when no amount is present
    """
    if not raw:
        return PRICE_NOT_AVAILABLE

    price_range = PRICE_RANGE_TEXT_PATTERN.search(raw)
    if price_range:
        low, high = (_parse_amount(group) for group in price_range.groups())
        return format_price_range(f"${low:.2f}", f"${high:.2f}")

    match = PRICE_AMOUNT_PATTERN.search(raw)
    if not match:
        return PRICE_NOT_AVAILABLE
    return f"${_parse_amount(match.group(0)):.2f}"


def format_minor_units(value: object) -> str:
    """Format a positive minor-unit price (cents) as $D.DD.

    Zero, negative and non-finite values (JSON allows NaN and Infinity) have no
    meaningful display price and give the not-available sentinel.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return PRICE_NOT_AVAILABLE
    if (isinstance(value, float) and not math.isfinite(value)) or value <= 0:
        return PRICE_NOT_AVAILABLE
    return f"${value / 100:.2f}"


def extract_text(element: Tag | None, selectors: list[str]) -> str:
    """Return the first non-empty text found under element by the given selectors.

    Args:
        element: Container to search inside (descendants only)
        selectors: CSS selectors tried in order

    Returns:
        Stripped text of the first match with content, or an empty string
    """
    if element is None:
        return ""
    for selector in selectors:
        found = element.select_one(selector)
        if found is None:
            continue
        text = found.get_text().strip()
        if text:
            return text
    return ""


def _section_heading(scope: Tag | None, selectors: list[str]) -> str:
    """Return the first non-empty heading in scope that is not part of an item."""
    if scope is None:
        return ""
    item_selector = ", ".join(ITEM_CONTAINER_SELECTORS)
    for selector in selectors:
        for heading in scope.select(selector):
            # item names are h3/.title too
            if heading.css.closest(item_selector) is not None:
                continue
            text = heading.get_text().strip()
            if text:
                return text
    return ""


def resolve_category(element: Tag) -> str:
    """Find the category heading of the nearest section or category ancestor.

    Headings inside item containers are item names, not section titles, and are
    skipped.
    """
    for scope_selector, heading_selectors in CATEGORY_SCOPES:
        category = _section_heading(element.css.closest(scope_selector), heading_selectors)
        if category:
            return category
    return DEFAULT_CATEGORY


def extract_menu_items(
    soup: BeautifulSoup,
    container_selectors: list[str] | None = None,
) -> list[MenuItem]:
    """Extract menu items from a parsed HTML document.

    Uses the first container selector that matches anything. When none match,
    falls back to the plain-text heuristic over the document body.

    Args:
        soup: Parsed HTML document
        container_selectors: Item container selectors in priority order

    Returns:
        List of extracted menu items, possibly empty
    """
    selectors = container_selectors or ITEM_CONTAINER_SELECTORS

    for selector in selectors:
        containers = soup.select(selector)
        if not containers:
            continue

        logger.debug(f"Matched {len(containers)} item containers with selector {selector!r}")
        items = []
        for container in containers:
            name = extract_text(container, NAME_SELECTORS)
            if not name:
                continue
            description = extract_text(container, DESCRIPTION_SELECTORS)
            price = extract_text(container, PRICE_SELECTORS)
            items.append(
                MenuItem(
                    name=name,
                    description=description,
                    price=normalize_price(price),
                    category=resolve_category(container),
                )
            )
        return items

    logger.debug("No item containers matched, falling back to text extraction")
    body = soup.body or soup
    for element in body(["script", "style", "noscript"]):
        element.decompose()
    return parse_menu_from_text(body.get_text("\n"))


def parse_menu_from_text(text: str) -> list[MenuItem]:
    """Extract menu items from plain text, one candidate per line.

    An all-caps short line starts a new category; a line carrying a $ amount is
    split on its first $ into name and price.

    Args:
        text: Document text with line breaks preserved

    Returns:
        List of extracted menu items, possibly empty
    """
    items = []
    current_category = DEFAULT_CATEGORY

    for line in (raw.strip() for raw in text.splitlines()):
        if not line:
            continue

        if len(line) < MAX_CATEGORY_LINE_LENGTH and CATEGORY_LINE_PATTERN.match(line):
            current_category = line
            continue

        if not PRICE_LINE_PATTERN.search(line):
            continue

        name, _, price = line.partition("$")
        name = name.strip()
        if len(name) < MIN_TEXT_ITEM_NAME_LENGTH:
            continue

        items.append(
            MenuItem(
                name=name,
                price=normalize_price(price),
                category=current_category,
            )
        )

    return items


def is_corrupted(items: list[MenuItem]) -> bool:
    """Check whether extracted items contain leaked script or config text.

    Args:
        items: Items produced by any acquisition stage

    Returns:
        True if any item name carries a leakage marker or is absurdly long
    """
    return any(
        len(item.name) > MAX_ITEM_NAME_LENGTH
        or any(marker in item.name for marker in SCRIPT_LEAKAGE_MARKERS)
        for item in items
    )


def dedupe_items(items: list[MenuItem]) -> list[MenuItem]:
    """Drop items whose (name, category) was already seen, keeping the first."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for item in items:
        if item.dedup_key in seen:
            continue
        seen.add(item.dedup_key)
        unique.append(item)
    return unique

"""Environment-driven configuration for the menu service."""

import os

from pydantic import BaseModel, Field

DEFAULT_TENANT_ID = "2EH1VSxuR0eoGEGnOqKRzA"
DEFAULT_LOCATION_ID = "6kI4jAAcQCS8MdzDSm3gUA"

DEFAULT_MENU_PAGE_URL = "https://for-five-coffee.ordrsliponline.com/menus"
DEFAULT_MENU_API_URLS = [
    f"https://for-five-coffee.ordrsliponline.com/api/locations/{DEFAULT_LOCATION_ID}/menu",
    "https://for-five-coffee.ordrsliponline.com/api/menu",
    f"https://api.ordrsliponline.com/tenants/{DEFAULT_TENANT_ID}/menu",
    f"https://api.ordrsliponline.com/locations/{DEFAULT_LOCATION_ID}/menu",
]


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class MenuServiceSettings(BaseModel):
    """Runtime settings for the menu service.

    Built once at startup with from_env() and passed to the components that
    need it.
    """

    restaurant_name: str = "For Five Coffee"
    menu_page_url: str = DEFAULT_MENU_PAGE_URL
    menu_api_urls: list[str] = Field(default_factory=lambda: list(DEFAULT_MENU_API_URLS))

    cache_ttl_minutes: float = Field(default=24 * 60, gt=0)

    endpoint_timeout_seconds: float = Field(default=10.0, gt=0)
    page_timeout_seconds: float = Field(default=15.0, gt=0)
    navigation_timeout_seconds: float = Field(default=30.0, gt=0)
    marker_timeout_seconds: float = Field(default=10.0, ge=0)
    category_wait_timeout_seconds: float = Field(default=3.0, ge=0)
    settle_delay_seconds: float = Field(default=1.5, ge=0)
    category_settle_seconds: float = Field(default=0.5, ge=0)

    enable_rendered_page: bool = True
    verify_tls: bool = False

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, gt=0, le=65535)
    enable_stdio_tools: bool = False
    enable_otel_exporters: bool = False

    @classmethod
    def from_env(cls) -> "MenuServiceSettings":
        """Build settings from environment variables, falling back to defaults.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is out of range
        """
        return cls(
            restaurant_name=os.getenv("RESTAURANT_NAME", "For Five Coffee"),
            menu_page_url=os.getenv("MENU_PAGE_URL", DEFAULT_MENU_PAGE_URL),
            menu_api_urls=_env_list("MENU_API_URLS", DEFAULT_MENU_API_URLS),
            cache_ttl_minutes=_env_float("CACHE_TTL_MINUTES", 24 * 60),
            endpoint_timeout_seconds=_env_float("ENDPOINT_TIMEOUT_SECONDS", 10.0),
            page_timeout_seconds=_env_float("PAGE_TIMEOUT_SECONDS", 15.0),
            navigation_timeout_seconds=_env_float("NAVIGATION_TIMEOUT_SECONDS", 30.0),
            marker_timeout_seconds=_env_float("MENU_MARKER_TIMEOUT_SECONDS", 10.0),
            category_wait_timeout_seconds=_env_float("CATEGORY_WAIT_TIMEOUT_SECONDS", 3.0),
            settle_delay_seconds=_env_float("SETTLE_DELAY_SECONDS", 1.5),
            category_settle_seconds=_env_float("CATEGORY_SETTLE_SECONDS", 0.5),
            enable_rendered_page=_env_bool("ENABLE_RENDERED_PAGE", True),
            verify_tls=_env_bool("VERIFY_TLS", False),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3000),
            enable_stdio_tools=_env_bool("ENABLE_STDIO_TOOLS", False),
            enable_otel_exporters=_env_bool("ENABLE_OTEL_EXPORTERS", False),
        )

"""Main application entry point for the cafe menu service.

This module provides the FastAPI application factory and the process runner
that serves the REST/JSON-RPC API and, optionally, the stdio tool transport.
"""

import asyncio
import logging
import os
from datetime import timedelta

import uvicorn
from fastapi import FastAPI

from cafe_menu_service.adapters.base_adapter import MenuSourceAdapter
from cafe_menu_service.adapters.rendered_page_adapter import RenderedPageAdapter
from cafe_menu_service.adapters.static_page_adapter import StaticPageAdapter
from cafe_menu_service.adapters.structured_endpoint_adapter import StructuredEndpointAdapter
from cafe_menu_service.handlers.api_handler import create_app
from cafe_menu_service.handlers.stdio_server import create_mcp_server
from cafe_menu_service.observability import configure_logging, setup_observability
from cafe_menu_service.services.acquisition_service import MenuAcquisitionService
from cafe_menu_service.services.menu_cache import MenuCache
from cafe_menu_service.services.menu_service import MenuService
from cafe_menu_service.settings import MenuServiceSettings

logger = logging.getLogger(__name__)


def create_source_adapters(settings: MenuServiceSettings) -> list[MenuSourceAdapter]:
    """Create the acquisition adapters in priority order.

    Args:
        settings: Service settings

    Returns:
        Structured-endpoint, rendered-page (unless disabled) and static-page adapters
    """
    adapters: list[MenuSourceAdapter] = [
        StructuredEndpointAdapter(
            endpoint_urls=settings.menu_api_urls,
            timeout_seconds=settings.endpoint_timeout_seconds,
            verify_tls=settings.verify_tls,
        )
    ]

    if settings.enable_rendered_page:
        adapters.append(
            RenderedPageAdapter(
                page_url=settings.menu_page_url,
                navigation_timeout_seconds=settings.navigation_timeout_seconds,
                marker_timeout_seconds=settings.marker_timeout_seconds,
                category_wait_timeout_seconds=settings.category_wait_timeout_seconds,
                settle_delay_seconds=settings.settle_delay_seconds,
                category_settle_seconds=settings.category_settle_seconds,
            )
        )
    else:
        logger.warning("Rendered-page stage disabled, skipping headless browser")

    adapters.append(
        StaticPageAdapter(
            page_url=settings.menu_page_url,
            timeout_seconds=settings.page_timeout_seconds,
            verify_tls=settings.verify_tls,
        )
    )
    return adapters


def create_menu_service(settings: MenuServiceSettings) -> MenuService:
    """Wire the cache, orchestrator and adapters into a MenuService."""
    acquisition_service = MenuAcquisitionService(adapters=create_source_adapters(settings))
    cache = MenuCache(ttl=timedelta(minutes=settings.cache_ttl_minutes))
    return MenuService(
        acquisition_service=acquisition_service,
        cache=cache,
        restaurant_name=settings.restaurant_name,
    )


def create_application(settings: MenuServiceSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads settings and configures logging
    2. Builds the acquisition adapters and orchestrator
    3. Creates the process-wide cache and menu service
    4. Creates the FastAPI app
    5. Sets up observability

    Args:
        settings: Optional pre-built settings (read from the environment otherwise)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or MenuServiceSettings.from_env()
    configure_logging(settings.log_level)

    logger.info("Initializing cafe menu service...")

    menu_service = create_menu_service(settings)
    logger.info(
        f"Menu service configured - page: {settings.menu_page_url}, "
        f"cache TTL: {settings.cache_ttl_minutes} minutes"
    )

    app = create_app(menu_service=menu_service)
    app.state.settings = settings

    setup_observability(app, enable_exporters=settings.enable_otel_exporters)

    logger.info("Cafe menu service initialized successfully")
    return app


async def serve(app: FastAPI, settings: MenuServiceSettings) -> None:
    """Run the HTTP server and, if enabled, the stdio tool server until shutdown."""
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    tasks = [server.serve()]
    if settings.enable_stdio_tools:
        mcp = create_mcp_server(app.state.tool_handler)
        tasks.append(mcp.run_async(transport="stdio"))
        logger.info("MCP server running on stdio")

    logger.info(f"HTTP API server listening on {settings.host}:{settings.port}")
    await asyncio.gather(*tasks)


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


def run() -> None:
    """Console entry point."""
    asyncio.run(serve(app, app.state.settings))


if __name__ == "__main__":
    run()

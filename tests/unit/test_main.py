"""Unit tests for main application entry point."""

from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI

from cafe_menu_service.adapters.rendered_page_adapter import RenderedPageAdapter
from cafe_menu_service.adapters.static_page_adapter import StaticPageAdapter
from cafe_menu_service.adapters.structured_endpoint_adapter import StructuredEndpointAdapter
from cafe_menu_service.handlers.tool_handler import MenuToolHandler
from cafe_menu_service.services.menu_service import MenuService
from cafe_menu_service.settings import MenuServiceSettings
from src.main import create_application, create_menu_service, create_source_adapters


@pytest.mark.unit
class TestCreateSourceAdapters:
    """Tests for create_source_adapters function."""

    def test_priority_order(self) -> None:
        """Test that stages are ordered structured, rendered, static."""
        adapters = create_source_adapters(MenuServiceSettings())

        assert [type(adapter) for adapter in adapters] == [
            StructuredEndpointAdapter,
            RenderedPageAdapter,
            StaticPageAdapter,
        ]

    def test_rendered_stage_can_be_disabled(self) -> None:
        """Test that the headless browser stage is skipped when disabled."""
        adapters = create_source_adapters(MenuServiceSettings(enable_rendered_page=False))

        assert [type(adapter) for adapter in adapters] == [StructuredEndpointAdapter, StaticPageAdapter]

    def test_settings_are_applied(self) -> None:
        """Test that URLs and timeouts reach the adapters."""
        settings = MenuServiceSettings(
            menu_page_url="https://menu.test.com/menus",
            menu_api_urls=["https://api.test.com/menu"],
            endpoint_timeout_seconds=2,
            settle_delay_seconds=0,
        )

        structured, rendered, static = create_source_adapters(settings)

        assert structured.endpoint_urls == ["https://api.test.com/menu"]
        assert structured.timeout_seconds == 2
        assert rendered.page_url == "https://menu.test.com/menus"
        assert rendered.settle_delay_seconds == 0
        assert static.page_url == "https://menu.test.com/menus"


@pytest.mark.unit
class TestCreateMenuService:
    """Tests for create_menu_service function."""

    def test_wires_cache_ttl(self) -> None:
        """Test that the cache TTL comes from settings."""
        service = create_menu_service(MenuServiceSettings(cache_ttl_minutes=60, restaurant_name="Test Cafe"))

        assert isinstance(service, MenuService)
        assert service.cache.ttl_minutes == 60
        assert service.restaurant_name == "Test Cafe"
        assert len(service.acquisition_service.adapters) == 3


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    def test_creates_app(self, mock_configure_logging: Mock, mock_setup_observability: Mock) -> None:
        """Test that the application is built with its services on app.state."""
        settings = MenuServiceSettings(log_level="DEBUG")

        app = create_application(settings)

        assert isinstance(app, FastAPI)
        assert app.state.settings is settings
        assert isinstance(app.state.menu_service, MenuService)
        assert isinstance(app.state.tool_handler, MenuToolHandler)
        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_setup_observability.assert_called_once_with(app, enable_exporters=False)

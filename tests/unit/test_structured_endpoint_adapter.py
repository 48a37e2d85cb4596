"""Unit tests for StructuredEndpointAdapter."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cafe_menu_service.adapters.structured_endpoint_adapter import (
    StructuredEndpointAdapter,
    parse_api_response,
)
from cafe_menu_service.models.menu_models import PRICE_NOT_AVAILABLE, MenuItem, MenuSource


def _json_response(payload: object) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = payload
    return response


@pytest.mark.unit
class TestParseApiResponse:
    """Test suite for parse_api_response."""

    def test_nested_menu_shape(self) -> None:
        """Test {"menu": [{name, items}]} payloads."""
        data = {
            "menu": [
                {"name": "Coffee", "items": [{"name": "Latte", "description": "Milky", "price": 450}]},
                {"name": "Tea", "items": [{"name": "Chai", "price": 425}]},
            ]
        }

        assert parse_api_response(data) == [
            MenuItem(name="Latte", description="Milky", price="$4.50", category="Coffee"),
            MenuItem(name="Chai", price="$4.25", category="Tea"),
        ]

    def test_flat_items_shape(self) -> None:
        """Test {"items": [...]} payloads with per-item categories."""
        data = {"items": [{"name": "Bagel", "price": 250, "category": "Bakery"}, {"name": "Juice"}]}

        assert parse_api_response(data) == [
            MenuItem(name="Bagel", price="$2.50", category="Bakery"),
            MenuItem(name="Juice", price=PRICE_NOT_AVAILABLE, category="General"),
        ]

    def test_categories_shape(self) -> None:
        """Test {"categories": [{name, items}]} payloads."""
        data = {"categories": [{"name": "Pastry", "items": [{"name": "Scone", "price": 300}]}]}

        assert parse_api_response(data) == [MenuItem(name="Scone", price="$3.00", category="Pastry")]

    def test_missing_names_get_placeholder(self) -> None:
        """Test that unnamed items and groups get placeholder values."""
        data = {"menu": [{"items": [{"price": 100}]}]}

        assert parse_api_response(data) == [
            MenuItem(name="Unknown Item", price="$1.00", category="General")
        ]

    def test_non_finite_and_negative_prices(self) -> None:
        """Test that NaN and negative cents from upstream JSON map to the sentinel."""
        data = json.loads('{"items": [{"name": "Latte", "price": NaN}, {"name": "Mocha", "price": -350}]}')

        assert [item.price for item in parse_api_response(data)] == [PRICE_NOT_AVAILABLE, PRICE_NOT_AVAILABLE]

    @pytest.mark.parametrize(
        "data",
        [{}, {"status": "ok"}, [], "menu", None, {"menu": "not-a-list"}, {"items": [1, "x"]}],
    )
    def test_unrecognized_shapes(self, data: object) -> None:
        """Test that unknown shapes produce no items."""
        assert parse_api_response(data) == []

    def test_malformed_item_skipped(self) -> None:
        """Test that an item failing validation is skipped, not fatal."""
        data = {"items": [{"name": "Latte", "price": 450, "category": {"bad": True}}, {"name": "Mocha"}]}

        assert [item.name for item in parse_api_response(data)] == ["Mocha"]


@pytest.mark.unit
class TestStructuredEndpointAdapter:
    """Test suite for StructuredEndpointAdapter."""

    @pytest.fixture
    def adapter(self) -> StructuredEndpointAdapter:
        """Create an adapter with two candidate endpoints."""
        return StructuredEndpointAdapter(
            endpoint_urls=["https://api.test.com/a", "https://api.test.com/b"],
            timeout_seconds=10,
        )

    def test_adapter_initialization(self, adapter: StructuredEndpointAdapter) -> None:
        """Test that adapter initializes with the structured-endpoint tag."""
        assert adapter.source == MenuSource.STRUCTURED_ENDPOINT
        assert adapter.verify_tls is False

    @pytest.mark.asyncio
    async def test_first_endpoint_success(self, adapter: StructuredEndpointAdapter) -> None:
        """Test that the first endpoint yielding items wins and later ones are skipped."""
        mock_get = AsyncMock(return_value=_json_response({"items": [{"name": "Latte", "price": 450}]}))

        with patch("httpx.AsyncClient.get", mock_get):
            items = await adapter.fetch_items()

        assert items == [MenuItem(name="Latte", price="$4.50")]
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == "https://api.test.com/a"
        assert mock_get.call_args.kwargs["headers"]["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_continues_after_transport_error(self, adapter: StructuredEndpointAdapter) -> None:
        """Test that a failing endpoint falls through to the next one."""
        mock_get = AsyncMock(
            side_effect=[
                httpx.ConnectError("Connection failed", request=MagicMock()),
                _json_response({"items": [{"name": "Mocha", "price": 495}]}),
            ]
        )

        with patch("httpx.AsyncClient.get", mock_get):
            items = await adapter.fetch_items()

        assert items == [MenuItem(name="Mocha", price="$4.95")]
        assert mock_get.call_count == 2

    @pytest.mark.asyncio
    async def test_continues_after_http_status_error(self, adapter: StructuredEndpointAdapter) -> None:
        """Test that non-2xx responses count as endpoint failures."""
        not_found = MagicMock()
        not_found.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Not found", request=MagicMock(), response=not_found
        )
        mock_get = AsyncMock(side_effect=[not_found, _json_response({"items": []})])

        with patch("httpx.AsyncClient.get", mock_get):
            items = await adapter.fetch_items()

        assert items is None
        assert mock_get.call_count == 2

    @pytest.mark.asyncio
    async def test_invalid_json_skipped(self, adapter: StructuredEndpointAdapter) -> None:
        """Test that an HTML body where JSON was expected is skipped."""
        html = MagicMock()
        html.json.side_effect = ValueError("Expecting value")
        mock_get = AsyncMock(side_effect=[html, _json_response({"menu": []})])

        with patch("httpx.AsyncClient.get", mock_get):
            items = await adapter.fetch_items()

        assert items is None

    @pytest.mark.asyncio
    async def test_no_endpoints(self) -> None:
        """Test that an empty probe list yields None."""
        adapter = StructuredEndpointAdapter(endpoint_urls=[])

        assert await adapter.fetch_items() is None

"""FastAPI application exposing the menu over REST and JSON-RPC."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cafe_menu_service.exceptions import NoDataAvailable, UnknownToolError
from cafe_menu_service.handlers.tool_handler import MenuToolHandler
from cafe_menu_service.models.menu_models import CacheStatus
from cafe_menu_service.models.query_models import (
    CategoriesResponse,
    CategoryItemsResponse,
    MenuResponse,
    SearchResponse,
)
from cafe_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

SERVICE_NAME = "for-five-coffee-mcp-server"
SERVICE_VERSION = "1.0.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

JSONRPC_PARSE_ERROR = -32700
JSONRPC_INVALID_REQUEST = -32600
JSONRPC_METHOD_NOT_FOUND = -32601
JSONRPC_INTERNAL_ERROR = -32603

# JSON-RPC methods acknowledged with an empty or fixed result
STATIC_RPC_RESULTS: dict[str, dict[str, Any]] = {
    "resources/list": {"resources": []},
    "prompts/list": {"prompts": []},
    "ping": {},
    "notifications/initialized": {},
    "logging/setLevel": {},
}


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    timestamp: datetime


class CacheClearResponse(BaseModel):
    """Response model for cache clears."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    had_entry: bool
    items_cleared: int
    timestamp: datetime


def _rpc_error(code: int, message: str, request_id: Any, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id},
    )


def create_app(menu_service: MenuService) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service answering menu queries; owns the process-wide cache

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Menu API starting")
        yield
        app.state.menu_service.clear_cache()
        logger.info("Menu API stopped")

    app = FastAPI(
        title="For Five Coffee Menu API",
        description="REST and JSON-RPC access to For Five Coffee menu data",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    # Store services in app state for access in route handlers
    app.state.menu_service = menu_service
    app.state.tool_handler = MenuToolHandler(menu_service)

    @app.exception_handler(NoDataAvailable)
    async def no_data_handler(request: Request, exc: NoDataAvailable) -> JSONResponse:
        logger.error(f"No menu data available for {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
            timestamp=datetime.now(UTC),
        )

    @app.get("/", tags=["Docs"])
    async def root(request: Request) -> dict[str, Any]:
        """Describe the available transports."""
        base = str(request.base_url).rstrip("/")
        return {
            "message": "For Five Coffee MCP Server",
            "version": SERVICE_VERSION,
            "mcp": {
                "stdio": "Model Context Protocol tools available on stdio when enabled",
                "http": f"MCP over HTTP (JSON-RPC 2.0) available at {base}/mcp",
            },
            "api": f"REST API available at {base}/api",
            "health": f"{base}/health",
        }

    @app.get("/api", tags=["Docs"])
    async def api_docs(request: Request) -> dict[str, Any]:
        """List REST endpoints with example URLs."""
        base = str(request.base_url).rstrip("/")
        return {
            "name": "For Five Coffee MCP Server API",
            "version": SERVICE_VERSION,
            "description": "REST API for For Five Coffee menu data",
            "endpoints": {
                "GET /health": "Health check",
                "GET /api": "API documentation",
                "GET /api/menu": "Get full menu",
                "GET /api/menu/search?q={query}": "Search menu items",
                "GET /api/menu/categories": "Get all categories",
                "GET /api/menu/category/{category}": "Get items by category",
                "GET /api/cache/status": "Get cache status",
                "POST /api/cache/clear": "Clear menu cache",
                "POST /mcp": "MCP JSON-RPC 2.0 endpoint",
            },
            "examples": {
                "fullMenu": f"{base}/api/menu",
                "search": f"{base}/api/menu/search?q=latte",
                "categories": f"{base}/api/menu/categories",
                "category": f"{base}/api/menu/category/Coffee",
                "cacheStatus": f"{base}/api/cache/status",
            },
        }

    @app.get("/api/menu", response_model=MenuResponse, tags=["Menu"])
    async def get_full_menu() -> MenuResponse:
        """Get the full menu."""
        response: MenuResponse = await app.state.menu_service.get_full_menu()
        return response

    @app.get("/api/menu/search", response_model=SearchResponse, tags=["Menu"])
    async def search_menu(q: str | None = None) -> SearchResponse | JSONResponse:
        """Search menu items by name, description or category."""
        if not q:
            return JSONResponse(status_code=400, content={"error": 'Query parameter "q" is required'})
        response: SearchResponse = await app.state.menu_service.search_items(q)
        return response

    @app.get("/api/menu/categories", response_model=CategoriesResponse, tags=["Menu"])
    async def get_categories() -> CategoriesResponse:
        """Get all menu categories."""
        response: CategoriesResponse = await app.state.menu_service.get_categories()
        return response

    @app.get("/api/menu/category/{category}", response_model=CategoryItemsResponse, tags=["Menu"])
    async def get_items_by_category(category: str) -> CategoryItemsResponse:
        """Get the items of one category."""
        response: CategoryItemsResponse = await app.state.menu_service.get_items_by_category(category)
        return response

    @app.get("/api/cache/status", response_model=CacheStatus, tags=["Cache"])
    async def cache_status() -> CacheStatus:
        """Get cache status."""
        status: CacheStatus = app.state.menu_service.cache_status()
        return status

    @app.post("/api/cache/clear", response_model=CacheClearResponse, tags=["Cache"])
    async def clear_cache() -> CacheClearResponse:
        """Clear the menu cache so the next request fetches fresh data."""
        result = app.state.menu_service.clear_cache()
        logger.info(f"Cache cleared via API, {result.items_cleared} items dropped")
        return CacheClearResponse(
            message="Cache cleared successfully",
            had_entry=result.had_entry,
            items_cleared=result.items_cleared,
            timestamp=result.timestamp,
        )

    @app.post("/mcp", tags=["MCP"])
    async def mcp_endpoint(request: Request) -> JSONResponse:
        """Handle MCP JSON-RPC 2.0 requests over HTTP."""
        try:
            body = await request.json()
        except ValueError:
            return _rpc_error(JSONRPC_PARSE_ERROR, "Parse error", None, status_code=400)

        if not isinstance(body, dict):
            return _rpc_error(JSONRPC_INVALID_REQUEST, "Invalid Request", None, status_code=400)

        method = body.get("method")
        params = body.get("params")
        if not isinstance(params, dict):
            params = {}
        request_id = body.get("id")

        if method == "initialize":
            result: dict[str, Any] = {
                "protocolVersion": MCP_PROTOCOL_VERSION,
                "capabilities": {"tools": {}, "resources": {}, "prompts": {}, "logging": {}},
                "serverInfo": {"name": SERVICE_NAME, "version": SERVICE_VERSION},
            }
        elif method == "tools/list":
            result = {"tools": app.state.tool_handler.list_tools()}
        elif method == "tools/call":
            try:
                result = await app.state.tool_handler.call_tool(
                    params.get("name"), params.get("arguments")
                )
            except UnknownToolError as e:
                return _rpc_error(JSONRPC_INTERNAL_ERROR, str(e), request_id, status_code=500)
        elif method in STATIC_RPC_RESULTS:
            result = STATIC_RPC_RESULTS[method]
        else:
            return _rpc_error(JSONRPC_METHOD_NOT_FOUND, "Method not found", request_id, status_code=400)

        return JSONResponse(content={"jsonrpc": "2.0", "result": result, "id": request_id})

    return app

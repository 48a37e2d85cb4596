"""Menu tools served over stdio with FastMCP."""

import logging
from typing import Any

from fastmcp import FastMCP

from cafe_menu_service.handlers.tool_handler import MenuToolHandler

logger = logging.getLogger(__name__)


def create_mcp_server(tool_handler: MenuToolHandler) -> FastMCP:
    """Create a FastMCP server exposing the menu tools.

    Each tool delegates to MenuToolHandler.run_tool so the stdio and HTTP
    surfaces return identical payloads. Errors are raised and reported to the
    client as tool errors by FastMCP.

    Args:
        tool_handler: Handler bound to the process-wide MenuService

    Returns:
        Configured FastMCP server (not yet running)
    """
    mcp = FastMCP("for-five-coffee-server")

    @mcp.tool
    async def get_full_menu() -> dict[str, Any]:
        """Fetch the complete menu from For Five Coffee including all categories and items"""
        return await tool_handler.run_tool("get_full_menu")

    @mcp.tool
    async def search_menu_items(query: str) -> dict[str, Any]:
        """Search for specific menu items by name or category

        Args:
            query: Search term to find in menu items (name, description, or category)
        """
        return await tool_handler.run_tool("search_menu_items", {"query": query})

    @mcp.tool
    async def get_menu_categories() -> dict[str, Any]:
        """Get all available menu categories"""
        return await tool_handler.run_tool("get_menu_categories")

    @mcp.tool
    async def get_items_by_category(category: str) -> dict[str, Any]:
        """Get all menu items from a specific category

        Args:
            category: The category name to filter by
        """
        return await tool_handler.run_tool("get_items_by_category", {"category": category})

    @mcp.tool
    async def clear_menu_cache() -> dict[str, Any]:
        """Clear the menu cache to force fresh data on next request"""
        return await tool_handler.run_tool("clear_menu_cache")

    logger.info("MCP stdio server configured with menu tools")
    return mcp

"""Tool definitions and dispatch for the tool-calling protocol."""

import json
import logging
from typing import Any

from cafe_menu_service.exceptions import MenuServiceError, UnknownToolError
from cafe_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "get_full_menu",
        "description": "Fetch the complete menu from For Five Coffee including all categories and items",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "search_menu_items",
        "description": "Search for specific menu items by name or category",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search term to find in menu items (name, description, or category)",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "get_menu_categories",
        "description": "Get all available menu categories",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "get_items_by_category",
        "description": "Get all menu items from a specific category",
        "inputSchema": {
            "type": "object",
            "properties": {
                "category": {"type": "string", "description": "The category name to filter by"},
            },
            "required": ["category"],
        },
    },
    {
        "name": "clear_menu_cache",
        "description": "Clear the menu cache to force fresh data on next request",
        "inputSchema": {"type": "object", "properties": {}},
    },
]


def text_content(payload: dict[str, Any]) -> dict[str, Any]:
    """Wrap a payload as a tool result with a single pretty-printed text block."""
    return {"content": [{"type": "text", "text": json.dumps(payload, indent=2)}]}


def error_content(message: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}


class MenuToolHandler:
    """Maps tool calls onto MenuService queries."""

    def __init__(self, menu_service: MenuService) -> None:
        """Initialize the tool handler.

        Args:
            menu_service: Service answering menu queries
        """
        self.menu_service = menu_service

    def list_tools(self) -> list[dict[str, Any]]:
        return TOOL_DEFINITIONS

    async def run_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a tool and return its JSON payload.

        Args:
            name: Tool name from TOOL_DEFINITIONS
            arguments: Tool arguments

        Returns:
            JSON-compatible payload for the tool

        Raises:
            UnknownToolError: If the tool does not exist
            ValueError: If arguments is not an object or a required argument is missing
            MenuServiceError: If no menu data could be produced
        """
        if arguments is not None and not isinstance(arguments, dict):
            raise ValueError("Tool arguments must be an object")
        args = arguments or {}

        if name == "get_full_menu":
            return (await self.menu_service.get_full_menu()).to_payload()
        if name == "search_menu_items":
            query = _required_str(args, "query")
            return (await self.menu_service.search_items(query)).to_payload()
        if name == "get_menu_categories":
            return (await self.menu_service.get_categories()).to_payload()
        if name == "get_items_by_category":
            category = _required_str(args, "category")
            return (await self.menu_service.get_items_by_category(category)).to_payload()
        if name == "clear_menu_cache":
            result = self.menu_service.clear_cache()
            return {
                "message": "Menu cache cleared successfully",
                **result.model_dump(mode="json", by_alias=True),
            }

        raise UnknownToolError(f"Unknown tool: {name}")

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a tool and wrap the outcome as tool-protocol content.

        Menu failures and bad arguments are reported inside the result with
        isError set; unknown tools propagate as UnknownToolError.
        """
        try:
            payload = await self.run_tool(name, arguments)
        except UnknownToolError:
            raise
        except (MenuServiceError, ValueError) as e:
            logger.warning(f"Tool {name} failed: {e}")
            return error_content(str(e))
        return text_content(payload)


def _required_str(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Missing required argument: {key}")
    return value

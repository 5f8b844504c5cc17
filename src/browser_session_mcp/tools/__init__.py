"""MCP tool and resource definitions."""

from fastmcp import FastMCP

from .browser import browser_router
from .resources import resources_router


def create_tool_router() -> FastMCP:
    """Create empty router - tools will be imported async in setup."""
    return FastMCP("BrowserSessionTools")


async def import_all_tools(router: FastMCP) -> None:
    """Import all tool and resource sub-routers into the main router (async)."""
    await router.import_server(browser_router)
    await router.import_server(resources_router)


__all__ = ["create_tool_router", "import_all_tools"]

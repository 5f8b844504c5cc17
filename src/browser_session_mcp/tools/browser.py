"""Browser tools: every call is routed through the ToolDispatcher."""

from typing import Any
from fastmcp import FastMCP, Context
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_context as get_request_context
from fastmcp.tools.tool import Tool, ToolResult

from ..core.dispatcher import Content, ToolDispatcher
from ..utils.error_mapper import create_error_response

browser_router = FastMCP(
    name="BrowserTools",
    instructions="Navigate, inspect and interact with the single browser session",
)

TOOL_TAGS: dict[str, set[str]] = {
    "navigate": {"navigation"},
    "screenshot": {"observation", "screenshot"},
    "click": {"action", "click"},
    "type": {"action", "input"},
    "wait-for-element": {"wait", "element"},
    "evaluate-js": {"script", "javascript"},
    "get-text": {"observation", "text"},
    "close-browser": {"session", "lifecycle"},
}


def get_context(ctx: Context):
    """Helper to retrieve app context from lifespan."""
    return ctx.request_context.lifespan_context


async def run_tool(ctx: Context, name: str, arguments: dict[str, Any]) -> list[Content]:
    """
    Dispatch a tool call and convert failures into a ToolError.

    The ToolError message carries the structured error (code, message,
    suggestion) so clients can branch on the failure kind.
    """
    try:
        content = await get_context(ctx).dispatcher.dispatch(name, arguments)
    except Exception as e:
        raise ToolError(create_error_response(e).to_message()) from e
    await ctx.info(f"{name} completed")
    return content


class CatalogTool(Tool):
    """
    MCP tool backed by a dispatcher catalog entry.

    Arguments reach the dispatcher as sent by the client, so malformed calls
    fail with the same INVALID_ARGUMENT payload as every other failure.
    """

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        content = await run_tool(get_request_context(), self.name, arguments)
        return ToolResult(content=content)


def create_catalog_tool(entry: dict[str, Any]) -> CatalogTool:
    """Build the MCP tool for one catalog entry, advertising its input schema."""
    return CatalogTool(
        name=entry["name"],
        description=entry["description"],
        parameters=entry["inputSchema"],
        tags=TOOL_TAGS.get(entry["name"], set()),
    )


for _entry in ToolDispatcher.list_tools():
    browser_router.add_tool(create_catalog_tool(_entry))

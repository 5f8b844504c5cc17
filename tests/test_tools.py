"""Tests for the FastMCP tool and resource wrappers."""

import json
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from unittest.mock import MagicMock, AsyncMock
from fastmcp import Client, FastMCP
from fastmcp.exceptions import ResourceError, ToolError

from browser_session_mcp.config import Settings
from browser_session_mcp.core.resources import CONSOLE_LOGS_URI, CURRENT_PAGE_URI
from browser_session_mcp.server import AppContext, setup_server
from browser_session_mcp.tools import resources as resource_tools
from browser_session_mcp.tools.browser import run_tool
from browser_session_mcp.utils.error_mapper import FAILURE_PREFIX


@pytest.fixture
def app_ctx(session_manager, dispatcher, resources):
    """AppContext backed by the mocked session manager."""
    return AppContext(
        session_manager=session_manager,
        dispatcher=dispatcher,
        resources=resources,
        settings=Settings(),
    )


@pytest.fixture
def mock_ctx(app_ctx):
    """Create a mock FastMCP Context backed by real dispatcher and resources."""
    ctx = MagicMock()
    ctx.request_context.lifespan_context = app_ctx
    ctx.info = AsyncMock()
    return ctx


@pytest_asyncio.fixture
async def server(app_ctx):
    """Full server with all routers, using the mocked services as lifespan context."""

    @asynccontextmanager
    async def lifespan(server):
        yield app_ctx

    mcp = FastMCP("browser-session-test", lifespan=lifespan)
    await setup_server(mcp)
    return mcp


def error_payload(exc: Exception) -> dict:
    message = str(exc)
    assert message.startswith(f"{FAILURE_PREFIX}: ")
    return json.loads(message[len(FAILURE_PREFIX) + 2:])


@pytest.mark.asyncio
async def test_navigate_tool(mock_ctx, mock_webdriver):
    """Should return text content and log to the client."""
    result = await run_tool(mock_ctx, "navigate", {"url": "https://example.com"})

    assert result[0].text == "Successfully navigated to https://example.com"
    mock_webdriver.get.assert_called_once_with("https://example.com")
    mock_ctx.info.assert_awaited()


@pytest.mark.asyncio
async def test_navigate_tool_invalid_url(mock_ctx):
    """Should raise a ToolError tagged INVALID_ARGUMENT."""
    with pytest.raises(ToolError) as exc:
        await run_tool(mock_ctx, "navigate", {"url": "about:blank"})

    payload = error_payload(exc.value)
    assert payload["error"]["code"] == "INVALID_ARGUMENT"
    assert "http://" in payload["error"]["message"]
    mock_ctx.info.assert_not_awaited()


@pytest.mark.asyncio
async def test_screenshot_tool_element_not_found(mock_ctx, mock_webdriver):
    """Should raise a ToolError tagged ELEMENT_NOT_FOUND."""
    mock_webdriver.find_elements.return_value = []

    with pytest.raises(ToolError) as exc:
        await run_tool(mock_ctx, "screenshot", {"selector": "#missing"})

    assert error_payload(exc.value)["error"]["code"] == "ELEMENT_NOT_FOUND"
    mock_webdriver.get_screenshot_as_png.assert_not_called()


@pytest.mark.asyncio
async def test_current_page_resource(mock_ctx):
    """Should render the no-session JSON through the resource wrapper."""
    text = await resource_tools.read_resource(mock_ctx, CURRENT_PAGE_URI)

    assert json.loads(text) == {"error": "No browser session active"}


@pytest.mark.asyncio
async def test_unknown_resource_wrapper(mock_ctx):
    """Should raise a ResourceError tagged UNKNOWN_RESOURCE."""
    with pytest.raises(ResourceError) as exc:
        await resource_tools.read_resource(mock_ctx, "browser://nope")

    assert error_payload(exc.value)["error"]["code"] == "UNKNOWN_RESOURCE"


class TestClientSurface:
    """Tests through an in-memory MCP client."""

    @pytest.mark.asyncio
    async def test_list_tools_advertises_catalog_schemas(self, server):
        """tools/list should carry the wire argument names and number timeouts."""
        async with Client(server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        assert set(tools) == {
            "navigate",
            "screenshot",
            "click",
            "type",
            "wait-for-element",
            "evaluate-js",
            "get-text",
            "close-browser",
        }
        assert set(tools["screenshot"].inputSchema["properties"]) == {"selector", "fullPage"}
        timeout = tools["wait-for-element"].inputSchema["properties"]["timeout"]
        assert any(option.get("type") == "number" for option in timeout["anyOf"])

    @pytest.mark.asyncio
    async def test_fractional_timeout_accepted(self, server):
        """A fractional millisecond timeout should reach the wait."""
        async with Client(server) as client:
            result = await client.call_tool(
                "wait-for-element", {"selector": "#a", "timeout": 2500.5}
            )

        assert result.content[0].text == "Element found: #a"

    @pytest.mark.asyncio
    async def test_wrong_argument_type_is_structured(self, server, mock_driver_factory):
        """A wrongly typed argument should fail with the INVALID_ARGUMENT payload."""
        async with Client(server) as client:
            with pytest.raises(ToolError) as exc:
                await client.call_tool(
                    "wait-for-element", {"selector": "#a", "timeout": "soon"}
                )

        payload = error_payload(exc.value)
        assert payload["success"] is False
        assert payload["error"]["code"] == "INVALID_ARGUMENT"
        assert "timeout" in payload["error"]["message"]
        mock_driver_factory.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_screenshot_full_page_over_the_wire(self, server, mock_webdriver):
        """The fullPage argument should reach the dispatcher under its wire name."""
        mock_webdriver.execute_script.return_value = {"width": 800, "height": 2000}

        async with Client(server) as client:
            result = await client.call_tool("screenshot", {"fullPage": True})

        assert result.content[0].type == "image"
        assert result.content[1].text == "Screenshot taken of full page"

    @pytest.mark.asyncio
    async def test_close_browser_over_the_wire(self, server, session_manager):
        """Should close the session and confirm."""
        await session_manager.ensure_session()

        async with Client(server) as client:
            result = await client.call_tool("close-browser", {})

        assert result.content[0].text == "Browser session closed"
        assert session_manager.has_session is False

    @pytest.mark.asyncio
    async def test_list_resources(self, server):
        """resources/list should describe the two fixed resources."""
        async with Client(server) as client:
            listed = {str(r.uri): r for r in await client.list_resources()}

        assert set(listed) == {CONSOLE_LOGS_URI, CURRENT_PAGE_URI}
        assert listed[CONSOLE_LOGS_URI].mimeType == "text/plain"
        assert listed[CURRENT_PAGE_URI].mimeType == "application/json"

    @pytest.mark.asyncio
    async def test_read_console_logs(self, server):
        """Reading console logs without a session returns the placeholder."""
        async with Client(server) as client:
            contents = await client.read_resource(CONSOLE_LOGS_URI)

        assert contents[0].text == "No console logs available"

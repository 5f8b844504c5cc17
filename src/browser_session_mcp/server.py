"""Main FastMCP server with lifespan management."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from . import __version__
from .config import Settings, settings
from .core.dispatcher import ToolDispatcher
from .core.driver_factory import DriverFactory
from .core.resources import ResourceProvider
from .core.session_manager import CleanupScheduler, SessionManager
from .tools import create_tool_router, import_all_tools

# Configure logging (stderr, so the stdio transport stays clean)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Lifespan context holding all services shared across tools."""

    session_manager: SessionManager
    dispatcher: ToolDispatcher
    resources: ResourceProvider
    settings: Settings


def build_app_context(config: Settings) -> AppContext:
    """Wire the driver factory, session manager, dispatcher and resources."""
    driver_factory = DriverFactory(
        user_agent=config.user_agent,
        viewport_width=config.viewport_width,
        viewport_height=config.viewport_height,
        headless=config.headless,
        chrome_binary=config.chrome_binary,
        chromedriver_path=config.chromedriver_path,
        grid_url=config.selenium_grid_url,
        page_load_timeout=config.page_load_timeout_seconds,
        script_timeout=config.script_timeout_seconds,
    )

    session_manager = SessionManager(
        driver_factory=driver_factory,
        idle_timeout_seconds=config.session_idle_timeout_seconds,
        log_capacity=config.console_log_capacity,
        console_poll_interval=config.console_poll_interval_seconds,
    )

    return AppContext(
        session_manager=session_manager,
        dispatcher=ToolDispatcher(
            session_manager,
            page_text_max_chars=config.page_text_max_chars,
            default_wait_timeout_ms=config.default_wait_timeout_ms,
        ),
        resources=ResourceProvider(session_manager),
        settings=config,
    )


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """
    Initialize services on startup, cleanup on shutdown.

    This lifespan function:
    1. Builds the session manager, dispatcher and resource provider
    2. Starts the idle-session cleanup scheduler
    3. Yields the context for tools to access
    4. On shutdown, stops the scheduler and closes the browser
    """
    logger.info(f"Starting browser session MCP server {__version__} ({settings.transport})")

    app_ctx = build_app_context(settings)

    scheduler = CleanupScheduler(
        session_manager=app_ctx.session_manager,
        interval_seconds=settings.sweep_interval_seconds,
    )
    await scheduler.start()

    try:
        yield app_ctx
    finally:
        logger.info("Shutting down browser session MCP server...")
        await scheduler.stop()
        closed = await app_ctx.session_manager.close()
        logger.info(f"Shutdown complete (browser closed: {closed})")


def create_server() -> FastMCP:
    """Create and configure the main MCP server (without tools - they're added async)."""
    return FastMCP(
        name="browser-session-mcp",
        instructions=(
            "Browser automation over a single shared session. "
            "The browser starts on the first tool call; navigate to a page, then "
            "inspect and interact with it using CSS selectors. Console logs and the "
            "current page are available as resources. Call close-browser when done; "
            "idle sessions are closed automatically after 30 minutes."
        ),
        lifespan=app_lifespan,
    )


async def setup_server(mcp: FastMCP) -> None:
    """Import all tool routers into the server (async)."""
    tool_router = create_tool_router()
    await import_all_tools(tool_router)
    await mcp.import_server(tool_router)


# Create the global server instance
mcp = create_server()


# Health check endpoint, served with the http transport only
@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> Response:
    """Health check endpoint for container orchestration."""
    return JSONResponse({"status": "ok", "version": __version__})


def run_server() -> None:
    """Run the MCP server over stdio (default) or HTTP."""
    # Setup tools before running
    asyncio.run(setup_server(mcp))

    if settings.transport == "http":
        mcp.run(transport="http", host=settings.host, port=settings.port)
    else:
        mcp.run(transport="stdio")

"""Tests for the browser launch profile."""

import pytest
from unittest.mock import MagicMock, patch
from selenium.common.exceptions import WebDriverException

from browser_session_mcp.config import DEFAULT_USER_AGENT
from browser_session_mcp.core.driver_factory import LAUNCH_FLAGS, DriverFactory
from browser_session_mcp.core.exceptions import SessionCreationError


@pytest.fixture
def factory():
    return DriverFactory(user_agent=DEFAULT_USER_AGENT, headless=True)


def test_options_carry_fixed_profile(factory):
    """Should apply relaxation flags, viewport, user agent and headless mode."""
    options = factory.build_options()

    for flag in LAUNCH_FLAGS:
        assert flag in options.arguments
    assert "--headless=new" in options.arguments
    assert "--window-size=1280,720" in options.arguments
    assert f"--user-agent={DEFAULT_USER_AGENT}" in options.arguments


def test_options_enable_console_logging(factory):
    """Should ask the driver to buffer browser console messages."""
    options = factory.build_options()

    assert options.to_capabilities()["goog:loggingPrefs"] == {"browser": "ALL"}


def test_options_binary_override():
    """Should honour an executable path override and headed mode."""
    factory = DriverFactory(
        user_agent="test-agent",
        headless=False,
        chrome_binary="/opt/chromium/chrome",
    )
    options = factory.build_options()

    assert options.binary_location == "/opt/chromium/chrome"
    assert "--headless=new" not in options.arguments


@pytest.mark.asyncio
async def test_create_local_driver(factory):
    """Should launch local Chrome and apply timeouts and viewport."""
    driver = MagicMock()
    with patch("browser_session_mcp.core.driver_factory.webdriver.Chrome", return_value=driver) as chrome:
        created = await factory.create()

    assert created is driver
    chrome.assert_called_once()
    driver.set_page_load_timeout.assert_called_once_with(30)
    driver.set_window_size.assert_called_once_with(1280, 720)


@pytest.mark.asyncio
async def test_create_remote_driver_when_grid_configured():
    """Should connect to the Grid instead of launching locally."""
    factory = DriverFactory(user_agent="test-agent", grid_url="http://grid:4444")
    with patch("browser_session_mcp.core.driver_factory.webdriver.Remote") as remote:
        await factory.create()

    assert remote.call_args.kwargs["command_executor"] == "http://grid:4444"


@pytest.mark.asyncio
async def test_launch_failure_raises_session_creation_error(factory):
    """Should wrap engine launch failures."""
    with patch(
        "browser_session_mcp.core.driver_factory.webdriver.Chrome",
        side_effect=WebDriverException("chrome not reachable"),
    ):
        with pytest.raises(SessionCreationError) as exc:
            await factory.create()

    assert "chrome not reachable" in str(exc.value)

"""Pytest fixtures for testing the browser session MCP server."""

import pytest
from unittest.mock import MagicMock, AsyncMock

from browser_session_mcp.core.dispatcher import ToolDispatcher
from browser_session_mcp.core.driver_factory import DriverFactory
from browser_session_mcp.core.resources import ResourceProvider
from browser_session_mcp.core.session_manager import SessionManager


@pytest.fixture
def mock_webelement():
    """Create a mock WebElement."""
    element = MagicMock()
    element.tag_name = "button"
    element.text = "Click Me"
    element.get_attribute.return_value = "Click Me"
    element.screenshot_as_base64 = "ELEMENT_PNG_B64"
    return element


@pytest.fixture
def mock_webdriver(mock_webelement):
    """Create a mock WebDriver with common methods."""
    driver = MagicMock()

    # Navigation
    driver.get = MagicMock()
    driver.current_url = "https://example.com/"
    driver.title = "Example Domain"
    driver.current_window_handle = "window1"

    # Execute script
    driver.execute_script = MagicMock(return_value="Example Domain text")

    # Find elements
    driver.find_element = MagicMock(return_value=mock_webelement)
    driver.find_elements = MagicMock(return_value=[mock_webelement])

    # Screenshot
    driver.get_screenshot_as_png = MagicMock(return_value=b"PNG_DATA")

    # Window management
    driver.get_window_size = MagicMock(return_value={"width": 1280, "height": 720})
    driver.set_window_size = MagicMock()

    # Cleanup
    driver.quit = MagicMock()

    # Console
    driver.get_log = MagicMock(return_value=[])

    return driver


@pytest.fixture
def mock_driver_factory(mock_webdriver):
    """Create mock DriverFactory that returns mock WebDriver."""
    factory = MagicMock(spec=DriverFactory)
    factory.create = AsyncMock(return_value=mock_webdriver)
    return factory


@pytest.fixture
def session_manager(mock_driver_factory):
    """Create SessionManager with mocked driver factory and no console pump."""
    return SessionManager(
        driver_factory=mock_driver_factory,
        idle_timeout_seconds=1800,
        log_capacity=100,
        console_poll_interval=0,
    )


@pytest.fixture
def dispatcher(session_manager):
    """Create ToolDispatcher over the mocked session manager."""
    return ToolDispatcher(session_manager, page_text_max_chars=1000, default_wait_timeout_ms=5000)


@pytest.fixture
def resources(session_manager):
    """Create ResourceProvider over the mocked session manager."""
    return ResourceProvider(session_manager)

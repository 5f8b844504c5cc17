"""Async page primitives over a synchronous Selenium WebDriver."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

import anyio
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException, WebDriverException

from .exceptions import ElementNotFoundError, WaitTimeoutError

logger = logging.getLogger(__name__)

# Chrome log levels -> console message types
CONSOLE_TYPES = {
    "SEVERE": "error",
    "WARNING": "warning",
    "INFO": "log",
    "DEBUG": "debug",
}

# Evaluates a code string as an expression, like a devtools console
EVALUATE_SCRIPT = "return eval(arguments[0]);"

PAGE_TEXT_SCRIPT = "return document.body ? (document.body.textContent || '') : '';"

PAGE_SIZE_SCRIPT = (
    "return {width: document.documentElement.scrollWidth, "
    "height: document.documentElement.scrollHeight};"
)


def format_console_entry(entry: dict) -> str:
    """Render a driver log entry as ``[type] text``."""
    level = str(entry.get("level", "INFO")).upper()
    kind = CONSOLE_TYPES.get(level, level.lower())
    return f"[{kind}] {entry.get('message', '')}"


class BrowserPage:
    """
    The single page of a gateway session.

    Every Selenium call is blocking, so each primitive runs it in a worker
    thread and is a suspension point for the event loop. Selectors are CSS.
    """

    def __init__(self, driver: WebDriver):
        self.driver = driver

    async def _run(self, fn):
        return await anyio.to_thread.run_sync(fn)

    async def is_connected(self) -> bool:
        """Whether the driver still answers commands for its window."""
        try:
            await self._run(lambda: self.driver.current_window_handle)
            return True
        except WebDriverException:
            return False

    async def url(self) -> str:
        return await self._run(lambda: self.driver.current_url)

    async def title(self) -> str:
        return await self._run(lambda: self.driver.title)

    async def goto(self, url: str) -> None:
        """Load ``url``; returns once the document has finished loading."""
        await self._run(lambda: self.driver.get(url))

    async def query(self, selector: str) -> Optional[WebElement]:
        """First element matching ``selector``, or None."""
        elements = await self._run(
            lambda: self.driver.find_elements(By.CSS_SELECTOR, selector)
        )
        return elements[0] if elements else None

    async def require(self, selector: str) -> WebElement:
        element = await self.query(selector)
        if element is None:
            raise ElementNotFoundError(selector)
        return element

    async def click(self, selector: str) -> None:
        element = await self.require(selector)
        await self._run(
            lambda: self.driver.execute_script(
                "arguments[0].scrollIntoView({block: 'center'});", element
            )
        )
        await self._run(element.click)

    async def type(self, selector: str, text: str, clear: bool = True) -> None:
        """Type into the matched element, replacing its content when ``clear``."""
        element = await self.require(selector)
        if clear:
            # Triple click selects the field's whole content
            await self._run(
                lambda: ActionChains(self.driver)
                .move_to_element(element)
                .click()
                .click()
                .click()
                .perform()
            )
        await self._run(lambda: element.send_keys(text))

    async def wait_for_selector(self, selector: str, timeout_ms: float) -> WebElement:
        wait = WebDriverWait(self.driver, timeout_ms / 1000.0)
        try:
            return await self._run(
                lambda: wait.until(
                    EC.presence_of_element_located((By.CSS_SELECTOR, selector))
                )
            )
        except TimeoutException as e:
            raise WaitTimeoutError(f"selector '{selector}'", timeout_ms) from e

    async def evaluate(self, code: str) -> Any:
        return await self._run(lambda: self.driver.execute_script(EVALUATE_SCRIPT, code))

    async def text_content(self, selector: Optional[str] = None) -> str:
        """Text content of the matched element, or of the whole document body."""
        if not selector:
            text = await self._run(lambda: self.driver.execute_script(PAGE_TEXT_SCRIPT))
        else:
            element = await self.require(selector)
            text = await self._run(lambda: element.get_attribute("textContent"))
        return text or ""

    async def screenshot(
        self, selector: Optional[str] = None, full_page: bool = False
    ) -> str:
        """
        Capture a PNG screenshot.

        Args:
            selector: Capture only the first matching element
            full_page: Capture the whole scrollable page instead of the viewport

        Returns:
            Base64-encoded PNG data

        Raises:
            ElementNotFoundError: If ``selector`` matches nothing
        """
        if selector:
            element = await self.require(selector)
            return await self._run(lambda: element.screenshot_as_base64)

        if not full_page:
            png = await self._run(self.driver.get_screenshot_as_png)
            return base64.b64encode(png).decode("utf-8")

        return await self._run(self._full_page_screenshot)

    def _full_page_screenshot(self) -> str:
        # Grow the window to the document size, capture, then restore
        original = self.driver.get_window_size()
        size = self.driver.execute_script(PAGE_SIZE_SCRIPT)
        try:
            self.driver.set_window_size(
                max(size["width"], original["width"]),
                max(size["height"], original["height"]),
            )
            png = self.driver.get_screenshot_as_png()
        finally:
            self.driver.set_window_size(original["width"], original["height"])
        return base64.b64encode(png).decode("utf-8")

    async def drain_console(self) -> list[str]:
        """
        Take the console messages buffered by the driver since the last drain.

        Returns an empty list when the driver does not expose a browser log.
        """
        try:
            entries = await self._run(lambda: self.driver.get_log("browser"))
        except (WebDriverException, AttributeError) as e:
            logger.debug(f"Console log unavailable: {e}")
            return []
        return [format_console_entry(entry) for entry in entries or []]

    async def close(self) -> None:
        await self._run(self.driver.quit)

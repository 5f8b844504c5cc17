"""Factory for launching Chrome WebDriver instances for the gateway session."""

from typing import Optional
import anyio
from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.common.exceptions import WebDriverException

from .exceptions import SessionCreationError

# Security-relaxation flags every session is launched with
LAUNCH_FLAGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-web-security",
    "--allow-running-insecure-content",
)


class DriverFactory:
    """
    Creates Chrome WebDriver instances with the gateway's fixed launch profile.

    Launches a local chromedriver by default, or connects to a Selenium Grid
    when ``grid_url`` is set. All WebDriver creation is run in a thread pool to
    avoid blocking the async event loop, since Selenium's API is synchronous.
    """

    def __init__(
        self,
        user_agent: str,
        viewport_width: int = 1280,
        viewport_height: int = 720,
        headless: bool = True,
        chrome_binary: Optional[str] = None,
        chromedriver_path: Optional[str] = None,
        grid_url: Optional[str] = None,
        page_load_timeout: int = 30,
        script_timeout: int = 30,
    ):
        self.user_agent = user_agent
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.headless = headless
        self.chrome_binary = chrome_binary
        self.chromedriver_path = chromedriver_path
        self.grid_url = grid_url
        self.page_load_timeout = page_load_timeout
        self.script_timeout = script_timeout

    async def create(self) -> WebDriver:
        """
        Launch a new browser with one open page.

        Returns:
            Configured WebDriver instance

        Raises:
            SessionCreationError: If the browser cannot be launched
        """
        options = self.build_options()

        try:
            driver = await anyio.to_thread.run_sync(lambda: self._launch(options))

            await anyio.to_thread.run_sync(
                lambda: driver.set_page_load_timeout(self.page_load_timeout)
            )
            await anyio.to_thread.run_sync(
                lambda: driver.set_script_timeout(self.script_timeout)
            )
            await anyio.to_thread.run_sync(
                lambda: driver.set_window_size(self.viewport_width, self.viewport_height)
            )

            return driver

        except WebDriverException as e:
            raise SessionCreationError(e.msg or str(e)) from e
        except OSError as e:
            raise SessionCreationError(str(e)) from e

    def _launch(self, options: webdriver.ChromeOptions) -> WebDriver:
        if self.grid_url:
            return webdriver.Remote(command_executor=self.grid_url, options=options)
        service = Service(executable_path=self.chromedriver_path) if self.chromedriver_path else Service()
        return webdriver.Chrome(options=options, service=service)

    def build_options(self) -> webdriver.ChromeOptions:
        """Build the Chrome options for the fixed launch profile."""
        options = webdriver.ChromeOptions()

        for flag in LAUNCH_FLAGS:
            options.add_argument(flag)
        if self.headless:
            options.add_argument("--headless=new")
        options.add_argument(f"--window-size={self.viewport_width},{self.viewport_height}")
        options.add_argument(f"--user-agent={self.user_agent}")

        if self.chrome_binary:
            options.binary_location = self.chrome_binary

        # Buffer console messages on the driver so they can be drained later
        options.set_capability("goog:loggingPrefs", {"browser": "ALL"})

        return options

"""Configuration settings for the browser session MCP server."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    # Server settings
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000

    # Browser launch
    headless: bool = True
    chrome_binary: Optional[str] = None  # Executable path override
    chromedriver_path: Optional[str] = None
    selenium_grid_url: Optional[str] = None  # Use a remote Grid instead of local chromedriver
    viewport_width: int = 1280
    viewport_height: int = 720
    user_agent: str = DEFAULT_USER_AGENT

    # Session management
    session_idle_timeout_seconds: int = 1800  # 30 minutes
    sweep_interval_seconds: int = 60  # 1 minute

    # Console capture
    console_log_capacity: int = 100
    console_poll_interval_seconds: float = 1.0  # 0 disables the background pump

    # Content limits
    page_text_max_chars: int = 1000

    # Timeouts
    default_wait_timeout_ms: int = 5000
    page_load_timeout_seconds: int = 30
    script_timeout_seconds: int = 30

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "BROWSER_MCP_"}


# Global settings instance
settings = Settings()

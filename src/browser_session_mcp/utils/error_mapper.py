"""Map Selenium exceptions onto the gateway's typed error taxonomy."""

import json
from dataclasses import dataclass
from typing import Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    TimeoutException,
    SessionNotCreatedException,
    InvalidArgumentException,
    WebDriverException,
)

from ..core.exceptions import (
    BrowserGatewayError,
    ErrorKind,
    ElementNotFoundError,
    EngineExecutionError,
    InvalidArgumentError,
    SessionCreationError,
)

# Prefix shared by every failure surfaced to MCP clients
FAILURE_PREFIX = "Tool execution failed"

# Suggestions for each error kind to help the client recover
SUGGESTIONS: dict[ErrorKind, str] = {
    ErrorKind.SESSION_CREATION_FAILED: (
        "The browser could not be launched. Check that Chrome and chromedriver are "
        "installed (or the Selenium Grid is reachable); the next call retries."
    ),
    ErrorKind.ELEMENT_NOT_FOUND: (
        "No element matches the selector. Verify the CSS selector, or use "
        "wait-for-element first if the element loads dynamically."
    ),
    ErrorKind.INVALID_ARGUMENT: (
        "Invalid argument provided. Check parameter names, types and values."
    ),
    ErrorKind.TIMEOUT: (
        "Operation timed out. Increase the timeout value or check if the element "
        "can ever appear."
    ),
    ErrorKind.UNKNOWN_TOOL: "Use tools/list to see the available tools.",
    ErrorKind.UNKNOWN_RESOURCE: "Use resources/list to see the available resources.",
    ErrorKind.ENGINE_ERROR: (
        "The browser engine reported an error. If the browser crashed, the next "
        "call starts a fresh session."
    ),
}


@dataclass
class ToolErrorResponse:
    """Structured error payload for MCP tools and resources."""

    error_code: str
    message: str
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for tool response."""
        result = {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
            },
        }
        if self.suggestion:
            result["error"]["suggestion"] = self.suggestion
        return result

    def to_message(self) -> str:
        """Single-line message carried by the MCP error."""
        return f"{FAILURE_PREFIX}: {json.dumps(self.to_dict())}"


def map_engine_error(exc: Exception) -> BrowserGatewayError:
    """
    Convert any exception into a gateway error.

    Gateway errors pass through unchanged; Selenium exceptions are mapped by
    type and everything else becomes an EngineExecutionError carrying the
    original message.

    Args:
        exc: The exception to map

    Returns:
        A BrowserGatewayError subclass instance
    """
    if isinstance(exc, BrowserGatewayError):
        return exc

    if isinstance(exc, WebDriverException):
        message = exc.msg or str(exc)
        if isinstance(exc, NoSuchElementException):
            return ElementNotFoundError(message)
        if isinstance(exc, SessionNotCreatedException):
            return SessionCreationError(message)
        if isinstance(exc, InvalidArgumentException):
            return InvalidArgumentError(message)
        if isinstance(exc, TimeoutException):
            return EngineExecutionError(f"Engine timed out: {message}")
        return EngineExecutionError(message)

    return EngineExecutionError(str(exc) or type(exc).__name__)


def create_error_response(exc: Exception) -> ToolErrorResponse:
    """
    Create a structured error response with suggestion.

    Args:
        exc: Any exception raised while serving a request

    Returns:
        ToolErrorResponse with suggestion from SUGGESTIONS
    """
    error = map_engine_error(exc)
    return ToolErrorResponse(
        error_code=error.kind.value,
        message=str(error),
        suggestion=SUGGESTIONS.get(error.kind),
    )

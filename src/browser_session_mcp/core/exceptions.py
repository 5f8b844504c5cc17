"""Domain-specific exceptions for the browser session gateway."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories callers can branch on."""

    SESSION_CREATION_FAILED = "SESSION_CREATION_FAILED"
    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    UNKNOWN_RESOURCE = "UNKNOWN_RESOURCE"
    ENGINE_ERROR = "ENGINE_ERROR"


class BrowserGatewayError(Exception):
    """Base exception for all gateway errors."""

    kind: ErrorKind = ErrorKind.ENGINE_ERROR


class SessionCreationError(BrowserGatewayError):
    """Raised when the browser cannot be launched or its page opened."""

    kind = ErrorKind.SESSION_CREATION_FAILED

    def __init__(self, message: str):
        super().__init__(f"Failed to create browser session: {message}")


class ElementNotFoundError(BrowserGatewayError):
    """Raised when a selector matches no element on the page."""

    kind = ErrorKind.ELEMENT_NOT_FOUND

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Element not found: {selector}")


class InvalidArgumentError(BrowserGatewayError):
    """Raised when tool arguments are missing or malformed."""

    kind = ErrorKind.INVALID_ARGUMENT


class WaitTimeoutError(BrowserGatewayError):
    """Raised when a wait condition times out."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, condition: str, timeout_ms: float):
        self.condition = condition
        self.timeout_ms = timeout_ms
        super().__init__(f"Timeout ({timeout_ms}ms) waiting for: {condition}")


class UnknownToolError(BrowserGatewayError):
    """Raised when a tool name is not in the catalog."""

    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownResourceError(BrowserGatewayError):
    """Raised when a resource URI is not in the catalog."""

    kind = ErrorKind.UNKNOWN_RESOURCE

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class EngineExecutionError(BrowserGatewayError):
    """Raised when the automation engine fails (disconnects, script errors)."""

    kind = ErrorKind.ENGINE_ERROR

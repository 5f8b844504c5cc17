"""Core business logic for the browser session gateway."""

from .exceptions import (
    ErrorKind,
    BrowserGatewayError,
    SessionCreationError,
    ElementNotFoundError,
    InvalidArgumentError,
    WaitTimeoutError,
    UnknownToolError,
    UnknownResourceError,
    EngineExecutionError,
)
from .log_buffer import LogBuffer
from .page import BrowserPage
from .session_manager import SessionManager, BrowserSession, CleanupScheduler
from .resources import ResourceProvider

__all__ = [
    "ErrorKind",
    "BrowserGatewayError",
    "SessionCreationError",
    "ElementNotFoundError",
    "InvalidArgumentError",
    "WaitTimeoutError",
    "UnknownToolError",
    "UnknownResourceError",
    "EngineExecutionError",
    "LogBuffer",
    "BrowserPage",
    "SessionManager",
    "BrowserSession",
    "CleanupScheduler",
    "ResourceProvider",
]

"""Single-session browser automation gateway served over MCP."""

__version__ = "0.1.0"

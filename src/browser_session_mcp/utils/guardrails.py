"""URL and text guardrails applied before touching the browser."""

ALLOWED_SCHEMES = ("http://", "https://")

TRUNCATION_MARKER = "..."


def is_safe_url(url: str) -> bool:
    """
    Check if a URL uses a supported protocol.

    Args:
        url: URL to check

    Returns:
        True if the URL starts with http:// or https://
    """
    return url.startswith(ALLOWED_SCHEMES)


def truncate_text(text: str, max_chars: int, marker: str = TRUNCATION_MARKER) -> str:
    """
    Cut text to ``max_chars`` characters, appending ``marker`` if anything was cut.

    Text at or under the limit is returned unchanged.
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + marker

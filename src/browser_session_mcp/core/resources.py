"""Read-only views of the session: console history and current page."""

from __future__ import annotations

import json
from dataclasses import dataclass

from .exceptions import UnknownResourceError
from .session_manager import SessionManager

CONSOLE_LOGS_URI = "browser://console-logs"
CURRENT_PAGE_URI = "browser://current-page"

NO_CONSOLE_LOGS = "No console logs available"


@dataclass(frozen=True)
class ResourceInfo:
    uri: str
    mime_type: str
    name: str
    description: str

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "mimeType": self.mime_type,
            "name": self.name,
            "description": self.description,
        }


RESOURCES: dict[str, ResourceInfo] = {
    CONSOLE_LOGS_URI: ResourceInfo(
        uri=CONSOLE_LOGS_URI,
        mime_type="text/plain",
        name="Console Logs",
        description="Browser console logs from the current session",
    ),
    CURRENT_PAGE_URI: ResourceInfo(
        uri=CURRENT_PAGE_URI,
        mime_type="application/json",
        name="Current Page Info",
        description="Information about the currently loaded page",
    ),
}


class ResourceProvider:
    """Serves resource reads fresh each time. Reads never launch a browser."""

    def __init__(self, session_manager: SessionManager):
        self._sessions = session_manager

    @staticmethod
    def list_resources() -> list[dict]:
        return [info.to_dict() for info in RESOURCES.values()]

    async def read(self, uri: str) -> str:
        """
        Render the resource at ``uri``.

        Raises:
            UnknownResourceError: If ``uri`` is not in the catalog
        """
        if uri == CONSOLE_LOGS_URI:
            return await self.console_logs()
        if uri == CURRENT_PAGE_URI:
            return await self.current_page()
        raise UnknownResourceError(uri)

    async def console_logs(self) -> str:
        await self._sessions.collect_console()
        entries = self._sessions.logs.snapshot()
        return "\n".join(entries) if entries else NO_CONSOLE_LOGS

    async def current_page(self) -> str:
        session = await self._sessions.current()
        if session is None:
            return json.dumps({"error": "No browser session active"}, indent=2)
        url = await session.page.url()
        title = await session.page.title()
        return json.dumps({"url": url, "title": title, "sessionActive": True}, indent=2)

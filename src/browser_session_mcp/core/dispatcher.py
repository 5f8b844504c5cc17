"""Tool catalog and dispatch onto the managed browser session."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from mcp.types import ImageContent, TextContent
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import BrowserGatewayError, InvalidArgumentError, UnknownToolError
from .page import BrowserPage
from .session_manager import SessionManager
from ..utils.error_mapper import map_engine_error
from ..utils.guardrails import is_safe_url, truncate_text

logger = logging.getLogger(__name__)

Content = Union[TextContent, ImageContent]


class ToolArguments(BaseModel):
    """Base for tool argument models. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NavigateArgs(ToolArguments):
    url: str = Field(description="The URL to navigate to")

    @field_validator("url")
    @classmethod
    def _require_http_scheme(cls, url: str) -> str:
        if not is_safe_url(url):
            raise ValueError("URL must start with http:// or https://")
        return url


class ScreenshotArgs(ToolArguments):
    selector: Optional[str] = Field(
        default=None,
        description="Optional CSS selector to screenshot a specific element",
    )
    full_page: bool = Field(
        default=False,
        alias="fullPage",
        description="Take a full page screenshot (default: false)",
    )


class ClickArgs(ToolArguments):
    selector: str = Field(description="CSS selector of the element to click")


class TypeArgs(ToolArguments):
    selector: str = Field(description="CSS selector of the input field")
    text: str = Field(description="Text to type")
    clear: bool = Field(
        default=True,
        description="Clear the field before typing (default: true)",
    )


class WaitForElementArgs(ToolArguments):
    selector: str = Field(description="CSS selector to wait for")
    timeout: Optional[float] = Field(
        default=None,
        ge=0,
        description="Maximum time to wait in milliseconds (default: 5000)",
    )


class EvaluateArgs(ToolArguments):
    code: str = Field(description="JavaScript code to execute")


class GetTextArgs(ToolArguments):
    selector: Optional[str] = Field(
        default=None,
        description="CSS selector to get text from (optional - gets page text if not provided)",
    )


class NoArgs(ToolArguments):
    pass


@dataclass(frozen=True)
class ToolSpec:
    """One entry of the tool catalog."""

    name: str
    description: str
    arguments: type[ToolArguments]
    handler: str
    needs_session: bool = True

    def input_schema(self) -> dict:
        """JSON-schema object describing the tool's arguments."""
        schema = self.arguments.model_json_schema(by_alias=True)
        return {
            "type": "object",
            "properties": schema.get("properties", {}),
            "required": schema.get("required", []),
        }


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec("navigate", "Navigate to a URL in the browser", NavigateArgs, "_navigate"),
        ToolSpec(
            "screenshot",
            "Take a screenshot of the current page or a specific element",
            ScreenshotArgs,
            "_screenshot",
        ),
        ToolSpec("click", "Click an element on the page", ClickArgs, "_click"),
        ToolSpec("type", "Type text into an input field", TypeArgs, "_type"),
        ToolSpec(
            "wait-for-element",
            "Wait for an element to appear on the page",
            WaitForElementArgs,
            "_wait_for_element",
        ),
        ToolSpec(
            "evaluate-js",
            "Execute JavaScript code in the browser context",
            EvaluateArgs,
            "_evaluate_js",
        ),
        ToolSpec(
            "get-text",
            "Get text content from an element or the page",
            GetTextArgs,
            "_get_text",
        ),
        ToolSpec(
            "close-browser",
            "Close the current browser session",
            NoArgs,
            "_close_browser",
            needs_session=False,
        ),
    )
}


def text(value: str) -> TextContent:
    return TextContent(type="text", text=value)


class ToolDispatcher:
    """
    Maps a tool name and argument mapping onto one session action.

    Arguments are validated before the browser is touched. Session tools run
    under a lease, so the session is created on demand, protected from idle
    eviction while the action runs, and stamped active once it succeeds.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        page_text_max_chars: int = 1000,
        default_wait_timeout_ms: int = 5000,
    ):
        self._sessions = session_manager
        self._page_text_max_chars = page_text_max_chars
        self._default_wait_timeout_ms = default_wait_timeout_ms

    @staticmethod
    def list_tools() -> list[dict]:
        """The catalog with JSON-schema input descriptors."""
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "inputSchema": spec.input_schema(),
            }
            for spec in TOOLS.values()
        ]

    async def dispatch(self, name: str, arguments: Optional[dict[str, Any]] = None) -> list[Content]:
        """
        Run one tool.

        Args:
            name: Tool name from the catalog
            arguments: Tool arguments keyed by their wire names

        Returns:
            Ordered content items

        Raises:
            BrowserGatewayError: Typed failure; engine errors are mapped
        """
        spec = TOOLS.get(name)
        if spec is None:
            raise UnknownToolError(name)

        try:
            args = spec.arguments.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentError(_describe_validation_error(name, e)) from e

        handler = getattr(self, spec.handler)
        try:
            if not spec.needs_session:
                return await handler(args)
            async with self._sessions.lease() as session:
                return await handler(session.page, args)
        except BrowserGatewayError:
            raise
        except Exception as e:
            logger.debug(f"Tool {name} failed: {e}")
            raise map_engine_error(e) from e

    async def _navigate(self, page: BrowserPage, args: NavigateArgs) -> list[Content]:
        await page.goto(args.url)
        return [text(f"Successfully navigated to {args.url}")]

    async def _screenshot(self, page: BrowserPage, args: ScreenshotArgs) -> list[Content]:
        data = await page.screenshot(selector=args.selector, full_page=args.full_page)
        if args.selector:
            caption = f"Screenshot taken of element: {args.selector}"
        else:
            caption = f"Screenshot taken of {'full page' if args.full_page else 'viewport'}"
        return [
            ImageContent(type="image", data=data, mimeType="image/png"),
            text(caption),
        ]

    async def _click(self, page: BrowserPage, args: ClickArgs) -> list[Content]:
        await page.click(args.selector)
        return [text(f"Successfully clicked element: {args.selector}")]

    async def _type(self, page: BrowserPage, args: TypeArgs) -> list[Content]:
        await page.type(args.selector, args.text, clear=args.clear)
        return [text(f'Successfully typed "{args.text}" into {args.selector}')]

    async def _wait_for_element(self, page: BrowserPage, args: WaitForElementArgs) -> list[Content]:
        timeout = args.timeout if args.timeout is not None else self._default_wait_timeout_ms
        await page.wait_for_selector(args.selector, timeout)
        return [text(f"Element found: {args.selector}")]

    async def _evaluate_js(self, page: BrowserPage, args: EvaluateArgs) -> list[Content]:
        result = await page.evaluate(args.code)
        return [text(f"JavaScript executed successfully. Result: {json.dumps(result, default=str)}")]

    async def _get_text(self, page: BrowserPage, args: GetTextArgs) -> list[Content]:
        content = await page.text_content(args.selector)
        if args.selector:
            return [text(f"Text from {args.selector}: {content}")]
        return [text(f"Page text: {truncate_text(content, self._page_text_max_chars)}")]

    async def _close_browser(self, args: NoArgs) -> list[Content]:
        await self._sessions.close()
        return [text("Browser session closed")]


def _describe_validation_error(tool: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid arguments for {tool}: " + "; ".join(problems)

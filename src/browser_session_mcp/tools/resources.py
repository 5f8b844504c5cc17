"""Read-only resources: console log history and current page info."""

from fastmcp import FastMCP, Context
from fastmcp.exceptions import ResourceError

from ..core.resources import ResourceProvider
from ..utils.error_mapper import create_error_response

resources_router = FastMCP(
    name="BrowserResources",
    instructions="Console logs and current page information",
)


def get_context(ctx: Context):
    """Helper to retrieve app context from lifespan."""
    return ctx.request_context.lifespan_context


async def read_resource(ctx: Context, uri: str) -> str:
    """Read a resource, raising a structured ResourceError on failure."""
    try:
        return await get_context(ctx).resources.read(uri)
    except Exception as e:
        raise ResourceError(create_error_response(e).to_message()) from e


def register_resource(entry: dict[str, str]) -> None:
    """Register one catalog resource; every read goes through ResourceProvider."""
    uri = entry["uri"]

    async def read(ctx: Context) -> str:
        return await read_resource(ctx, uri)

    resources_router.resource(
        uri,
        name=entry["name"],
        description=entry["description"],
        mime_type=entry["mimeType"],
    )(read)


for _entry in ResourceProvider.list_resources():
    register_resource(_entry)

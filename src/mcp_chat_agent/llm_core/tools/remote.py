"""Provider-neutral view of a remote tool server: advertised tools, calls and text extraction."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, AsyncContextManager, Awaitable, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..logger import get_logger

logger = get_logger(__name__)


class RemoteTool(BaseModel):
    """A tool as advertised by the remote tool server."""

    name: str
    description: Optional[str] = None
    input_schema: Optional[Dict[str, Any]] = Field(default=None)


class RemoteToolCaller(Protocol):
    """Anything that can call a tool over a live tool-server connection."""

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        """Call ``name`` remotely and return the raw response."""
        ...


class ToolServerConnection(RemoteToolCaller, Protocol):
    """One live connection to the tool server, scoped to a single turn."""

    connection_id: str

    async def list_tools(self) -> List[RemoteTool]:
        """Return the tools currently advertised by the server."""
        ...


class ToolServer(Protocol):
    """Factory for scoped tool-server connections."""

    def connect(self) -> AsyncContextManager[ToolServerConnection]:
        """Open a connection; leaving the context closes it."""
        ...


def _segment_field(segment: Any, key: str) -> Any:
    if isinstance(segment, Mapping):
        return segment.get(key)
    return getattr(segment, key, None)


def extract_text(response: Any) -> str:
    """Flatten a tool-server response into plain text.

    All ``text`` segments of the response's content array are joined with
    single spaces. Responses without a content array are stringified.

    Args:
        response: A call result object or a ``{"content": [...]}`` mapping.

    Returns:
        The textual result.
    """
    if isinstance(response, Mapping):
        content = response.get("content")
    else:
        content = getattr(response, "content", None)

    if not isinstance(content, list):
        return str(response)

    return " ".join(
        str(_segment_field(segment, "text"))
        for segment in content
        if _segment_field(segment, "type") == "text" and _segment_field(segment, "text") is not None
    )


def remote_executor(caller: RemoteToolCaller, tool_name: str) -> Callable[..., Awaitable[str]]:
    """Create the coroutine function that runs ``tool_name`` on the tool server.

    Errors propagate; the executor boundary turns them into textual results.

    Args:
        caller: The live connection used for the call.
        tool_name: Remote tool name.

    Returns:
        An async function taking the tool arguments as keyword arguments.
    """

    async def call_remote(**arguments: Any) -> str:
        logger.info("Delegating tool '%s' to the tool server...", tool_name)
        logger.debug("Tool arguments: %s", arguments)
        response = await caller.call_tool(tool_name, arguments)
        text = extract_text(response)
        logger.debug("Tool '%s' result: %s", tool_name, text[:200] + "..." if len(text) > 200 else text)
        return text

    call_remote.__name__ = tool_name
    return call_remote

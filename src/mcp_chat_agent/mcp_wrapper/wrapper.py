"""Bridge an MCP tool server into per-turn tool sets through async client sessions."""

import uuid
from contextlib import AsyncExitStack
from types import TracebackType
from typing import Any, Dict, List, Literal, Optional, Type

from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.client.stdio import stdio_client, StdioServerParameters
from mcp.types import CallToolResult
from pydantic import BaseModel, Field

from mcp_chat_agent.llm_core import ConfirmationList, RemoteTool, ToolRegistry, ToolServerConnectionError, ToolSets
from mcp_chat_agent.llm_core import build_tool_sets
from mcp_chat_agent.llm_core.logger import get_logger

logger = get_logger(__name__)

__all__ = ["MCPServerConfig", "MCPClientWrapper", "MCPToolServer"]


class MCPServerConfig(BaseModel):
    """How to reach the MCP tool server.

    Attributes:
        transport: ``"sse"`` for an HTTP server-sent-events endpoint, ``"stdio"`` for a subprocess.
        url: SSE endpoint, e.g. ``http://localhost:5173/sse``.
        command: Executable for the stdio transport.
        args: Arguments for ``command``.
        env: Optional environment for ``command``.
    """

    transport: Literal["sse", "stdio"] = "sse"
    url: Optional[str] = None
    command: Optional[str] = None
    args: List[str] = Field(default_factory=list)
    env: Optional[Dict[str, str]] = None


class MCPClientWrapper:
    """One live connection to an MCP server, usable as ``async with``.

    Each wrapper carries its own ``connection_id``; leaving the context closes
    the session and the transport.
    """

    def __init__(self, config: MCPServerConfig):
        """Initializes the wrapper without connecting.

        Args:
            config: Where and how to connect.
        """
        self._config = config
        self._session: Optional[ClientSession] = None
        self._exit_stack = AsyncExitStack()
        self.connection_id = uuid.uuid4().hex

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    async def __aenter__(self) -> "MCPClientWrapper":
        """Opens the transport and initializes the session.

        Returns:
            The connected wrapper.

        Raises:
            ToolServerConnectionError: If the server cannot be reached or initialized.
        """
        logger.debug("Connecting to MCP server (%s), connection %s...", self._config.transport, self.connection_id)
        try:
            read, write = await self._exit_stack.enter_async_context(self._open_transport())
            session = await self._exit_stack.enter_async_context(ClientSession(read, write))
            await session.initialize()
        except Exception as e:
            await self._close_quietly()
            raise ToolServerConnectionError(f"Cannot connect to MCP server: {e}", server=self._target) from e

        self._session = session
        logger.info("MCP connection %s established.", self.connection_id)
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        """Cleanly closes the session and the transport."""
        logger.debug("Closing MCP connection %s...", self.connection_id)
        try:
            await self._exit_stack.aclose()
        finally:
            self._session = None
        logger.info("MCP connection %s closed.", self.connection_id)

    async def list_tools(self) -> List[RemoteTool]:
        """Lists the tools currently advertised by the server.

        Raises:
            ToolServerConnectionError: If the client is not connected or listing fails.
        """
        if not self._session:
            raise ToolServerConnectionError("MCP Client is not connected. Use 'async with'.", server=self._target)

        logger.debug("Fetching tools from MCP server...")
        try:
            result = await self._session.list_tools()
        except Exception as e:
            raise ToolServerConnectionError(f"Listing MCP tools failed: {e}", server=self._target) from e

        logger.info("Found %d tools from MCP server.", len(result.tools))
        return [
            RemoteTool(name=tool.name, description=tool.description, input_schema=tool.inputSchema)
            for tool in result.tools
        ]

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> CallToolResult:
        """Calls a tool on the server over this connection.

        Raises:
            RuntimeError: If the session is not active.
        """
        if not self._session:
            raise RuntimeError(f"Cannot call tool '{name}': MCP session is not active.")
        return await self._session.call_tool(name, arguments=arguments)

    async def build_tool_sets(self, confirmation_list: ConfirmationList, registry_cls: Type[ToolRegistry]) -> ToolSets:
        """Lists the server's tools and partitions them for one turn.

        Args:
            confirmation_list: Tools needing approval.
            registry_cls: Concrete registry type to build.

        Returns:
            Tool sets whose executors call through this connection.
        """
        return build_tool_sets(await self.list_tools(), self, confirmation_list, registry_cls)

    def _open_transport(self) -> Any:
        if self._config.transport == "stdio":
            if not self._config.command:
                raise ValueError("The stdio transport needs a command.")
            params = StdioServerParameters(command=self._config.command, args=self._config.args, env=self._config.env)
            return stdio_client(params)
        if not self._config.url:
            raise ValueError("The sse transport needs a url.")
        return sse_client(self._config.url)

    @property
    def _target(self) -> Optional[str]:
        return self._config.url if self._config.transport == "sse" else self._config.command

    async def _close_quietly(self) -> None:
        try:
            await self._exit_stack.aclose()
        except Exception as e:
            logger.debug("Ignoring error while closing a failed MCP connection: %s", e)
        self._exit_stack = AsyncExitStack()


class MCPToolServer:
    """Hands out a fresh ``MCPClientWrapper`` per turn."""

    def __init__(self, config: MCPServerConfig):
        self.config = config

    def connect(self) -> MCPClientWrapper:
        return MCPClientWrapper(self.config)

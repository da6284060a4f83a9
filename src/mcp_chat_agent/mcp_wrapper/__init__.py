"""MCP client integration: scoped connections to a remote tool server."""

from .wrapper import MCPClientWrapper, MCPServerConfig, MCPToolServer

__all__ = ["MCPClientWrapper", "MCPServerConfig", "MCPToolServer"]

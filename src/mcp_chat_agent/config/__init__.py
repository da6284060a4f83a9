"""Environment-driven configuration."""

from .settings import ChatSettings, load_settings, LOCAL_MCP_URL

__all__ = ["ChatSettings", "load_settings", "LOCAL_MCP_URL"]

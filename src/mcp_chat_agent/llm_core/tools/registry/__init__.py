"""Tool registries and the per-turn auto/confirm partition."""

from .base import ToolRegistry
from .tool_sets import ToolSets, build_tool_sets, describe_remote_tool

__all__ = ["ToolRegistry", "ToolSets", "build_tool_sets", "describe_remote_tool"]

"""Tool execution and confirmation resolution."""

from .executor import ToolExecutor
from .resolver import PendingCallResolver, ResolutionReport

__all__ = ["ToolExecutor", "PendingCallResolver", "ResolutionReport"]

"""Conversation stream driver and the events it emits."""

from .events import (
    StreamEvent,
    AnyStreamEvent,
    TextDeltaEvent,
    ToolInputAvailableEvent,
    ToolOutputAvailableEvent,
    ToolApprovalRequestEvent,
    ErrorEvent,
    FinishEvent,
    format_sse_event,
    SSE_DONE,
)
from .driver import ConversationStreamDriver

__all__ = [
    "StreamEvent",
    "AnyStreamEvent",
    "TextDeltaEvent",
    "ToolInputAvailableEvent",
    "ToolOutputAvailableEvent",
    "ToolApprovalRequestEvent",
    "ErrorEvent",
    "FinishEvent",
    "format_sse_event",
    "SSE_DONE",
    "ConversationStreamDriver",
]

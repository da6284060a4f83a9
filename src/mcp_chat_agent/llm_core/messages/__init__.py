"""Expose provider-agnostic message models and the conversation history container."""

from .models import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolInvocation,
    InvocationState,
)
from .conversation import Conversation

__all__ = [
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolInvocation",
    "InvocationState",
    "Conversation",
]

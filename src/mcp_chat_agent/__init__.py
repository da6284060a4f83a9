"""MCP Chat Agent - streaming chat with dynamically discovered, confirmation-gated tools."""

from .llm_core import (
    GenericLLM,
    Conversation,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolInvocation,
    ToolRegistry,
    ToolDescriptor,
    ConfirmationList,
    ConfirmationOutcome,
    ConversationStreamDriver,
)
from .llm_impl.openai_api import GenericOpenAI, OpenAIToolRegistry
from .mcp_wrapper import MCPClientWrapper, MCPServerConfig, MCPToolServer
from .session import ChatSession, SessionRouter

__all__ = [
    "GenericLLM",
    "Conversation",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolInvocation",
    "ToolRegistry",
    "ToolDescriptor",
    "ConfirmationList",
    "ConfirmationOutcome",
    "ConversationStreamDriver",
    "GenericOpenAI",
    "OpenAIToolRegistry",
    "MCPClientWrapper",
    "MCPServerConfig",
    "MCPToolServer",
    "ChatSession",
    "SessionRouter",
]

"""Provider-agnostic message models for chat history."""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class InvocationState(str, Enum):
    """Lifecycle of one tool invocation, derived from the conversation."""

    REQUESTED = "requested"
    RESOLVED = "resolved"


class ToolInvocation(BaseModel):
    """One occurrence of a tool being called by the assistant.

    Invocations are recorded once, inside the assistant message that issued
    them, and never change afterwards. Their result lives in a later
    ``ToolMessage`` carrying the same ``call_id``.

    Attributes:
        call_id: Identifier unique within the conversation.
        name: Name of the called tool.
        arguments: Arguments as issued by the model.
    """

    model_config = ConfigDict(frozen=True)

    call_id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class BaseMessage(BaseModel):
    """Base model for messages exchanged with an LLM.

    Attributes:
        author: Role associated with the message.
        content: Text payload of the message.
    """

    model_config = ConfigDict(frozen=True)

    author: str
    content: str = ""


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    author: str = "system"


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    author: str = "user"


class AssistantMessage(BaseMessage):
    """Message authored by the assistant, optionally containing tool invocations."""

    author: str = "assistant"
    tool_invocations: List[ToolInvocation] = Field(default_factory=list)


class ToolMessage(BaseMessage):
    """Result record for a single tool invocation."""

    author: str = "tool"
    tool_call_id: str
    name: str

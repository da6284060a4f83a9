"""Client-facing stream events and their Server-Sent Events framing.

Event names follow the AI SDK UI message stream (``text-delta``,
``tool-input-available``, ``tool-output-available``, ...); fields are
serialized in camelCase.
"""

from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SSE_DONE = "data: [DONE]\n\n"


class StreamEvent(BaseModel):
    """Base class of every event emitted during a turn."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextDeltaEvent(StreamEvent):
    type: Literal["text-delta"] = "text-delta"
    delta: str


class ToolInputAvailableEvent(StreamEvent):
    """The model issued a tool call with complete arguments."""

    type: Literal["tool-input-available"] = "tool-input-available"
    tool_call_id: str
    tool_name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ToolOutputAvailableEvent(StreamEvent):
    """A tool invocation reached its terminal textual result."""

    type: Literal["tool-output-available"] = "tool-output-available"
    tool_call_id: str
    tool_name: str
    output: str
    is_error: bool = False


class ToolApprovalRequestEvent(StreamEvent):
    """A confirmation-gated invocation waits for the user's decision."""

    type: Literal["tool-approval-request"] = "tool-approval-request"
    tool_call_id: str
    tool_name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ErrorEvent(StreamEvent):
    type: Literal["error"] = "error"
    error_text: str


class FinishEvent(StreamEvent):
    """Last event of a successful (or cancelled) turn."""

    type: Literal["finish"] = "finish"
    finish_reason: Literal["stop", "tool-calls", "max-steps", "cancelled"] = "stop"


AnyStreamEvent = Union[
    TextDeltaEvent,
    ToolInputAvailableEvent,
    ToolOutputAvailableEvent,
    ToolApprovalRequestEvent,
    ErrorEvent,
    FinishEvent,
]


def format_sse_event(event: StreamEvent) -> str:
    """Frame an event as one SSE ``data:`` line."""
    return f"data: {event.model_dump_json(by_alias=True)}\n\n"

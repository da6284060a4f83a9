"""Public exports for the core chat, tool and confirmation abstractions."""

from .base import GenericLLM, ModelEvent, StepFinish, TextDelta
from .exceptions import (
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    SchemaMismatch,
    ToolServerConnectionError,
    ConfirmationError,
    UnknownInvocationError,
    InvocationAlreadyResolvedError,
)
from .logger import get_logger, setup_logging
from .messages import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
    ToolInvocation,
    InvocationState,
    Conversation,
)
from .tools import (
    ToolDescriptor,
    ToolCallRequest,
    ToolCallResult,
    ConfirmationList,
    ConfirmationOutcome,
    ConfirmationSignal,
    DENIAL_MESSAGE,
    ParameterKind,
    ParameterSchema,
    SchemaValidator,
    translate_input_schema,
    translate_parameters,
    RemoteTool,
    ToolServer,
    ToolServerConnection,
    extract_text,
    ToolRegistry,
    ToolSets,
    build_tool_sets,
    ToolExecutor,
    PendingCallResolver,
    ResolutionReport,
)
from .stream import ConversationStreamDriver, StreamEvent, format_sse_event

__all__ = [
    "GenericLLM",
    "ModelEvent",
    "StepFinish",
    "TextDelta",
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "SchemaMismatch",
    "ToolServerConnectionError",
    "ConfirmationError",
    "UnknownInvocationError",
    "InvocationAlreadyResolvedError",
    "get_logger",
    "setup_logging",
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolInvocation",
    "InvocationState",
    "Conversation",
    "ToolDescriptor",
    "ToolCallRequest",
    "ToolCallResult",
    "ConfirmationList",
    "ConfirmationOutcome",
    "ConfirmationSignal",
    "DENIAL_MESSAGE",
    "ParameterKind",
    "ParameterSchema",
    "SchemaValidator",
    "translate_input_schema",
    "translate_parameters",
    "RemoteTool",
    "ToolServer",
    "ToolServerConnection",
    "extract_text",
    "ToolRegistry",
    "ToolSets",
    "build_tool_sets",
    "ToolExecutor",
    "PendingCallResolver",
    "ResolutionReport",
    "ConversationStreamDriver",
    "StreamEvent",
    "format_sse_event",
]

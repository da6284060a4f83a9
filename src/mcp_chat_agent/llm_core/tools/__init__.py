from .models import (
    ToolDescriptor,
    ToolCallRequest,
    ToolCallResult,
    ConfirmationList,
    ConfirmationOutcome,
    ConfirmationSignal,
    DENIAL_MESSAGE,
)
from .schema import ParameterKind, ParameterSchema, SchemaValidator, translate_input_schema, translate_parameters
from .remote import RemoteTool, RemoteToolCaller, ToolServer, ToolServerConnection, extract_text, remote_executor
from .registry import ToolRegistry, ToolSets, build_tool_sets
from .execution import ToolExecutor, PendingCallResolver, ResolutionReport

__all__ = [
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
    "RemoteToolCaller",
    "ToolServer",
    "ToolServerConnection",
    "extract_text",
    "remote_executor",
    "ToolRegistry",
    "ToolSets",
    "build_tool_sets",
    "ToolExecutor",
    "PendingCallResolver",
    "ResolutionReport",
]

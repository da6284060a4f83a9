"""Export the exception hierarchy used across registration, execution and confirmation paths."""

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

__all__ = [
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
]

"""
Exception hierarchy for tool registration, validation, execution and confirmation.

Only connection-level failures are meant to abort a conversation turn; the
rest are caught at the invocation boundary and turned into textual results.
"""

from typing import Any, Dict, Optional


class LLMToolError(Exception):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when a tool cannot be registered."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(LLMToolError):
    """Raised when tool parameters or definition are invalid."""

    pass


class SchemaMismatch(ToolValidationError):
    """Raised when call arguments do not match the tool's declared parameter kinds.

    Attributes:
        tool_name: Tool whose arguments were rejected.
        errors: Mapping of parameter name to a short reason.
    """

    def __init__(self, tool_name: str, errors: Dict[str, str]):
        self.tool_name = tool_name
        self.errors = dict(errors)
        details = "; ".join(f"{field}: {reason}" for field, reason in self.errors.items())
        super().__init__(f"Invalid arguments for tool '{tool_name}': {details}")


class ToolServerConnectionError(LLMToolError, ConnectionError):
    """Raised when the remote tool server cannot be reached or listed."""

    def __init__(self, message: str, server: Optional[Any] = None):
        self.server = server
        super().__init__(message)


class ConfirmationError(LLMToolError):
    """Base class for invalid approve/reject signals."""

    pass


class UnknownInvocationError(ConfirmationError):
    """Raised when a signal targets an invocation that was never requested."""

    pass


class InvocationAlreadyResolvedError(ConfirmationError):
    """Raised when a signal targets an invocation that already has a result or a queued signal."""

    pass

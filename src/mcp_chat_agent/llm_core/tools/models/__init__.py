"""Tool-related data models."""

from .models import ToolDescriptor
from .tool_call import ToolCallRequest, ToolCallResult
from .confirmation import ConfirmationList, ConfirmationOutcome, ConfirmationSignal, DENIAL_MESSAGE

__all__ = [
    "ToolDescriptor",
    "ToolCallRequest",
    "ToolCallResult",
    "ConfirmationList",
    "ConfirmationOutcome",
    "ConfirmationSignal",
    "DENIAL_MESSAGE",
]

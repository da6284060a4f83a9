"""Data models for tool execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ToolCallRequest:
    """Represents a normalized tool call request from an LLM response."""

    name: str
    arguments: Any
    call_id: str


@dataclass(frozen=True)
class ToolCallResult:
    """Represents the textual outcome of one tool call.

    ``pending`` results carry no text: the call waits for a human decision.
    """

    name: str
    call_id: str
    output: Optional[str] = None
    pending: bool = False
    is_error: bool = False

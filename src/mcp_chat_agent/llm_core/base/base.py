"""Core abstractions for streaming LLM provider implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence, Union

from ..messages import BaseMessage
from ..tools.models import ToolCallRequest
from ..tools.registry import ToolRegistry


@dataclass(frozen=True)
class TextDelta:
    """An incremental piece of assistant text."""

    text: str


@dataclass(frozen=True)
class StepFinish:
    """Marks the end of one model step.

    Attributes:
        finish_reason: Provider finish reason, e.g. ``"stop"`` or ``"tool_calls"``.
    """

    finish_reason: str = "stop"


ModelEvent = Union[TextDelta, ToolCallRequest, StepFinish]


class GenericLLM(ABC):
    """Abstract base class for streaming LLM implementations.

    One call to ``stream_step`` performs a single model request: it yields
    text deltas as they arrive, then every tool call the model issued, and
    ends with exactly one ``StepFinish``. Executing tools and looping over
    steps is the caller's job.
    """

    @abstractmethod
    def stream_step(
        self, history: Sequence[BaseMessage], registry: Optional[ToolRegistry] = None
    ) -> AsyncIterator[ModelEvent]:
        """Stream one model step.

        Args:
            history: The conversation so far, in provider-agnostic form.
            registry: Tools the model may call.

        Returns:
            An async iterator of ``TextDelta``, ``ToolCallRequest`` and a final ``StepFinish``.
        """
        pass

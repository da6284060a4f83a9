"""Re-export the streaming LLM interface and the events it yields."""

from .base import GenericLLM, ModelEvent, StepFinish, TextDelta

__all__ = [
    "GenericLLM",
    "ModelEvent",
    "StepFinish",
    "TextDelta",
]

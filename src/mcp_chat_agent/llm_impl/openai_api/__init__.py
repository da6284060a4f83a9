"""Expose the OpenAI streaming chat integration and its tool registry."""

from .core import GenericOpenAI
from .registry import OpenAIToolRegistry

__all__ = ["GenericOpenAI", "OpenAIToolRegistry"]

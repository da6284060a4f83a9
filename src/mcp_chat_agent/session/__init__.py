"""Per-user chat sessions and the router that isolates them."""

from .chat_session import ChatSession
from .router import SessionRouter

__all__ = ["ChatSession", "SessionRouter"]

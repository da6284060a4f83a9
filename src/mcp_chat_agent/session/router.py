"""Route each user to an independent chat session."""

from typing import Callable, Dict, List, Optional

from .chat_session import ChatSession
from mcp_chat_agent.llm_core.logger import get_logger

logger = get_logger(__name__)


class SessionRouter:
    """Lazily creates and keeps one ``ChatSession`` per user id.

    Sessions share nothing mutable; the factory decides what they share
    immutably (driver, configuration).
    """

    def __init__(self, session_factory: Callable[[str], ChatSession]) -> None:
        self._session_factory = session_factory
        self._sessions: Dict[str, ChatSession] = {}

    def get(self, user_id: str) -> ChatSession:
        session = self._sessions.get(user_id)
        if session is None:
            logger.info("Creating chat session for user '%s'.", user_id)
            session = self._session_factory(user_id)
            self._sessions[user_id] = session
        return session

    def remove(self, user_id: str) -> Optional[ChatSession]:
        session = self._sessions.pop(user_id, None)
        if session is not None:
            session.stop()
        return session

    @property
    def user_ids(self) -> List[str]:
        return list(self._sessions)

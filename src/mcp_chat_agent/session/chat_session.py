"""Per-user chat sessions: history, pending decisions and the session-local tools."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Dict, Optional, Type

from mcp_chat_agent.llm_core import (
    ConfirmationList,
    ConfirmationOutcome,
    Conversation,
    ConversationStreamDriver,
    InvocationAlreadyResolvedError,
    InvocationState,
    StreamEvent,
    ToolRegistry,
    UnknownInvocationError,
    UserMessage,
)
from mcp_chat_agent.llm_core.logger import get_logger

logger = get_logger(__name__)


class ChatSession:
    """State of one user's chat.

    Turns run one at a time: a new submission waits for the running turn.
    Approve/reject decisions are queued with ``resolve`` and applied at the
    start of the next turn.
    """

    def __init__(
        self,
        driver: ConversationStreamDriver,
        confirmation_list: ConfirmationList,
        registry_cls: Type[ToolRegistry],
        user_name: Optional[str] = None,
    ) -> None:
        self.user_name = user_name
        self.conversation = Conversation()
        self._driver = driver
        self._confirmation_list = confirmation_list
        self._registry_cls = registry_cls
        self._signals: Dict[str, ConfirmationOutcome] = {}
        self._turn_lock = asyncio.Lock()
        self._cancel_event: Optional[asyncio.Event] = None

    @property
    def pending_signals(self) -> Dict[str, ConfirmationOutcome]:
        return dict(self._signals)

    @property
    def is_busy(self) -> bool:
        return self._turn_lock.locked()

    def local_tools(self) -> ToolRegistry:
        """Tools answered from this session's state, rebuilt every turn."""
        registry = self._registry_cls()

        def getUserInfo() -> str:
            """Get the user's name"""
            return f"The user's name is {self.user_name or 'unknown'}"

        registry.register(getUserInfo)
        return registry

    def resolve(self, call_id: str, outcome: ConfirmationOutcome | str) -> None:
        """Record the user's decision on a pending confirmation.

        Args:
            call_id: The invocation the decision applies to.
            outcome: ``approved`` or ``rejected``.

        Raises:
            UnknownInvocationError: If no confirmation-gated invocation with this id was requested.
            InvocationAlreadyResolvedError: If it already has a result or a queued decision.
        """
        outcome = ConfirmationOutcome(outcome)
        invocation = self.conversation.find_invocation(call_id)
        if invocation is None or not self._confirmation_list.requires_confirmation(invocation.name):
            raise UnknownInvocationError(f"No pending confirmation with id '{call_id}'.")
        if self.conversation.state_of(call_id) is InvocationState.RESOLVED:
            raise InvocationAlreadyResolvedError(f"Invocation '{call_id}' is already resolved.")
        if call_id in self._signals:
            raise InvocationAlreadyResolvedError(f"A decision for invocation '{call_id}' is already queued.")

        self._signals[call_id] = outcome
        logger.info("Queued %s decision for invocation '%s' (%s).", outcome.value, call_id, invocation.name)

    async def submit(self, text: str) -> AsyncIterator[StreamEvent]:
        """Append a user message and stream the assistant's turn."""
        async with self._turn_lock:
            self.conversation.append(UserMessage(content=text))
            async for event in self._run():
                yield event

    async def continue_turn(self) -> AsyncIterator[StreamEvent]:
        """Stream a turn without new user input, e.g. after decisions were queued."""
        async with self._turn_lock:
            async for event in self._run():
                yield event

    def stop(self) -> None:
        """Abort the turn currently streaming, if any."""
        if self._cancel_event is not None:
            logger.info("Stopping the running turn for user '%s'.", self.user_name)
            self._cancel_event.set()

    async def _run(self) -> AsyncIterator[StreamEvent]:
        self._cancel_event = asyncio.Event()
        try:
            async for event in self._driver.run_turn(
                self.conversation,
                self._signals,
                local_tools=self.local_tools(),
                cancel_event=self._cancel_event,
            ):
                yield event
        finally:
            self._cancel_event = None

"""Append-only conversation history and invocation state lookups."""

from typing import Dict, Iterable, Iterator, List, Optional

from .models import (
    AssistantMessage,
    BaseMessage,
    InvocationState,
    ToolInvocation,
    ToolMessage,
    UserMessage,
)


class Conversation:
    """Ordered, append-only message history.

    The conversation is the single source of truth for which invocations are
    still pending: an invocation is resolved exactly when a ``ToolMessage`` with
    its ``call_id`` has been appended after it.
    """

    def __init__(self, messages: Optional[Iterable[BaseMessage]] = None) -> None:
        self._messages: List[BaseMessage] = []
        self._invocations: Dict[str, ToolInvocation] = {}
        self._results: Dict[str, ToolMessage] = {}
        for message in messages or []:
            self.append(message)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[BaseMessage]:
        return iter(self._messages)

    @property
    def messages(self) -> List[BaseMessage]:
        """A copy of the messages in order."""
        return list(self._messages)

    def append(self, message: BaseMessage) -> None:
        """Append a message to the history.

        Args:
            message: The message to append.

        Raises:
            ValueError: If an invocation id is reused, or a result record has no
                preceding invocation or duplicates an existing result.
        """
        if isinstance(message, AssistantMessage):
            for invocation in message.tool_invocations:
                if invocation.call_id in self._invocations:
                    raise ValueError(f"Duplicate tool invocation id '{invocation.call_id}'.")
            for invocation in message.tool_invocations:
                self._invocations[invocation.call_id] = invocation
        elif isinstance(message, ToolMessage):
            if message.tool_call_id not in self._invocations:
                raise ValueError(f"Tool result for unknown invocation '{message.tool_call_id}'.")
            if message.tool_call_id in self._results:
                raise ValueError(f"Invocation '{message.tool_call_id}' already has a result.")
            self._results[message.tool_call_id] = message

        self._messages.append(message)

    def find_invocation(self, call_id: str) -> Optional[ToolInvocation]:
        return self._invocations.get(call_id)

    def result_for(self, call_id: str) -> Optional[ToolMessage]:
        return self._results.get(call_id)

    def is_resolved(self, call_id: str) -> bool:
        return call_id in self._results

    def state_of(self, call_id: str) -> Optional[InvocationState]:
        """Return the state of an invocation, or None if it was never requested."""
        if call_id not in self._invocations:
            return None
        if call_id in self._results:
            return InvocationState.RESOLVED
        return InvocationState.REQUESTED

    def invocations(self) -> List[ToolInvocation]:
        """All invocations in the order they appear in history."""
        ordered: List[ToolInvocation] = []
        for message in self._messages:
            if isinstance(message, AssistantMessage):
                ordered.extend(message.tool_invocations)
        return ordered

    def pending_invocations(self) -> List[ToolInvocation]:
        """Invocations still in the ``requested`` state, in history order."""
        return [inv for inv in self.invocations() if inv.call_id not in self._results]

    def awaiting_confirmation(self) -> List[ToolInvocation]:
        """Pending invocations issued after the most recent user message.

        While any exist, the assistant has nothing new to respond to.
        """
        awaiting: List[ToolInvocation] = []
        for message in self._messages:
            if isinstance(message, UserMessage):
                awaiting = []
            elif isinstance(message, AssistantMessage):
                awaiting.extend(inv for inv in message.tool_invocations if inv.call_id not in self._results)
        return awaiting

    @property
    def last_message(self) -> Optional[BaseMessage]:
        return self._messages[-1] if self._messages else None

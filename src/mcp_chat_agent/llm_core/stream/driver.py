"""Drive one conversation turn: tools, pending confirmations and the model stream."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, AsyncIterator, Dict, List, MutableMapping, Optional, Type

from .events import (
    ErrorEvent,
    FinishEvent,
    StreamEvent,
    TextDeltaEvent,
    ToolApprovalRequestEvent,
    ToolInputAvailableEvent,
    ToolOutputAvailableEvent,
)
from ..base import GenericLLM, StepFinish, TextDelta
from ..exceptions import ToolExecutionError, ToolServerConnectionError
from ..logger import get_logger
from ..messages import AssistantMessage, Conversation, ToolInvocation, ToolMessage
from ..tools.execution import PendingCallResolver, ToolExecutor
from ..tools.models import ConfirmationList, ConfirmationOutcome, ToolCallRequest, ToolCallResult
from ..tools.registry import ToolRegistry, ToolSets, build_tool_sets
from ..tools.remote import ToolServer, ToolServerConnection

logger = get_logger(__name__)

_MODEL_DONE = object()
_CANCELLED = object()


@dataclass
class _StepState:
    """What one model step produced."""

    text: List[str] = field(default_factory=list)
    calls: List[ToolCallRequest] = field(default_factory=list)
    arguments: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    results: Dict[str, ToolCallResult] = field(default_factory=dict)
    pending: List[str] = field(default_factory=list)
    finish_reason: str = "stop"
    error: Optional[BaseException] = None
    cancelled: bool = False


class ConversationStreamDriver:
    """Run request/response cycles against the model with dynamically discovered tools.

    Every turn opens a fresh tool-server connection, rebuilds the tool sets
    from the server's current listing, resolves confirmations decided since
    the last turn, and then streams model steps until the model stops
    calling tools, a confirmation is needed, or ``max_steps`` is reached.
    The connection is closed on every exit path.
    """

    def __init__(
        self,
        *,
        llm: GenericLLM,
        tool_server: ToolServer,
        confirmation_list: ConfirmationList,
        registry_cls: Type[ToolRegistry],
        max_steps: int = 100,
        tool_timeout: float = 180.0,
    ) -> None:
        """Initialize the driver.

        Args:
            llm: Streaming model implementation.
            tool_server: Source of per-turn tool-server connections.
            confirmation_list: Tools that need user approval.
            registry_cls: Provider registry type used to declare tools.
            max_steps: Upper bound on model steps per turn.
            tool_timeout: Timeout in seconds for a single tool execution.
        """
        self._llm = llm
        self._tool_server = tool_server
        self._confirmation_list = confirmation_list
        self._registry_cls = registry_cls
        self._max_steps = max_steps
        self._tool_timeout = tool_timeout

    async def run_turn(
        self,
        conversation: Conversation,
        signals: MutableMapping[str, ConfirmationOutcome],
        *,
        local_tools: Optional[ToolRegistry] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Run one turn and stream its events.

        The stream ends with a ``FinishEvent`` or, if the turn failed, an
        ``ErrorEvent``.

        Args:
            conversation: History of the session; results and the assistant's
                messages are appended to it.
            signals: Approve/reject decisions keyed by invocation id. Applied
                signals are removed.
            local_tools: Tools answered from session state, merged below the remote tools.
            cancel_event: Set to abort the turn.

        Yields:
            Stream events in arrival order.
        """
        cancel_event = cancel_event or asyncio.Event()

        try:
            async with self._tool_server.connect() as connection:
                tool_sets = await self._build_tool_sets(connection)
                async for event in self._run_with_tools(conversation, signals, tool_sets, local_tools, cancel_event):
                    yield event
        except ToolServerConnectionError as exc:
            logger.error("Turn aborted, tool server unavailable: %s", exc)
            yield ErrorEvent(error_text=f"Tool server unavailable: {exc}")

    async def _build_tool_sets(self, connection: ToolServerConnection) -> ToolSets:
        try:
            remote_tools = await connection.list_tools()
        except ToolServerConnectionError:
            raise
        except Exception as exc:
            raise ToolServerConnectionError(f"Listing tools failed: {exc}") from exc
        return build_tool_sets(remote_tools, connection, self._confirmation_list, self._registry_cls)

    async def _run_with_tools(
        self,
        conversation: Conversation,
        signals: MutableMapping[str, ConfirmationOutcome],
        tool_sets: ToolSets,
        local_tools: Optional[ToolRegistry],
        cancel_event: asyncio.Event,
    ) -> AsyncIterator[StreamEvent]:
        registry = self._registry_cls().merge(
            local_tools or self._registry_cls(), tool_sets.auto_tools, tool_sets.confirm_tools
        )
        executor = ToolExecutor(
            registry=registry,
            confirmed_executors=tool_sets.confirmed_executors,
            tool_timeout=self._tool_timeout,
        )

        report = await PendingCallResolver(self._confirmation_list, executor).resolve(
            conversation, signals, cancel_event=cancel_event
        )
        for result in report.resolved:
            yield self._output_event(result)

        if cancel_event.is_set():
            logger.info("Turn cancelled while resolving confirmations.")
            yield FinishEvent(finish_reason="cancelled")
            return

        for invocation in report.pending:
            yield ToolApprovalRequestEvent(
                tool_call_id=invocation.call_id, tool_name=invocation.name, input=invocation.arguments
            )

        if conversation.awaiting_confirmation():
            yield FinishEvent(finish_reason="tool-calls")
            return

        if isinstance(conversation.last_message, AssistantMessage):
            logger.debug("Nothing new to respond to; skipping the model call.")
            yield FinishEvent(finish_reason="stop")
            return

        for step in range(self._max_steps):
            if cancel_event.is_set():
                yield FinishEvent(finish_reason="cancelled")
                return

            logger.debug("Step %d/%d", step + 1, self._max_steps)
            state = _StepState()
            async for event in self._stream_step(conversation, registry, executor, cancel_event, state):
                yield event

            if state.cancelled:
                logger.info("Turn cancelled during step %d.", step + 1)
                yield FinishEvent(finish_reason="cancelled")
                return

            if state.error is not None:
                logger.error("Error while streaming: %s", state.error, exc_info=state.error)
                yield ErrorEvent(error_text=str(state.error))
                return

            try:
                self._record_step(conversation, state)
            except ValueError as exc:
                logger.error("Could not record step %d: %s", step + 1, exc)
                yield ErrorEvent(error_text=str(exc))
                return

            for call_id in state.pending:
                yield ToolApprovalRequestEvent(
                    tool_call_id=call_id,
                    tool_name=next(c.name for c in state.calls if c.call_id == call_id),
                    input=state.arguments[call_id],
                )

            if state.pending:
                yield FinishEvent(finish_reason="tool-calls")
                return
            if not state.calls:
                yield FinishEvent(finish_reason="stop")
                return

        logger.warning(f"Max steps ({self._max_steps}) reached. Stopping execution.")
        yield FinishEvent(finish_reason="max-steps")

    async def _stream_step(
        self,
        conversation: Conversation,
        registry: ToolRegistry,
        executor: ToolExecutor,
        cancel_event: asyncio.Event,
        state: _StepState,
    ) -> AsyncIterator[StreamEvent]:
        """Merge model text and auto-tool results into one ordered event sequence."""
        queue: asyncio.Queue[Any] = asyncio.Queue()
        tool_tasks: List[asyncio.Task[None]] = []
        outstanding = 0

        async def run_tool(request: ToolCallRequest) -> None:
            try:
                result = await executor.execute(request)
            except Exception as exc:
                result = ToolCallResult(
                    name=request.name, call_id=request.call_id, output=f"Error: {exc}", is_error=True
                )
            state.results[request.call_id] = result
            await queue.put(self._output_event(result))

        async def produce() -> None:
            nonlocal outstanding
            try:
                async for model_event in self._llm.stream_step(conversation.messages, registry):
                    if isinstance(model_event, TextDelta):
                        state.text.append(model_event.text)
                        await queue.put(TextDeltaEvent(delta=model_event.text))
                    elif isinstance(model_event, ToolCallRequest):
                        model_event = self._unique_call(conversation, state, model_event)
                        arguments = self._safe_arguments(model_event)
                        state.calls.append(model_event)
                        state.arguments[model_event.call_id] = arguments
                        await queue.put(
                            ToolInputAvailableEvent(
                                tool_call_id=model_event.call_id, tool_name=model_event.name, input=arguments
                            )
                        )
                        if executor.requires_confirmation(model_event.name):
                            state.pending.append(model_event.call_id)
                        else:
                            outstanding += 1
                            tool_tasks.append(asyncio.create_task(run_tool(model_event)))
                    elif isinstance(model_event, StepFinish):
                        state.finish_reason = model_event.finish_reason
            except Exception as exc:
                state.error = exc
            finally:
                queue.put_nowait(_MODEL_DONE)

        async def watch_cancel() -> None:
            await cancel_event.wait()
            queue.put_nowait(_CANCELLED)

        producer = asyncio.create_task(produce())
        watcher = asyncio.create_task(watch_cancel())
        try:
            model_done = False
            while not model_done or outstanding:
                item = await queue.get()
                if item is _MODEL_DONE:
                    model_done = True
                    continue
                if item is _CANCELLED:
                    state.cancelled = True
                    return
                if isinstance(item, ToolOutputAvailableEvent):
                    outstanding -= 1
                yield item
        finally:
            for task in (producer, watcher, *tool_tasks):
                if not task.done():
                    task.cancel()
            await asyncio.gather(producer, watcher, *tool_tasks, return_exceptions=True)

    @staticmethod
    def _record_step(conversation: Conversation, state: _StepState) -> None:
        """Append the step's assistant message, then the results of the auto tools."""
        text = "".join(state.text)
        if not text and not state.calls:
            return

        invocations = [
            ToolInvocation(call_id=call.call_id, name=call.name, arguments=state.arguments[call.call_id])
            for call in state.calls
        ]
        conversation.append(AssistantMessage(content=text, tool_invocations=invocations))

        for call in state.calls:
            result = state.results.get(call.call_id)
            if result is not None:
                conversation.append(
                    ToolMessage(content=result.output or "", tool_call_id=call.call_id, name=call.name)
                )

    @staticmethod
    def _unique_call(conversation: Conversation, state: _StepState, request: ToolCallRequest) -> ToolCallRequest:
        """Give the call a fresh id if the model reused one already in the history or this step."""
        if conversation.find_invocation(request.call_id) is None and request.call_id not in state.arguments:
            return request
        call_id = f"call_{uuid.uuid4().hex}"
        logger.warning("Model reused tool call id '%s'; using '%s' instead.", request.call_id, call_id)
        return replace(request, call_id=call_id)

    @staticmethod
    def _safe_arguments(request: ToolCallRequest) -> Dict[str, Any]:
        try:
            return ToolExecutor.normalize_arguments(request.name, request.arguments)
        except ToolExecutionError:
            return {}

    @staticmethod
    def _output_event(result: ToolCallResult) -> ToolOutputAvailableEvent:
        return ToolOutputAvailableEvent(
            tool_call_id=result.call_id,
            tool_name=result.name,
            output=result.output or "",
            is_error=result.is_error,
        )

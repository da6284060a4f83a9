import json
import uuid
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence, cast

from openai import AsyncOpenAI

from mcp_chat_agent.llm_core import GenericLLM, ToolRegistry
from mcp_chat_agent.llm_core.base import ModelEvent, StepFinish, TextDelta
from mcp_chat_agent.llm_core.logger import get_logger
from mcp_chat_agent.llm_core.messages import (
    AssistantMessage,
    BaseMessage,
    SystemMessage,
    ToolMessage,
    UserMessage,
)
from mcp_chat_agent.llm_core.tools.models import ToolCallRequest

logger = get_logger(__name__)

PENDING_TOOL_RESULT = "Awaiting user confirmation."


class GenericOpenAI(GenericLLM):
    """
    Streaming implementation of GenericLLM for OpenAI-compatible chat completion APIs.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        sys_instruction: str,
        temp: float = 1.0,
        max_tokens: int = 3000,
    ):
        """
        Initializes the GenericOpenAI LLM wrapper.

        Args:
            client: The initialized AsyncOpenAI client.
            model_name: The identifier for the model to use (e.g., 'gpt-4o-mini').
            sys_instruction: A system-level instruction prepended to every request.
            temp: The temperature for text generation, controlling randomness.
            max_tokens: The maximum number of tokens to generate per step.
        """
        self.client: AsyncOpenAI = client
        self.model: str = model_name
        self.sys_instruction = sys_instruction
        self.temperature = temp
        self.max_tokens = max_tokens

    async def stream_step(
        self, history: Sequence[BaseMessage], registry: Optional[ToolRegistry] = None
    ) -> AsyncIterator[ModelEvent]:
        """
        Streams a single chat completion.

        Text deltas are yielded as they arrive. Tool call fragments are
        accumulated per index and yielded once the stream is complete.

        Args:
            history: The conversation so far.
            registry: Tools to declare to the model.

        Yields:
            ``TextDelta`` events, then ``ToolCallRequest``s, then one ``StepFinish``.
        """
        messages = self._convert_history(history)
        if self.sys_instruction:
            messages.insert(0, {"role": "system", "content": self.sys_instruction})

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": cast(Iterable[Any], messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": True,
        }
        tools = registry.tool_object if registry else None
        if tools:
            request["tools"] = tools

        logger.debug("Sending streaming request to model '%s' with %d messages.", self.model, len(messages))
        stream = await self.client.chat.completions.create(**request)

        partial_calls: Dict[int, Dict[str, Any]] = {}
        finish_reason: Optional[str] = None

        async for chunk in stream:
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            delta = choice.delta

            if delta is not None and delta.content:
                yield TextDelta(text=delta.content)

            for fragment in (delta.tool_calls if delta is not None else None) or []:
                entry = partial_calls.setdefault(fragment.index, {"id": None, "name": "", "arguments": ""})
                if fragment.id:
                    entry["id"] = fragment.id
                if fragment.function is not None:
                    if fragment.function.name:
                        entry["name"] = fragment.function.name
                    if fragment.function.arguments:
                        entry["arguments"] += fragment.function.arguments

            if choice.finish_reason:
                finish_reason = choice.finish_reason

        for index in sorted(partial_calls):
            entry = partial_calls[index]
            yield ToolCallRequest(
                name=entry["name"],
                arguments=entry["arguments"],
                call_id=entry["id"] or f"call_{uuid.uuid4().hex}",
            )

        yield StepFinish(finish_reason=finish_reason or "stop")

    @staticmethod
    def _convert_history(history: Sequence[BaseMessage]) -> List[Dict[str, Any]]:
        """
        Converts generic history to OpenAI message dictionaries.

        OpenAI expects every tool call to be answered right after the assistant
        message that issued it. Results are therefore moved next to their call,
        and calls still awaiting confirmation get a placeholder answer.

        Args:
            history: List of BaseMessage objects.

        Returns:
            List of OpenAI message dictionaries.
        """
        results = {msg.tool_call_id: msg for msg in history if isinstance(msg, ToolMessage)}

        openai_history: List[Dict[str, Any]] = []
        for msg in history:
            if isinstance(msg, UserMessage):
                openai_history.append({"role": "user", "content": msg.content})
            elif isinstance(msg, SystemMessage):
                openai_history.append({"role": "system", "content": msg.content})
            elif isinstance(msg, AssistantMessage):
                if not msg.tool_invocations:
                    openai_history.append({"role": "assistant", "content": msg.content})
                    continue

                openai_history.append(
                    {
                        "role": "assistant",
                        "content": msg.content or None,
                        "tool_calls": [
                            {
                                "id": inv.call_id,
                                "type": "function",
                                "function": {"name": inv.name, "arguments": json.dumps(inv.arguments)},
                            }
                            for inv in msg.tool_invocations
                        ],
                    }
                )
                for inv in msg.tool_invocations:
                    result = results.get(inv.call_id)
                    openai_history.append(
                        {
                            "role": "tool",
                            "tool_call_id": inv.call_id,
                            "content": result.content if result is not None else PENDING_TOOL_RESULT,
                        }
                    )
            # ToolMessages were emitted next to their assistant message above.
        return openai_history

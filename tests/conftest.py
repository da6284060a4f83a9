import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import pytest
from dotenv import load_dotenv, find_dotenv

from mcp_chat_agent.llm_core import ConfirmationList, ConversationStreamDriver, GenericLLM
from mcp_chat_agent.llm_core.base import ModelEvent, StepFinish, TextDelta
from mcp_chat_agent.llm_core.tools.remote import RemoteTool
from mcp_chat_agent.llm_impl import OpenAIToolRegistry

# Load environment variables from .env file if one exists
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)


LOCATION_SCHEMA = {
    "type": "object",
    "properties": {"location": {"type": "string"}},
    "required": ["location"],
}


def text_response(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


class ScriptedLLM(GenericLLM):
    """Model stand-in replaying one list of events per step."""

    def __init__(self, steps: List[List[Any]]) -> None:
        self.steps = list(steps)
        self.histories: List[list] = []
        self.registries: List[Any] = []

    async def stream_step(self, history, registry=None) -> AsyncIterator[ModelEvent]:
        self.histories.append(list(history))
        self.registries.append(registry)
        events = self.steps.pop(0) if self.steps else [TextDelta("Done."), StepFinish()]
        for event in events:
            if isinstance(event, Exception):
                raise event
            yield event

    @property
    def calls(self) -> int:
        return len(self.histories)


class FakeConnection:
    def __init__(self, server: "FakeToolServer") -> None:
        self.connection_id = uuid.uuid4().hex
        self._server = server

    async def list_tools(self) -> List[RemoteTool]:
        if self._server.list_error is not None:
            raise self._server.list_error
        return list(self._server.tools)

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        self._server.calls.append((name, dict(arguments)))
        handler = self._server.handlers.get(name)
        if handler is None:
            return text_response(f"{name} done")
        return handler(arguments)


class FakeToolServer:
    """In-memory tool server counting connections and recording calls."""

    def __init__(self, tools: List[RemoteTool], handlers: Optional[Dict[str, Callable]] = None) -> None:
        self.tools = tools
        self.handlers = dict(handlers or {})
        self.calls: List[tuple] = []
        self.opened = 0
        self.closed = 0
        self.connect_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[FakeConnection]:
        if self.connect_error is not None:
            raise self.connect_error
        self.opened += 1
        try:
            yield FakeConnection(self)
        finally:
            self.closed += 1


@pytest.fixture
def demo_tools() -> List[RemoteTool]:
    return [
        RemoteTool(name="getLocalTime", description="Get the local time", input_schema=LOCATION_SCHEMA),
        RemoteTool(name="getWeatherInformation", description="Get the weather", input_schema=LOCATION_SCHEMA),
        RemoteTool(name="tellAJoke", description="Tell a random joke", input_schema={}),
    ]


@pytest.fixture
def tool_server(demo_tools: List[RemoteTool]) -> FakeToolServer:
    return FakeToolServer(
        demo_tools,
        handlers={
            "getLocalTime": lambda args: text_response(f"It is 10am in {args['location']}"),
            "getWeatherInformation": lambda args: text_response(f"It is sunny in {args['location']}"),
        },
    )


@pytest.fixture
def connection(tool_server: FakeToolServer) -> FakeConnection:
    return FakeConnection(tool_server)


@pytest.fixture
def confirmation_list() -> ConfirmationList:
    return ConfirmationList.of(["getWeatherInformation"])


@pytest.fixture
def scripted_llm() -> Callable[..., ScriptedLLM]:
    return ScriptedLLM


@pytest.fixture
def make_driver(tool_server: FakeToolServer, confirmation_list: ConfirmationList) -> Callable[..., ConversationStreamDriver]:
    def factory(llm: GenericLLM, max_steps: int = 5, tool_timeout: float = 5.0) -> ConversationStreamDriver:
        return ConversationStreamDriver(
            llm=llm,
            tool_server=tool_server,
            confirmation_list=confirmation_list,
            registry_cls=OpenAIToolRegistry,
            max_steps=max_steps,
            tool_timeout=tool_timeout,
        )

    return factory


async def collect(events: AsyncIterator[Any]) -> List[Any]:
    return [event async for event in events]


@pytest.fixture
def collect_events() -> Callable:
    return collect

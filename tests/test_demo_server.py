from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from mcp_chat_agent.config import ChatSettings
from mcp_chat_agent.demo_server import (
    JOKE_API_URL,
    LOCAL_JOKE,
    create_server,
    get_fact_about_topic,
    get_local_time,
    get_weather_information,
    tell_a_joke,
)


def test_location_tools():
    assert get_local_time("Oslo") == "It is 10am in Oslo"
    assert get_weather_information("Oslo") == "It is sunny in Oslo"


@pytest.mark.asyncio
async def test_local_joke_needs_no_network():
    assert await tell_a_joke(is_local=True) == LOCAL_JOKE


@pytest.mark.asyncio
async def test_remote_joke():
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == JOKE_API_URL
        return httpx.Response(200, json={"setup": "Why?", "punchline": "Because."})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        assert await tell_a_joke(is_local=False, http_client=client) == "Why? Because."


@pytest.mark.asyncio
async def test_remote_joke_failure():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503))) as client:
        with pytest.raises(RuntimeError, match="Failed to fetch joke"):
            await tell_a_joke(is_local=False, http_client=client)


@pytest.mark.asyncio
async def test_fact_about_topic_asks_the_model():
    client = MagicMock()
    completion = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Owls can rotate their heads."))])
    client.chat.completions.create = AsyncMock(return_value=completion)

    fact = await get_fact_about_topic("owls", client, "gpt-4o-mini")

    assert fact == "Owls can rotate their heads."
    request = client.chat.completions.create.call_args.kwargs
    assert request["model"] == "gpt-4o-mini"
    assert "owls" in request["messages"][1]["content"]


@pytest.mark.asyncio
async def test_server_registers_demo_tools():
    server = create_server(ChatSettings(is_local=True), client=MagicMock())

    tools = {tool.name: tool for tool in await server.list_tools()}

    assert set(tools) == {"getLocalTime", "getWeatherInformation", "tellAJoke", "getFactAboutTopic"}
    assert "location" in tools["getWeatherInformation"].inputSchema["properties"]
    assert tools["tellAJoke"].inputSchema["properties"] == {}

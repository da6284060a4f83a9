import pytest

from mcp_chat_agent.llm_core.tools.models import ConfirmationList
from mcp_chat_agent.llm_core.tools.registry import build_tool_sets, describe_remote_tool
from mcp_chat_agent.llm_core.tools.remote import RemoteTool
from mcp_chat_agent.llm_impl import OpenAIToolRegistry


def test_partition_follows_confirmation_list(demo_tools, connection, confirmation_list):
    sets = build_tool_sets(demo_tools, connection, confirmation_list, OpenAIToolRegistry)

    assert sets.confirm_tools.names == ["getWeatherInformation"]
    assert sets.auto_tools.names == ["getLocalTime", "tellAJoke"]
    assert isinstance(sets.auto_tools, OpenAIToolRegistry)
    assert set(sets.confirmed_executors) == {"getWeatherInformation"}


def test_every_tool_lands_in_exactly_one_set(demo_tools, connection, confirmation_list):
    sets = build_tool_sets(demo_tools, connection, confirmation_list, OpenAIToolRegistry)

    names = {tool.name for tool in demo_tools}
    assert set(sets.auto_tools.names) | set(sets.confirm_tools.names) == names
    assert not set(sets.auto_tools.names) & set(sets.confirm_tools.names)
    assert sets.all_tools().names == ["getLocalTime", "tellAJoke", "getWeatherInformation"]


def test_confirm_tools_have_no_executor(demo_tools, connection, confirmation_list):
    sets = build_tool_sets(demo_tools, connection, confirmation_list, OpenAIToolRegistry)

    weather = sets.confirm_tools.get("getWeatherInformation")
    assert weather.func is None
    assert weather.requires_confirmation
    assert sets.confirm_tools.implementations == {}


@pytest.mark.asyncio
async def test_auto_tool_executor_calls_server(demo_tools, connection, confirmation_list, tool_server):
    sets = build_tool_sets(demo_tools, connection, confirmation_list, OpenAIToolRegistry)

    output = await sets.auto_tools.get("getLocalTime").func(location="Oslo")

    assert output == "It is 10am in Oslo"
    assert tool_server.calls == [("getLocalTime", {"location": "Oslo"})]


@pytest.mark.asyncio
async def test_confirmed_executor_only_runs_when_called(demo_tools, connection, confirmation_list, tool_server):
    sets = build_tool_sets(demo_tools, connection, confirmation_list, OpenAIToolRegistry)
    assert tool_server.calls == []

    output = await sets.confirmed_executors["getWeatherInformation"](location="Paris")

    assert output == "It is sunny in Paris"
    assert tool_server.calls == [("getWeatherInformation", {"location": "Paris"})]


def test_empty_confirmation_list_makes_everything_auto(demo_tools, connection):
    sets = build_tool_sets(demo_tools, connection, ConfirmationList(), OpenAIToolRegistry)

    assert len(sets.confirm_tools) == 0
    assert len(sets.auto_tools) == len(demo_tools)


def test_duplicate_advertised_names_last_wins(connection, confirmation_list):
    tools = [
        RemoteTool(name="tellAJoke", description="old"),
        RemoteTool(name="tellAJoke", description="new"),
    ]
    sets = build_tool_sets(tools, connection, confirmation_list, OpenAIToolRegistry)

    assert sets.auto_tools.get("tellAJoke").description == "new"


def test_describe_remote_tool_defaults():
    descriptor = describe_remote_tool(RemoteTool(name="tellAJoke"))

    assert descriptor.description == "Tool tellAJoke provided by the tool server."
    assert descriptor.input_schema == {"type": "object", "properties": {}}
    assert descriptor.parameters.validate_arguments({}) == {}
    assert descriptor.func is None

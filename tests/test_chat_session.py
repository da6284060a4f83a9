from unittest.mock import MagicMock

import pytest

from mcp_chat_agent.llm_core import (
    ConfirmationList,
    ConfirmationOutcome,
    InvocationAlreadyResolvedError,
    UnknownInvocationError,
)
from mcp_chat_agent.llm_core.messages import AssistantMessage, ToolInvocation, ToolMessage, UserMessage
from mcp_chat_agent.llm_impl import OpenAIToolRegistry
from mcp_chat_agent.session import ChatSession, SessionRouter


def new_session(user_name="Ada"):
    return ChatSession(
        driver=MagicMock(),
        confirmation_list=ConfirmationList.of(["getWeatherInformation"]),
        registry_cls=OpenAIToolRegistry,
        user_name=user_name,
    )


@pytest.fixture
def session():
    session = new_session()
    session.conversation.append(UserMessage(content="Weather and time in Oslo?"))
    session.conversation.append(
        AssistantMessage(
            tool_invocations=[
                ToolInvocation(call_id="w1", name="getWeatherInformation", arguments={"location": "Oslo"}),
                ToolInvocation(call_id="t1", name="getLocalTime", arguments={"location": "Oslo"}),
            ]
        )
    )
    return session


def test_resolve_queues_the_decision(session):
    session.resolve("w1", "approved")
    assert session.pending_signals == {"w1": ConfirmationOutcome.APPROVED}


def test_resolve_unknown_invocation(session):
    with pytest.raises(UnknownInvocationError):
        session.resolve("nope", ConfirmationOutcome.APPROVED)


def test_resolve_invocation_of_auto_tool(session):
    with pytest.raises(UnknownInvocationError):
        session.resolve("t1", ConfirmationOutcome.APPROVED)


def test_resolve_twice(session):
    session.resolve("w1", ConfirmationOutcome.REJECTED)
    with pytest.raises(InvocationAlreadyResolvedError):
        session.resolve("w1", ConfirmationOutcome.APPROVED)


def test_resolve_after_result(session):
    session.conversation.append(ToolMessage(content="done", tool_call_id="w1", name="getWeatherInformation"))
    with pytest.raises(InvocationAlreadyResolvedError):
        session.resolve("w1", ConfirmationOutcome.APPROVED)


def test_resolve_rejects_unknown_outcome(session):
    with pytest.raises(ValueError):
        session.resolve("w1", "maybe")


def test_local_tools_answer_with_user_name():
    registry = new_session("Grace").local_tools()
    assert registry.names == ["getUserInfo"]
    assert registry.get("getUserInfo").func() == "The user's name is Grace"

    assert new_session(None).local_tools().get("getUserInfo").func() == "The user's name is unknown"


def test_stop_without_running_turn_is_a_no_op(session):
    session.stop()
    assert not session.is_busy


def test_router_isolates_users():
    router = SessionRouter(new_session)

    alice = router.get("alice")
    bob = router.get("bob")
    alice.conversation.append(UserMessage(content="Hi, I'm Alice."))

    assert router.get("alice") is alice
    assert alice is not bob
    assert len(bob.conversation) == 0
    assert alice.user_name == "alice"
    assert router.user_ids == ["alice", "bob"]


def test_router_remove():
    router = SessionRouter(new_session)
    alice = router.get("alice")

    assert router.remove("alice") is alice
    assert router.remove("alice") is None
    assert router.get("alice") is not alice

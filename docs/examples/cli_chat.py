import asyncio

from mcp_chat_agent.app import create_session_router
from mcp_chat_agent.config import load_settings
from mcp_chat_agent.llm_core import ConfirmationOutcome, setup_logging
from mcp_chat_agent.llm_core.stream import (
    ErrorEvent,
    FinishEvent,
    TextDeltaEvent,
    ToolApprovalRequestEvent,
    ToolOutputAvailableEvent,
)
from mcp_chat_agent.session import ChatSession


async def stream_turn(session: ChatSession, text: str | None) -> list[ToolApprovalRequestEvent]:
    """Print one turn and return the confirmations it left pending."""
    approvals: list[ToolApprovalRequestEvent] = []
    events = session.submit(text) if text is not None else session.continue_turn()

    print("Assistant: ", end="", flush=True)
    async for event in events:
        if isinstance(event, TextDeltaEvent):
            print(event.delta, end="", flush=True)
        elif isinstance(event, ToolOutputAvailableEvent):
            print(f"\n  [{event.tool_name}] {event.output}")
        elif isinstance(event, ToolApprovalRequestEvent):
            approvals.append(event)
        elif isinstance(event, ErrorEvent):
            print(f"\n  Error: {event.error_text}")
        elif isinstance(event, FinishEvent):
            print()
    return approvals


async def main() -> None:
    """
    Chat with the agent in the terminal, approving confirmation-gated tools by hand.
    """
    settings = load_settings()
    setup_logging(settings.log_level)
    if not settings.openai_api_key:
        print("Error: OPENAI_API_KEY not found in environment variables.")
        return

    router = create_session_router(settings)
    print("Welcome to the CLI Chat! Commands: /user <name>, exit")
    session = router.get(input("Your name: ").strip() or "guest")

    while True:
        user_input = input(f"\n{session.user_name}: ").strip()
        if user_input.lower() in ["exit", "quit"]:
            print("Goodbye!")
            break
        if user_input.startswith("/user "):
            session = router.get(user_input.split(maxsplit=1)[1])
            print(f"Switched to {session.user_name}.")
            continue
        if not user_input:
            continue

        approvals = await stream_turn(session, user_input)
        while approvals:
            for request in approvals:
                answer = input(f"Run {request.tool_name} with {request.input}? [y/N] ").strip().lower()
                outcome = ConfirmationOutcome.APPROVED if answer == "y" else ConfirmationOutcome.REJECTED
                session.resolve(request.tool_call_id, outcome)
            approvals = await stream_turn(session, None)


if __name__ == "__main__":
    asyncio.run(main())

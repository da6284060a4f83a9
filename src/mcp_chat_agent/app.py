"""Wire settings, the OpenAI client, the MCP tool server and sessions together."""

from typing import Optional

from openai import AsyncOpenAI

from mcp_chat_agent.config import ChatSettings, load_settings
from mcp_chat_agent.llm_core import ConversationStreamDriver
from mcp_chat_agent.llm_impl import GenericOpenAI, OpenAIToolRegistry
from mcp_chat_agent.mcp_wrapper import MCPToolServer
from mcp_chat_agent.session import ChatSession, SessionRouter


def build_driver(settings: ChatSettings, client: Optional[AsyncOpenAI] = None) -> ConversationStreamDriver:
    """Build the stream driver described by ``settings``.

    Args:
        settings: Loaded configuration.
        client: Optional preconfigured client; created from the settings otherwise.

    Returns:
        A driver connecting to the configured tool server on every turn.
    """
    if client is None:
        client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)

    llm = GenericOpenAI(client=client, model_name=settings.openai_model, sys_instruction=settings.system_prompt)
    return ConversationStreamDriver(
        llm=llm,
        tool_server=MCPToolServer(settings.mcp_server_config()),
        confirmation_list=settings.confirmation_list,
        registry_cls=OpenAIToolRegistry,
        max_steps=settings.max_steps,
        tool_timeout=settings.tool_timeout,
    )


def create_session_router(
    settings: Optional[ChatSettings] = None, client: Optional[AsyncOpenAI] = None
) -> SessionRouter:
    """Create a router handing each user an independent ``ChatSession``.

    The user id doubles as the session's user name.
    """
    settings = settings or load_settings()
    driver = build_driver(settings, client=client)
    confirmation_list = settings.confirmation_list

    def new_session(user_id: str) -> ChatSession:
        return ChatSession(
            driver=driver,
            confirmation_list=confirmation_list,
            registry_cls=OpenAIToolRegistry,
            user_name=user_id,
        )

    return SessionRouter(new_session)

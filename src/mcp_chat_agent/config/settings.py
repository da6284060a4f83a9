"""Runtime configuration read from the environment (and an optional ``.env`` file)."""

import os
from typing import List, Literal, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from mcp_chat_agent.llm_core import ConfirmationList
from mcp_chat_agent.llm_core.logger import get_logger
from mcp_chat_agent.mcp_wrapper import MCPServerConfig

logger = get_logger(__name__)

LOCAL_MCP_URL = "http://localhost:5173/sse"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant that uses the responses from tools to answer the user's query."
DEFAULT_CONFIRMATION_TOOLS = ("getWeatherInformation",)


class ChatSettings(BaseModel):
    """Settings shared by the chat agent, the CLI and the demo tool server.

    Attributes:
        openai_api_key: API key for the OpenAI-compatible endpoint.
        openai_model: Model name used for chat and by the demo server.
        openai_base_url: Optional alternative API base URL.
        mcp_tools_url: SSE endpoint of the tool server.
        is_local: Use the local tool server URL and mock remote calls in the demo server.
        mcp_transport: ``sse`` or ``stdio``.
        mcp_server_command: Command for the stdio transport.
        mcp_server_args: Arguments for the stdio command.
        tools_requiring_confirmation: Names of tools gated behind user approval.
        max_steps: Maximum model steps per turn.
        tool_timeout: Seconds before a single tool execution is abandoned.
        system_prompt: System instruction sent with every request.
        log_level: Level passed to ``setup_logging``.
    """

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    mcp_tools_url: Optional[str] = None
    is_local: bool = False
    mcp_transport: Literal["sse", "stdio"] = "sse"
    mcp_server_command: Optional[str] = None
    mcp_server_args: List[str] = Field(default_factory=list)
    tools_requiring_confirmation: List[str] = Field(default_factory=lambda: list(DEFAULT_CONFIRMATION_TOOLS))
    max_steps: int = Field(default=100, ge=1)
    tool_timeout: float = Field(default=180.0, gt=0)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    log_level: str = "INFO"

    @property
    def confirmation_list(self) -> ConfirmationList:
        return ConfirmationList.of(self.tools_requiring_confirmation)

    @property
    def tool_server_url(self) -> str:
        """SSE URL of the tool server; the local dev server when ``is_local`` is set."""
        if self.is_local or not self.mcp_tools_url:
            return LOCAL_MCP_URL
        return self.mcp_tools_url

    def mcp_server_config(self) -> MCPServerConfig:
        if self.mcp_transport == "stdio":
            return MCPServerConfig(
                transport="stdio", command=self.mcp_server_command, args=list(self.mcp_server_args)
            )
        return MCPServerConfig(transport="sse", url=self.tool_server_url)


def _split(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env_file: Optional[str] = None) -> ChatSettings:
    """Load settings from the process environment.

    A ``.env`` file is loaded first (without overriding variables that are
    already set). Unset variables keep their defaults.

    Args:
        env_file: Explicit path of the ``.env`` file; searched upwards from the
            working directory when omitted.

    Returns:
        The validated settings.
    """
    dotenv_path = env_file or find_dotenv(usecwd=True)
    if dotenv_path:
        logger.debug("Loading environment from %s", dotenv_path)
        load_dotenv(dotenv_path)

    raw = {
        "openai_api_key": os.getenv("OPENAI_API_KEY"),
        "openai_model": os.getenv("OPENAI_API_MODEL"),
        "openai_base_url": os.getenv("OPENAI_BASE_URL"),
        "mcp_tools_url": os.getenv("MCP_TOOLS_URL"),
        "is_local": _flag(os.getenv("IS_LOCAL")),
        "mcp_transport": os.getenv("MCP_TRANSPORT"),
        "mcp_server_command": os.getenv("MCP_SERVER_COMMAND"),
        "mcp_server_args": _split(os.getenv("MCP_SERVER_ARGS")),
        "tools_requiring_confirmation": _split(os.getenv("TOOLS_REQUIRING_CONFIRMATION")),
        "max_steps": os.getenv("MAX_STEPS"),
        "tool_timeout": os.getenv("TOOL_TIMEOUT"),
        "system_prompt": os.getenv("SYSTEM_PROMPT"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    return ChatSettings(**{key: value for key, value in raw.items() if value is not None})

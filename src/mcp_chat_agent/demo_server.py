"""Demo MCP tool server exposing a handful of tools to the chat agent.

Run with ``python -m mcp_chat_agent.demo_server``; it serves SSE on
``http://localhost:5173/sse``.
"""

from typing import Optional

import httpx
from mcp.server.fastmcp import FastMCP
from openai import AsyncOpenAI

from mcp_chat_agent.config import ChatSettings, load_settings
from mcp_chat_agent.llm_core import setup_logging
from mcp_chat_agent.llm_core.logger import get_logger

logger = get_logger(__name__)

JOKE_API_URL = "https://official-joke-api.appspot.com/random_joke"
LOCAL_JOKE = "Why did the scarecrow win an award? Because he was outstanding in his field!"
FACT_SYSTEM_PROMPT = "You are a helpful assistant that generates facts about a given topic."


def get_local_time(location: str) -> str:
    return f"It is 10am in {location}"


def get_weather_information(location: str) -> str:
    return f"It is sunny in {location}"


async def tell_a_joke(is_local: bool, http_client: Optional[httpx.AsyncClient] = None) -> str:
    """Return a joke; canned when running locally, fetched from the joke API otherwise.

    Raises:
        RuntimeError: If the joke API answers with an error status.
    """
    if is_local:
        return LOCAL_JOKE

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await client.get(JOKE_API_URL)
        if response.is_error:
            raise RuntimeError("Failed to fetch joke")
        joke = response.json()
    finally:
        if owns_client:
            await client.aclose()
    return f"{joke['setup']} {joke['punchline']}"


async def get_fact_about_topic(topic: str, client: AsyncOpenAI, model: str) -> str:
    """Ask the model for one concise fact about ``topic``."""
    completion = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": FACT_SYSTEM_PROMPT},
            {"role": "user", "content": f"Generate a random fact about {topic}. Keep it concise and informative."},
        ],
    )
    return completion.choices[0].message.content or ""


def create_server(settings: ChatSettings, client: Optional[AsyncOpenAI] = None, port: int = 5173) -> FastMCP:
    """Build the demo server with its four tools registered."""
    server = FastMCP("Starter", port=port)
    openai_client = client or AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)

    async def joke_tool() -> str:
        return await tell_a_joke(settings.is_local)

    async def fact_tool(topic: str) -> str:
        return await get_fact_about_topic(topic, openai_client, settings.openai_model)

    server.add_tool(get_local_time, name="getLocalTime", description="Get the local time for a specified location")
    server.add_tool(
        get_weather_information, name="getWeatherInformation", description="Get the weather for a specified location"
    )
    server.add_tool(joke_tool, name="tellAJoke", description="Tell a random joke")
    server.add_tool(fact_tool, name="getFactAboutTopic", description="Get a random fact about a particular topic")
    return server


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Starting demo tool server (local mode: %s).", settings.is_local)
    create_server(settings).run(transport="sse")


if __name__ == "__main__":
    main()

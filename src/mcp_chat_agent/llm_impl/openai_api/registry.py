from typing import Any, Dict, List

from mcp_chat_agent.llm_core import ToolRegistry


class OpenAIToolRegistry(ToolRegistry):
    """
    A ToolRegistry declaring its tools in the OpenAI chat-completions format.
    """

    @property
    def tool_object(self) -> List[Dict[str, Any]] | None:
        """
        Generates a list of tool definitions suitable for the OpenAI API
        based on the registered tools.

        Returns:
            A list of tool dictionaries, or None if no tools are registered.
        """
        if not self.tools:
            return None

        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema or {"type": "object", "properties": {}},
                },
            }
            for tool in self.tools.values()
        ]

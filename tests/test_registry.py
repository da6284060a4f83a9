from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, Field

from mcp_chat_agent.llm_core.exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from mcp_chat_agent.llm_core.tools.models import ToolDescriptor
from mcp_chat_agent.llm_core.tools.registry import ToolRegistry
from mcp_chat_agent.llm_core.tools.schema import ParameterKind, ParameterSchema
from mcp_chat_agent.llm_impl import OpenAIToolRegistry


class ConcreteTestRegistry(ToolRegistry):
    @property
    def tool_object(self):
        return [tool.name for tool in self.tools.values()]


@pytest.fixture
def registry():
    return ConcreteTestRegistry()


def test_decorator_registers_typed_parameters(registry):
    @registry.tool
    def convert(amount: float, currency: str, exact: bool = False, note=None) -> str:
        """Convert an amount into another currency."""
        return f"{amount} {currency}"

    tool = registry.get("convert")
    assert tool.description == "Convert an amount into another currency."
    assert tool.parameters.parameters == {
        "amount": ParameterKind.NUMBER,
        "currency": ParameterKind.STRING,
        "exact": ParameterKind.BOOLEAN,
        "note": ParameterKind.ANY,
    }
    assert tool.parameters.optional == frozenset({"exact", "note"})
    assert tool.input_schema["required"] == ["amount", "currency"]
    assert tool.input_schema["properties"]["amount"] == {"type": "number"}
    assert tool.is_executable
    # the decorator hands back the original function
    assert convert(1.0, "EUR") == "1.0 EUR"


def test_register_without_docstring_fails(registry):
    def undocumented(x: int) -> int:
        return x

    with pytest.raises(ToolValidationError, match="missing docstring"):
        registry.register(undocumented)


def test_register_with_explicit_description(registry):
    def undocumented() -> str:
        return "ok"

    tool = registry.register(undocumented, name="ping", description="Ping the service.")
    assert tool.name == "ping"
    assert "ping" in registry
    assert "undocumented" not in registry


def test_register_rejects_non_callables(registry):
    with pytest.raises(ToolRegistrationError):
        registry.register("not a tool")


def test_duplicate_registration_last_wins(registry):
    registry.register(ToolDescriptor(name="lookup", description="first"))
    registry.register(ToolDescriptor(name="lookup", description="second"))

    assert len(registry) == 1
    assert registry.get("lookup").description == "second"


def test_unregister_and_get_unknown(registry):
    registry.register(ToolDescriptor(name="lookup", description="Look something up"))
    registry.unregister("lookup")

    with pytest.raises(ToolNotFoundError):
        registry.unregister("lookup")
    with pytest.raises(ToolNotFoundError):
        registry.get("lookup")


def test_merge_keeps_type_and_later_wins(registry):
    other = ConcreteTestRegistry()
    registry.register(ToolDescriptor(name="a", description="from left"))
    registry.register(ToolDescriptor(name="b", description="only left"))
    other.register(ToolDescriptor(name="a", description="from right"))

    merged = registry.merge(other)

    assert isinstance(merged, ConcreteTestRegistry)
    assert merged.get("a").description == "from right"
    assert merged.names == ["a", "b"]
    # sources are untouched
    assert registry.get("a").description == "from left"


def test_implementations_only_lists_executable_tools(registry):
    def run() -> str:
        """Run it."""
        return "ran"

    registry.register(run)
    registry.register(ToolDescriptor(name="gated", description="Needs approval", requires_confirmation=True))

    assert list(registry.implementations) == ["run"]


def test_openai_tool_object_format():
    registry = OpenAIToolRegistry()
    assert registry.tool_object is None

    schema = {"type": "object", "properties": {"location": {"type": "string"}}}
    registry.register(
        ToolDescriptor(
            name="getWeatherInformation",
            description="Get the weather",
            parameters=ParameterSchema(tool_name="getWeatherInformation", parameters={"location": ParameterKind.STRING}),
            input_schema=schema,
        )
    )

    assert registry.tool_object == [
        {
            "type": "function",
            "function": {"name": "getWeatherInformation", "description": "Get the weather", "parameters": schema},
        }
    ]


class Address(BaseModel):
    city: str
    zip_code: Optional[str] = None


def test_rich_annotations_keep_their_schema(registry):
    @registry.tool
    def ship(
        address: Address,
        note: Annotated[str, Field(description="Delivery note")],
        nickname: Optional[str] = None,
    ) -> str:
        """Ship a parcel."""
        return address.city

    tool = registry.get("ship")
    properties = tool.input_schema["properties"]

    assert properties["note"] == {"type": "string", "description": "Delivery note"}
    assert {"type": "string"} in properties["nickname"]["anyOf"]
    assert properties["address"]["properties"]["city"] == {"type": "string"}
    assert "$defs" not in tool.input_schema
    assert tool.input_schema["required"] == ["address", "note"]

    assert tool.parameters.parameters == {
        "address": ParameterKind.ANY,
        "note": ParameterKind.STRING,
        "nickname": ParameterKind.ANY,
    }
    assert tool.parameters.optional == frozenset({"nickname"})


def test_zero_argument_tool_has_empty_object_schema(registry):
    @registry.tool
    def ping() -> str:
        """Ping."""
        return "pong"

    assert registry.get("ping").input_schema == {"type": "object", "properties": {}}

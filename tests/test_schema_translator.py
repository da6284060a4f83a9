import math

import pytest

from mcp_chat_agent.llm_core.exceptions import SchemaMismatch, ToolValidationError
from mcp_chat_agent.llm_core.tools.schema import ParameterKind, translate_input_schema, translate_parameters

WEATHER_SCHEMA = {
    "type": "object",
    "properties": {"location": {"type": "string"}},
    "required": ["location"],
}


def test_weather_schema_accepts_string_location():
    schema = translate_input_schema(WEATHER_SCHEMA, tool_name="getWeatherInformation")
    assert schema.parameters == {"location": ParameterKind.STRING}
    assert schema.validate_arguments({"location": "Paris"}) == {"location": "Paris"}


def test_weather_schema_rejects_number_location():
    schema = translate_input_schema(WEATHER_SCHEMA, tool_name="getWeatherInformation")
    with pytest.raises(SchemaMismatch) as exc_info:
        schema.validate_arguments({"location": 5})

    assert "location" in exc_info.value.errors
    assert "getWeatherInformation" in str(exc_info.value)
    assert isinstance(exc_info.value, ToolValidationError)


def test_missing_typed_parameter_is_reported():
    schema = translate_parameters({"count": "number"}, tool_name="counter")
    with pytest.raises(SchemaMismatch, match="count"):
        schema.validate_arguments({})


def test_number_kind_rejects_booleans_and_nan():
    assert ParameterKind.NUMBER.accepts(3)
    assert ParameterKind.NUMBER.accepts(2.5)
    assert not ParameterKind.NUMBER.accepts(True)
    assert not ParameterKind.NUMBER.accepts(math.nan)
    assert not ParameterKind.NUMBER.accepts("3")


def test_boolean_kind_is_strict():
    schema = translate_parameters({"flag": "boolean"})
    assert schema.validate_arguments({"flag": False}) == {"flag": False}
    with pytest.raises(SchemaMismatch):
        schema.validate_arguments({"flag": 0})


def test_unknown_tags_become_any():
    schema = translate_input_schema(
        {
            "properties": {
                "items": {"type": "array"},
                "meta": {"description": "no type at all"},
                "count": {"type": "integer"},
            }
        }
    )

    assert set(schema.parameters.values()) == {ParameterKind.ANY}
    # ANY parameters may be absent and take anything when present
    assert schema.validate_arguments({}) == {}
    assert schema.validate_arguments({"items": [1, 2], "count": "many"}) == {"items": [1, 2], "count": "many"}


def test_undeclared_keys_are_dropped():
    schema = translate_input_schema(WEATHER_SCHEMA)
    assert schema.validate_arguments({"location": "Oslo", "unit": "C"}) == {"location": "Oslo"}


@pytest.mark.parametrize("input_schema", [None, {}, {"type": "object"}, {"type": "object", "properties": {}}])
def test_empty_schema_accepts_empty_arguments(input_schema):
    schema = translate_input_schema(input_schema, tool_name="tellAJoke")
    assert schema.parameters == {}
    assert schema.validate_arguments({}) == {}
    assert schema.validate_arguments(None) == {}


def test_malformed_properties_are_ignored():
    schema = translate_input_schema({"properties": ["location"]})
    assert schema.parameters == {}


def test_all_errors_are_collected():
    schema = translate_parameters({"a": "string", "b": "number"}, tool_name="pair")
    with pytest.raises(SchemaMismatch) as exc_info:
        schema.validate_arguments({"a": 1})

    assert set(exc_info.value.errors) == {"a", "b"}

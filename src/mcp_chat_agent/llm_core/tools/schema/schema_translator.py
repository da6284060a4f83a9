"""Translate a remote tool's declared input schema into a local argument validator.

Each declared parameter maps to exactly one ``ParameterKind``. The three
primitive kinds are checked strictly; anything else becomes ``ANY`` and is
passed through untouched.
"""

import math
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...exceptions import SchemaMismatch
from ...logger import get_logger

logger = get_logger(__name__)


class ParameterKind(str, Enum):
    """Primitive kind of a single tool parameter."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ANY = "any"

    @classmethod
    def from_tag(cls, tag: Optional[Any]) -> "ParameterKind":
        """Map a JSON schema type tag to a kind; unknown or missing tags become ``ANY``."""
        if isinstance(tag, str):
            try:
                kind = cls(tag)
            except ValueError:
                return cls.ANY
            return kind
        return cls.ANY

    def accepts(self, value: Any) -> bool:
        """Return True if ``value`` is a valid instance of this kind."""
        if self is ParameterKind.STRING:
            return isinstance(value, str)
        if self is ParameterKind.NUMBER:
            # bool is an int subclass but never a number here.
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return not (isinstance(value, float) and math.isnan(value))
        if self is ParameterKind.BOOLEAN:
            return isinstance(value, bool)
        return True


class ParameterSchema(BaseModel):
    """Validator for the arguments of one tool.

    Attributes:
        tool_name: Tool the schema belongs to, used in error messages.
        parameters: Declared parameters and their kinds.
        optional: Typed parameters that may be omitted.
    """

    model_config = ConfigDict(frozen=True)

    tool_name: str = ""
    parameters: Dict[str, ParameterKind] = Field(default_factory=dict)
    optional: FrozenSet[str] = Field(default_factory=frozenset)

    def validate_arguments(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Check call arguments against the declared kinds.

        Typed parameters must be present and match their kind. ``ANY``
        parameters may be absent and are never checked. Undeclared keys are
        dropped from the returned mapping.

        Args:
            arguments: Arguments issued by the model. ``None`` counts as ``{}``.

        Returns:
            The accepted arguments.

        Raises:
            SchemaMismatch: If one or more typed parameters are missing or of the wrong kind.
        """
        arguments = dict(arguments or {})
        accepted: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        for name, kind in self.parameters.items():
            if name not in arguments:
                if kind is not ParameterKind.ANY and name not in self.optional:
                    errors[name] = f"missing required {kind.value}"
                continue
            value = arguments[name]
            if not kind.accepts(value):
                errors[name] = f"expected {kind.value}, got {type(value).__name__}"
                continue
            accepted[name] = value

        if errors:
            raise SchemaMismatch(self.tool_name, errors)
        return accepted


def translate_parameters(parameters: Optional[Mapping[str, Any]], tool_name: str = "") -> ParameterSchema:
    """Build a ``ParameterSchema`` from a mapping of parameter name to type tag.

    Args:
        parameters: Parameter name to ``"string"``, ``"number"``, ``"boolean"`` or anything else.
        tool_name: Tool name used in validation errors.

    Returns:
        The parameter schema. An empty or missing mapping accepts only ``{}``.
    """
    fields = {name: ParameterKind.from_tag(tag) for name, tag in (parameters or {}).items()}
    return ParameterSchema(tool_name=tool_name, parameters=fields)


def translate_input_schema(input_schema: Optional[Mapping[str, Any]], tool_name: str = "") -> ParameterSchema:
    """Build a ``ParameterSchema`` from a JSON-schema-like ``inputSchema``.

    Only the top-level ``properties`` are inspected; each property's ``type``
    selects the kind.

    Args:
        input_schema: The tool's declared input schema, possibly None or empty.
        tool_name: Tool name used in validation errors.

    Returns:
        The parameter schema.
    """
    properties = (input_schema or {}).get("properties") or {}
    if not isinstance(properties, Mapping):
        logger.warning("Ignoring malformed properties in input schema of tool '%s'.", tool_name)
        properties = {}

    tags = {
        name: (prop.get("type") if isinstance(prop, Mapping) else None) for name, prop in properties.items()
    }
    return translate_parameters(tags, tool_name=tool_name)

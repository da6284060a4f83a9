"""Clean remote JSON schemas before they are declared to the model."""

from typing import Any, Dict, Mapping, Optional, Set

import jsonref  # type: ignore

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """Helpers for turning a tool server's ``inputSchema`` into a model-facing parameter schema."""

    @staticmethod
    def assert_no_recursive_refs(schema: Mapping[str, Any]) -> None:
        """Raise if following local ``$ref`` pointers ever loops back on itself.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def walk(node: Any, seen: Set[str]) -> None:
            if isinstance(node, Mapping):
                ref = node.get("$ref")
                if isinstance(ref, str):
                    if ref in seen:
                        msg = f"Recursive structure detected: {ref}. Tool inputs must not be recursive."
                        logger.error(msg)
                        raise ToolValidationError(msg)
                    target = ref.rsplit("/", 1)[-1]
                    if ref.startswith("#") and target in defs:
                        walk(defs[target], seen | {ref})
                    return
                for value in node.values():
                    walk(value, seen)
            elif isinstance(node, list):
                for item in node:
                    walk(item, seen)

        walk(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """Drop metadata keys (``$defs``, ``$schema``, ``$id``, ``title``) recursively.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            A sanitized copy; non-dict values are returned unchanged.
        """
        if not isinstance(schema, dict):
            return schema

        cleaned: Dict[str, Any] = {}
        for key, value in schema.items():
            if key in _METADATA_KEYS:
                continue
            if key == "properties" and isinstance(value, dict):
                # Property names are user data, not schema keywords.
                cleaned[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                cleaned[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                cleaned[key] = [SchemaValidator.sanitize_schema(item) for item in value]
            else:
                cleaned[key] = value
        return cleaned

    @classmethod
    def prepare_input_schema(cls, schema: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Resolve local refs and sanitize a tool's input schema for the model.

        A missing or empty schema becomes an empty object schema, which every
        provider accepts.

        Args:
            schema: The ``inputSchema`` advertised by the tool server.

        Returns:
            A plain, ref-free object schema.

        Raises:
            ToolValidationError: If the schema is recursive.
        """
        if not schema:
            return {"type": "object", "properties": {}}

        cls.assert_no_recursive_refs(schema)
        # proxies=False returns plain dicts instead of JsonRef objects
        resolved = jsonref.replace_refs(dict(schema), proxies=False)
        prepared = cls.sanitize_schema(resolved)

        prepared.setdefault("type", "object")
        if prepared.get("type") == "object":
            prepared.setdefault("properties", {})
        return prepared

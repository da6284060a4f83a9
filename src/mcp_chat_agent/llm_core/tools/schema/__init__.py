"""Tool parameter translation and model-facing schema cleanup."""

from .schema_translator import ParameterKind, ParameterSchema, translate_parameters, translate_input_schema
from .schema_validator import SchemaValidator

__all__ = [
    "ParameterKind",
    "ParameterSchema",
    "translate_parameters",
    "translate_input_schema",
    "SchemaValidator",
]

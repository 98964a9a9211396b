"""schemaview - typed, validating views over JSON data described by JSON Schema."""

from schemaview.config import Settings, settings
from schemaview.errors.exceptions import (
    SchemaDocumentError,
    SchemaViewError,
    TypeMismatchError,
    UnknownPropertyError,
    UnresolvedReferenceError,
)
from schemaview.instance import Instance
from schemaview.logging_config import configure_logging
from schemaview.models.descriptor import EMPTY_SCHEMA, AdditionalProperties, SchemaDescriptor
from schemaview.models.enums import AdditionalPropertiesMode, JsonType, StringFormat
from schemaview.schemas.loader import compile_file, compile_files
from schemaview.schemas.registry import SchemaRegistry
from schemaview.services.coercion import export_value, import_value
from schemaview.services.compiler.schema_compiler import SchemaCompiler, compile_schema
from schemaview.services.union_matcher import match_type

__all__ = [
    "Settings",
    "settings",
    "configure_logging",
    "SchemaViewError",
    "SchemaDocumentError",
    "TypeMismatchError",
    "UnknownPropertyError",
    "UnresolvedReferenceError",
    "SchemaCompiler",
    "compile_schema",
    "compile_file",
    "compile_files",
    "SchemaRegistry",
    "SchemaDescriptor",
    "EMPTY_SCHEMA",
    "AdditionalProperties",
    "AdditionalPropertiesMode",
    "JsonType",
    "StringFormat",
    "Instance",
    "match_type",
    "import_value",
    "export_value",
]

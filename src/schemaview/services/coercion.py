"""Import/export coercion between wire values and semantic values.

Every `import_<kind>` / `export_<kind>` pair takes the value and the
property's schema descriptor (for `format`, `items` and `$ref` lookups).
Exports of arrays and objects are shallow: nested Instances are not
re-exported field by field.
"""

import base64
import binascii
import json
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from urllib.parse import ParseResult, SplitResult, urlsplit

from pydantic import BaseModel

from schemaview.errors.exceptions import TypeMismatchError
from schemaview.models.descriptor import SchemaDescriptor
from schemaview.models.enums import JsonType, StringFormat
from schemaview.services.union_matcher import FALSE_TOKENS, NULL_TOKENS, TRUE_TOKENS, match_type

_INTEGER_FORMAT = re.compile(r"^u?int(32|64)$")


def _kind(value: Any) -> str:
    return type(value).__name__


def _instance_type():
    from schemaview.instance import Instance

    return Instance


# ---------------------------------------------------------------------------
# string
# ---------------------------------------------------------------------------

def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise TypeMismatchError(
            _kind(value), StringFormat.DATE_TIME,
            f"Could not parse RFC 3339 timestamp from {value!r}.",
        ) from exc


def format_timestamp(value: datetime) -> str:
    """Render *value* as RFC 3339, using `Z` for UTC."""
    text = value.isoformat()
    if value.tzinfo is not None and value.utcoffset() == timezone.utc.utcoffset(None):
        text = text[: -len("+00:00")] + "Z"
    return text


def import_string(value: Any, schema: SchemaDescriptor) -> Any:
    if value is None:
        return None
    fmt = schema.format
    if fmt == StringFormat.BYTE:
        try:
            return base64.b64decode(value)
        except (binascii.Error, TypeError, ValueError) as exc:
            raise TypeMismatchError(_kind(value), StringFormat.BYTE) from exc
    if fmt == StringFormat.DATE_TIME:
        if not isinstance(value, str):
            raise TypeMismatchError(_kind(value), StringFormat.DATE_TIME)
        return _parse_timestamp(value)
    if fmt == StringFormat.URL:
        return urlsplit(str(value))
    if fmt and _INTEGER_FORMAT.match(fmt):
        return import_integer(value, schema)
    return value


def export_string(value: Any, schema: SchemaDescriptor) -> Any:
    fmt = schema.format
    if fmt == StringFormat.BYTE:
        if isinstance(value, str):
            value = value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray)):
            raise TypeMismatchError(_kind(value), "bytes")
        return base64.b64encode(value).decode("ascii")
    if fmt == StringFormat.DATE_TIME:
        if isinstance(value, str):
            value = _parse_timestamp(value)
        elif not callable(getattr(value, "isoformat", None)):
            raise TypeMismatchError(
                _kind(value), StringFormat.DATE_TIME,
                f"Could not obtain RFC 3339 timestamp from {_kind(value)}.",
            )
        if isinstance(value, datetime):
            return format_timestamp(value)
        return value.isoformat()
    if fmt == StringFormat.URL:
        if isinstance(value, (SplitResult, ParseResult)):
            return value.geturl()
        return urlsplit(str(value)).geturl()
    if fmt and _INTEGER_FORMAT.match(fmt):
        return str(import_integer(value, schema))
    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return str(value.value)
    raise TypeMismatchError(_kind(value), JsonType.STRING, f"Expected str or Enum, got {_kind(value)}.")


# ---------------------------------------------------------------------------
# boolean
# ---------------------------------------------------------------------------

def _boolean_token(value: Any) -> bool | None:
    if value is None:
        return None
    token = str(value).lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    if token in NULL_TOKENS:
        return None
    raise TypeMismatchError(_kind(value), JsonType.BOOLEAN)


def import_boolean(value: Any, schema: SchemaDescriptor) -> bool | None:
    return _boolean_token(value)


def export_boolean(value: Any, schema: SchemaDescriptor) -> bool | None:
    return _boolean_token(value)


# ---------------------------------------------------------------------------
# number / integer
# ---------------------------------------------------------------------------

def _numeric(value: Any, convert: Callable[[Any], Any], expected: str) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeMismatchError(_kind(value), expected)
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise TypeMismatchError(_kind(value), expected) from exc


def import_number(value: Any, schema: SchemaDescriptor) -> float | None:
    return _numeric(value, float, JsonType.NUMBER)


def export_number(value: Any, schema: SchemaDescriptor) -> float | None:
    return _numeric(value, float, JsonType.NUMBER)


def import_integer(value: Any, schema: SchemaDescriptor) -> int | None:
    return _numeric(value, int, JsonType.INTEGER)


def export_integer(value: Any, schema: SchemaDescriptor) -> int | None:
    return _numeric(value, int, JsonType.INTEGER)


# ---------------------------------------------------------------------------
# array
# ---------------------------------------------------------------------------

def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def import_array(value: Any, schema: SchemaDescriptor) -> list:
    if value is None:
        return []
    if not _is_sequence(value):
        raise TypeMismatchError(_kind(value), JsonType.ARRAY)
    array = list(value)
    items_data = schema.raw_data.get("items")
    if isinstance(items_data, dict) and "$ref" in items_data:
        items_schema = schema.resolve_items()
        instance_type = _instance_type()
        array = [instance_type(item, items_schema) for item in array]
    return array


def export_array(value: Any, schema: SchemaDescriptor) -> list | None:
    if value is None:
        return None
    if not _is_sequence(value):
        raise TypeMismatchError(_kind(value), JsonType.ARRAY)
    return list(value)


# ---------------------------------------------------------------------------
# object
# ---------------------------------------------------------------------------

def import_object(value: Any, schema: SchemaDescriptor) -> Any:
    if value is None:
        return None
    return _instance_type()(value, schema.dereference())


def export_object(value: Any, schema: SchemaDescriptor) -> Any:
    if value is None:
        return None
    if isinstance(value, _instance_type()):
        return value.to_mapping()
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if callable(getattr(value, "to_json", None)):
        return json.loads(value.to_json())
    raise TypeMismatchError(_kind(value), JsonType.OBJECT, f"Expected a mapping, got {_kind(value)}.")


# ---------------------------------------------------------------------------
# any / union
# ---------------------------------------------------------------------------

def import_any(value: Any, schema: SchemaDescriptor) -> Any:
    return value


def export_any(value: Any, schema: SchemaDescriptor) -> Any:
    return value


IMPORTERS: dict[str, Callable[[Any, SchemaDescriptor], Any]] = {
    JsonType.STRING: import_string,
    JsonType.BOOLEAN: import_boolean,
    JsonType.INTEGER: import_integer,
    JsonType.NUMBER: import_number,
    JsonType.ARRAY: import_array,
    JsonType.OBJECT: import_object,
    JsonType.NULL: lambda value, schema: None,
    JsonType.ANY: import_any,
}

EXPORTERS: dict[str, Callable[[Any, SchemaDescriptor], Any]] = {
    JsonType.STRING: export_string,
    JsonType.BOOLEAN: export_boolean,
    JsonType.INTEGER: export_integer,
    JsonType.NUMBER: export_number,
    JsonType.ARRAY: export_array,
    JsonType.OBJECT: export_object,
    JsonType.NULL: lambda value, schema: None,
    JsonType.ANY: export_any,
}


def _union(value: Any, schema: SchemaDescriptor, table: dict, coerce_object: Callable) -> Any:
    matched = match_type(value, schema.union_types or schema.type, schema.base_uri, schema.registry)
    if isinstance(matched, SchemaDescriptor):
        return coerce_object(value, matched)
    if matched is None:
        return value
    return table[matched](value, schema)


def import_union(value: Any, schema: SchemaDescriptor) -> Any:
    return _union(value, schema, IMPORTERS, import_object)


def export_union(value: Any, schema: SchemaDescriptor) -> Any:
    return _union(value, schema, EXPORTERS, export_object)


def import_value(value: Any, schema: SchemaDescriptor) -> Any:
    """Convert a raw wire value to its semantic form according to *schema*."""
    schema = schema.dereference()
    declared = schema.type
    if isinstance(declared, list):
        return import_union(value, schema)
    return IMPORTERS.get(declared, import_any)(value, schema)


def import_dynamic(value: Any, schema: SchemaDescriptor) -> Any:
    """Import an additional-properties value.

    Mappings are wrapped in an Instance whenever *schema* carries a key
    space, whether or not it declares `"type": "object"`.
    """
    schema = schema.dereference()
    if isinstance(value, Mapping) and schema.is_instantiable:
        return import_object(value, schema)
    return import_value(value, schema)


def export_value(value: Any, schema: SchemaDescriptor) -> Any:
    """Convert a semantic value back to its wire form according to *schema*."""
    schema = schema.dereference()
    declared = schema.type
    if isinstance(declared, list):
        return export_union(value, schema)
    return EXPORTERS.get(declared, export_any)(value, schema)

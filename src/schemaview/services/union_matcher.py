"""Type selection for schema unions (`"type": [...]`).

Matching runs a strict pass over every candidate before any lenient pass,
so an exact kind in a union wins over a loosely coercible one even when
the coercible candidate is listed first.
"""

from collections.abc import Mapping
from enum import Enum
from numbers import Real
from typing import Any

from pydantic import BaseModel

from schemaview.models.descriptor import SchemaDescriptor
from schemaview.models.enums import JsonType
from schemaview.schemas.registry import SchemaRegistry

TRUE_TOKENS = frozenset({"true", "yes", "y", "on", "1"})
FALSE_TOKENS = frozenset({"false", "no", "n", "off", "0"})
NULL_TOKENS = frozenset({"nil", "null", "undefined"})

Match = str | SchemaDescriptor | None


def _is_instance(value: Any) -> bool:
    from schemaview.instance import Instance

    return isinstance(value, Instance)


def _candidates(union: Any) -> list:
    if not isinstance(union, (list, tuple)):
        union = [union]
    flat: list = []
    for member in union:
        if isinstance(member, (list, tuple)):
            flat.extend(_candidates(member))
        elif member is not None and member not in flat:
            flat.append(member)
    return flat


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _inline_schema(member: Any, base_uri: str | None, registry: SchemaRegistry | None) -> SchemaDescriptor:
    if isinstance(member, SchemaDescriptor):
        return member.dereference()
    from schemaview.services.compiler.schema_compiler import SchemaCompiler

    compiler = SchemaCompiler(registry if registry is not None else SchemaRegistry())
    return compiler.compile_anonymous(member, base_uri).dereference()


def _strict(value: Any, member: Any, base_uri: str | None, registry: SchemaRegistry | None) -> Match:
    if isinstance(member, (dict, SchemaDescriptor)):
        # Only object data can be wrapped in an inline schema's Instance.
        if not (isinstance(value, Mapping) or _is_instance(value)):
            return None
        schema = _inline_schema(member, base_uri, registry)
        return schema if schema.validate(value) else None
    if member == JsonType.STRING and isinstance(value, str):
        return JsonType.STRING
    if member == JsonType.BOOLEAN and (value is True or value is False):
        return JsonType.BOOLEAN
    if member == JsonType.INTEGER and isinstance(value, int) and not isinstance(value, bool):
        return JsonType.INTEGER
    if member == JsonType.NUMBER and isinstance(value, Real) and not isinstance(value, bool):
        return JsonType.NUMBER
    if member == JsonType.ARRAY and isinstance(value, (list, tuple)):
        return JsonType.ARRAY
    if member == JsonType.OBJECT and (isinstance(value, Mapping) or _is_instance(value)):
        return JsonType.OBJECT
    if member == JsonType.NULL and value is None:
        return JsonType.NULL
    return None


def _lenient(value: Any, member: Any) -> Match:
    if member == JsonType.STRING and isinstance(value, (str, Enum)):
        return JsonType.STRING
    if member == JsonType.BOOLEAN and str(value).lower() in TRUE_TOKENS | FALSE_TOKENS:
        return JsonType.BOOLEAN
    if member == JsonType.INTEGER and (_to_int(value) or value == "0"):
        return JsonType.INTEGER
    if member == JsonType.NUMBER and (_to_float(value) or value in ("0", "0.0")):
        return JsonType.NUMBER
    if member == JsonType.ARRAY and isinstance(value, (list, tuple)):
        return JsonType.ARRAY
    if member == JsonType.OBJECT and (
        isinstance(value, (Mapping, BaseModel))
        or _is_instance(value)
        or callable(getattr(value, "to_json", None))
    ):
        return JsonType.OBJECT
    if member == JsonType.ANY:
        return JsonType.ANY
    return None


def match_type(
    value: Any,
    union: Any,
    base_uri: str | None = None,
    registry: SchemaRegistry | None = None,
) -> Match:
    """Select the union member that best matches *value*.

    Args:
        value: The raw or semantic value being imported or exported.
        union: Type names and/or inline schemas (mappings or compiled descriptors).
        base_uri: Anchor for `$ref` inside inline schemas.
        registry: Registry used to resolve those references.

    Returns:
        The matching type name, the matching inline schema's descriptor,
        or None when nothing matches.
    """
    candidates = _candidates(union)
    for member in candidates:
        matched = _strict(value, member, base_uri, registry)
        if matched is not None:
            return matched
    for member in candidates:
        if isinstance(member, (dict, SchemaDescriptor)):
            continue
        matched = _lenient(value, member)
        if matched is not None:
            return matched
    return None

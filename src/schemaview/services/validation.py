"""Recursive structural validation of data against compiled schemas.

Validation never raises for data problems: a non-conforming value simply
yields False. Checks are fail-fast, no error list is collected. Only
configuration problems (an unregistered `items` reference) raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Real
from typing import TYPE_CHECKING, Any

from schemaview.models.descriptor import SchemaDescriptor
from schemaview.models.enums import AdditionalPropertiesMode, JsonType

if TYPE_CHECKING:
    from schemaview.instance import Instance


def _within_bounds(value: Real, schema_data: dict[str, Any]) -> bool:
    minimum = schema_data.get("minimum")
    if minimum is not None:
        if schema_data.get("exclusiveMinimum"):
            if value <= minimum:
                return False
        elif value < minimum:
            return False
    maximum = schema_data.get("maximum")
    if maximum is not None:
        if schema_data.get("exclusiveMaximum"):
            if value >= maximum:
                return False
        elif value > maximum:
            return False
    return True


def _validate_number(value: Any, schema: SchemaDescriptor) -> bool:
    if not isinstance(value, Real) or isinstance(value, bool):
        return False
    return _within_bounds(value, schema.raw_data)


def _validate_integer(value: Any, schema: SchemaDescriptor) -> bool:
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return _within_bounds(value, schema.raw_data)


def _validate_array(value: Any, schema: SchemaDescriptor) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    items_schema = schema.resolve_items()
    if items_schema is None:
        return True
    return all(validate_value(item, items_schema) for item in value)


def _validate_object(value: Any, schema: SchemaDescriptor) -> bool:
    from schemaview.instance import Instance

    if isinstance(value, Instance):
        return value.is_valid()
    if not isinstance(value, Mapping):
        return False
    return schema.new(value).is_valid()


_TYPE_CHECKS = {
    JsonType.STRING: lambda value, schema: isinstance(value, str),
    JsonType.BOOLEAN: lambda value, schema: isinstance(value, bool),
    JsonType.NUMBER: _validate_number,
    JsonType.INTEGER: _validate_integer,
    JsonType.ARRAY: _validate_array,
    JsonType.OBJECT: _validate_object,
    JsonType.NULL: lambda value, schema: value is None,
    JsonType.ANY: lambda value, schema: True,
}


def validate_value(value: Any, schema: SchemaDescriptor) -> bool:
    """Return True if *value* conforms to *schema* (after dereferencing)."""
    schema = schema.dereference()
    declared = schema.type
    if isinstance(declared, list):
        return _validate_union(value, schema)
    if declared is None:
        # Untyped schemas accept anything, but mappings still honour declared properties.
        if isinstance(value, Mapping):
            return schema.new(value).is_valid()
        return True
    check = _TYPE_CHECKS.get(declared)
    if check is None:
        return True
    return check(value, schema)


def _validate_union(value: Any, schema: SchemaDescriptor) -> bool:
    for member in schema.union_types:
        if isinstance(member, SchemaDescriptor):
            if validate_value(value, member):
                return True
            continue
        check = _TYPE_CHECKS.get(member)
        if check is None or check(value, schema):
            return True
    return False


def validate_property_value(value: Any, schema: SchemaDescriptor) -> bool:
    """Validate a property value, honouring the property's own `required` flag.

    `required` is read from the referencing schema, not the `$ref` target.
    """
    if value is None:
        return not schema.required
    return validate_value(value, schema)


def _dependencies_met(instance: Instance, key: str, value: Any) -> bool:
    dependency = instance.descriptor.dependencies.get(key)
    if dependency is None:
        return True
    if isinstance(dependency, SchemaDescriptor):
        return validate_value(value, dependency)
    return all(instance.get(sibling) is not None for sibling in dependency)


def validate_instance(instance: Instance) -> bool:
    """Validate an Instance's data against its descriptor and every `extends` ancestor."""
    descriptor = instance.descriptor
    data = instance.to_mapping()
    unvalidated = set(data)

    for key, property_schema in descriptor.properties.items():
        value = data.get(key)
        if not validate_property_value(value, property_schema):
            return False
        unvalidated.discard(key)
        if value is None:
            # Omitted optional property: dependency checks do not apply.
            continue
        if not _dependencies_met(instance, key, value):
            return False

    policy = descriptor.additional_properties
    if policy.mode == AdditionalPropertiesMode.DISALLOWED:
        if unvalidated:
            return False
    elif policy.mode == AdditionalPropertiesMode.SCHEMA:
        if not all(validate_value(data[key], policy.schema) for key in unvalidated):
            return False

    if descriptor.parent is not None:
        return descriptor.parent.new(data).is_valid()
    return True

"""Schema-backed views over JSON-like data."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from schemaview.errors.exceptions import TypeMismatchError, UnknownPropertyError
from schemaview.models.descriptor import EMPTY_SCHEMA, SchemaDescriptor
from schemaview.models.enums import AdditionalPropertiesMode
from schemaview.services.coercion import export_value, import_dynamic, import_value
from schemaview.services.compiler.naming import wire_key
from schemaview.services.validation import validate_instance


def _as_mapping(data: Any) -> dict:
    if data is None:
        return {}
    if isinstance(data, Instance):
        return data.to_mapping()
    if isinstance(data, dict):
        return data
    if isinstance(data, Mapping):
        return dict(data)
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if callable(getattr(data, "to_json", None)):
        decoded = json.loads(data.to_json())
        if isinstance(decoded, dict):
            return decoded
    raise TypeMismatchError(
        type(data).__name__,
        "object",
        "Unable to parse. Expected a mapping or an object with to_json().",
    )


class Instance:
    """Raw data plus the schema descriptor that describes it.

    ``Instance(data, descriptor)`` returns an object of the descriptor's
    generated class, which adds one attribute per declared property.
    Dict input is wrapped rather than copied, so nested instances write
    through to their parent's data.
    """

    _descriptor: SchemaDescriptor = EMPTY_SCHEMA

    def __new__(cls, data: Any = None, descriptor: SchemaDescriptor | None = None):
        if descriptor is not None and cls is Instance:
            cls = descriptor.instance_class
        return super().__new__(cls)

    def __init__(self, data: Any = None, descriptor: SchemaDescriptor | None = None) -> None:
        descriptor = descriptor if descriptor is not None else type(self)._descriptor
        if not descriptor.is_instantiable:
            raise TypeMismatchError(
                str(descriptor.type),
                "object",
                "Only schemas of type 'object' are instantiable.",
            )
        self._descriptor = descriptor
        self._data = _as_mapping(data)

    @classmethod
    def from_json(cls, text: str | bytes, descriptor: SchemaDescriptor | None = None) -> Instance:
        """Decode a JSON document into an Instance."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise TypeMismatchError(type(data).__name__, "object")
        return cls(data, descriptor)

    @property
    def descriptor(self) -> SchemaDescriptor:
        return self._descriptor

    # Raw keyed access, unaffected by coercion.

    def __getitem__(self, key: str) -> Any:
        return self._data.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # Named, typed property access.

    def get_property(self, name: str) -> Any:
        """Return the imported value of property *name*, falling back to its default."""
        declared = self._descriptor.property_for(name)
        if declared is not None:
            key, schema = declared
            value = self._data.get(key)
            if value is None:
                default = schema.default
                if default is None:
                    default = schema.dereference().default
                value = copy.deepcopy(default)
            return import_value(value, schema)
        policy = self._descriptor.additional_properties
        key = self._dynamic_key(name)
        if policy.mode == AdditionalPropertiesMode.UNRESTRICTED:
            return self._data.get(key)
        if policy.mode == AdditionalPropertiesMode.SCHEMA:
            return import_dynamic(self._data.get(key), policy.schema)
        raise UnknownPropertyError(name, self._descriptor.uri)

    def set_property(self, name: str, value: Any) -> None:
        """Export *value* and store it under property *name*'s wire key."""
        declared = self._descriptor.property_for(name)
        if declared is not None:
            key, schema = declared
            self._data[key] = export_value(value, schema)
            return
        policy = self._descriptor.additional_properties
        key = self._dynamic_key(name)
        if policy.mode == AdditionalPropertiesMode.UNRESTRICTED:
            self._data[key] = value
        elif policy.mode == AdditionalPropertiesMode.SCHEMA:
            self._data[key] = export_value(value, policy.schema)
        else:
            raise UnknownPropertyError(name, self._descriptor.uri)

    def _dynamic_key(self, name: str) -> str:
        """Pick the data key for an undeclared name: camelCase wire key first, then the literal name."""
        converted = wire_key(name)
        if self._data.get(converted) is not None:
            return converted
        return name

    # Validation and serialization.

    def is_valid(self) -> bool:
        """Validate the data against the schema (and any `extends` ancestors)."""
        return validate_instance(self)

    def to_mapping(self) -> dict:
        """Return the backing data verbatim, without coercion."""
        return self._data

    def to_json(self) -> str:
        return json.dumps(self._data, separators=(",", ":"), ensure_ascii=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return self._descriptor is other._descriptor and self._data == other._data

    __hash__ = None

    def __repr__(self) -> str:
        description = self._descriptor.description
        if description:
            return f"<{type(self).__name__}:{id(self):#x} DESC:'{description}'>"
        return f"<{type(self).__name__}:{id(self):#x}>"

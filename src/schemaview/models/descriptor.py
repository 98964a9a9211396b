"""Compiled schema descriptors."""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from schemaview.errors.exceptions import UnresolvedReferenceError
from schemaview.models.enums import AdditionalPropertiesMode, JsonType
from schemaview.schemas.uri import resolve_uri

if TYPE_CHECKING:
    from schemaview.instance import Instance
    from schemaview.schemas.registry import SchemaRegistry


@dataclass(frozen=True)
class AdditionalProperties:
    """Policy for data keys not covered by a declared property."""

    mode: AdditionalPropertiesMode
    schema: SchemaDescriptor | None = None

    @classmethod
    def unrestricted(cls) -> AdditionalProperties:
        return cls(AdditionalPropertiesMode.UNRESTRICTED)

    @classmethod
    def disallowed(cls) -> AdditionalProperties:
        return cls(AdditionalPropertiesMode.DISALLOWED)

    @classmethod
    def from_schema(cls, schema: SchemaDescriptor) -> AdditionalProperties:
        return cls(AdditionalPropertiesMode.SCHEMA, schema)


@dataclass(eq=False)
class SchemaDescriptor:
    """Compiled, resolvable representation of one JSON Schema.

    Every schema node compiles to a descriptor, primitive property schemas
    included. Descriptors compare by identity; the registry guarantees one
    descriptor per URI.
    """

    raw_data: dict[str, Any]
    uri: str | None = None
    base_uri: str | None = None
    registry: SchemaRegistry | None = field(default=None, repr=False)
    parent: SchemaDescriptor | None = field(default=None, repr=False)
    reference: SchemaDescriptor | None = field(default=None, repr=False)
    properties: dict[str, SchemaDescriptor] = field(default_factory=dict, repr=False)
    keys: dict[str, str] = field(default_factory=dict, repr=False)
    additional_properties: AdditionalProperties = field(
        default_factory=AdditionalProperties.unrestricted, repr=False
    )
    dependencies: dict[str, list[str] | SchemaDescriptor] = field(default_factory=dict, repr=False)
    items: SchemaDescriptor | None = field(default=None, repr=False)
    union_types: list[str | SchemaDescriptor] = field(default_factory=list, repr=False)
    _instance_class: type | None = field(default=None, init=False, repr=False)

    @property
    def type(self) -> str | list | None:
        return self.raw_data.get("type")

    @property
    def format(self) -> str | None:
        return self.raw_data.get("format")

    @property
    def default(self) -> Any:
        return self.raw_data.get("default")

    @property
    def description(self) -> str | None:
        return self.raw_data.get("description")

    @property
    def required(self) -> bool:
        return self.raw_data.get("required") is True

    @property
    def is_instantiable(self) -> bool:
        """Only schemas without a declared type, or typed `object`, carry a key space."""
        declared = self.type
        if declared is None:
            return True
        if isinstance(declared, list):
            return JsonType.OBJECT in declared
        return declared == JsonType.OBJECT

    def dereference(self) -> SchemaDescriptor:
        """Return the descriptor a `$ref` schema points at, or self."""
        return self.reference if self.reference is not None else self

    def resolve_items(self) -> SchemaDescriptor | None:
        """Return the descriptor for `items`.

        Referenced item schemas are looked up on demand so a schema may
        describe arrays of itself.
        """
        if self.items is not None:
            return self.items
        items_data = self.raw_data.get("items")
        if not isinstance(items_data, dict) or "$ref" not in items_data:
            return None
        reference = items_data["$ref"]
        items_uri = resolve_uri(self.base_uri, reference)
        target = self.registry.get(items_uri) if self.registry is not None else None
        if target is None:
            raise UnresolvedReferenceError(reference, items_uri)
        return target

    def property_for(self, name: str) -> tuple[str, SchemaDescriptor] | None:
        """Look up a declared property by accessor name, then by wire key.

        Properties declared only by an `extends` ancestor are found on that ancestor.
        """
        key = self.keys.get(name)
        if key is None and name in self.properties:
            key = name
        if key is None:
            return self.parent.property_for(name) if self.parent is not None else None
        return key, self.properties[key]

    def validate(self, value: Any) -> bool:
        """Return True if *value* conforms to this schema."""
        from schemaview.services.validation import validate_value

        return validate_value(value, self)

    def new(self, data: Any = None) -> Instance:
        return self.instance_class(data, self)

    @property
    def instance_class(self) -> type[Instance]:
        """Generated Instance subclass with one attribute per declared property."""
        if self._instance_class is None:
            self._instance_class = _build_instance_class(self)
        return self._instance_class

    def __repr__(self) -> str:
        return f"SchemaDescriptor(uri={self.uri!r}, type={self.type!r})"


def _class_name(descriptor: SchemaDescriptor) -> str:
    # Nested schemas share their owner's URI but are never registered under it.
    registered = descriptor.registry is not None and descriptor.registry.get(descriptor.uri) is descriptor
    if descriptor.uri and registered:
        stem = descriptor.uri.rstrip("/").rsplit("/", 1)[-1].split("#")[0].split(".")[0]
        words = [w for w in stem.replace("-", "_").split("_") if w]
        name = "".join(w[:1].upper() + w[1:] for w in words)
        if name.isidentifier():
            return name
    return "AnonymousInstance"


def _make_property(name: str, doc: str | None) -> property:
    def getter(self):
        return self.get_property(name)

    def setter(self, value):
        self.set_property(name, value)

    return property(getter, setter, doc=doc)


def _build_instance_class(descriptor: SchemaDescriptor) -> type:
    from schemaview.instance import Instance

    reserved = set(dir(Instance))
    namespace: dict[str, Any] = {"__doc__": descriptor.description, "_descriptor": descriptor}
    for name, key in descriptor.keys.items():
        if not name.isidentifier() or keyword.iskeyword(name) or name in reserved:
            # Still reachable through get_property / set_property.
            continue
        namespace[name] = _make_property(name, descriptor.properties[key].description)
    base = descriptor.parent.instance_class if descriptor.parent is not None else Instance
    return type(_class_name(descriptor), (base,), namespace)


EMPTY_SCHEMA = SchemaDescriptor(raw_data={})
"""The universal empty schema: accepts all JSON, exposes no declared properties."""

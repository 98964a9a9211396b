"""Schema compiler - turns schema documents into registered descriptors.

Resolution order matters: an `extends` parent and every `$ref` target
outside of `items` must be compiled into the registry before the schema
that names it.
"""

import copy
import logging
from typing import Any

from schemaview.config import Settings, settings as default_settings
from schemaview.errors.exceptions import SchemaDocumentError, UnresolvedReferenceError
from schemaview.logging_config import bind_schema_context, clear_schema_context
from schemaview.models.descriptor import AdditionalProperties, SchemaDescriptor
from schemaview.schemas.registry import SchemaRegistry
from schemaview.schemas.uri import normalize_uri, resolve_uri
from schemaview.schemas.validator import check_schema_document
from schemaview.services.compiler.naming import property_name

logger = logging.getLogger(__name__)


class SchemaCompiler:
    """Compiles schema data against a caller-owned registry."""

    def __init__(self, registry: SchemaRegistry, settings: Settings | None = None) -> None:
        self.registry = registry
        self.settings = settings or default_settings

    def compile(self, schema_data: dict[str, Any], base_uri: str | None = None) -> SchemaDescriptor:
        """Compile a schema document and register it under *base_uri*.

        Re-compiling identical data under an already registered URI returns
        the registered descriptor, so accessor types stay stable.

        Raises:
            UnresolvedReferenceError: If an `extends` or `$ref` target is not registered.
            SchemaDocumentError: If the document is malformed.
        """
        if not isinstance(schema_data, dict):
            raise SchemaDocumentError(
                f"Schema document must be an object, got {type(schema_data).__name__}"
            )
        uri = normalize_uri(base_uri)
        with self.registry.lock:
            bind_schema_context(uri)
            try:
                existing = self.registry.get(uri)
                if existing is not None and existing.raw_data == schema_data:
                    logger.debug("Schema %s already compiled, reusing descriptor", uri)
                    return existing
                if existing is not None:
                    logger.warning("Redefining schema %s with different data", uri)

                if self.settings.check_schema_documents:
                    check_schema_document(schema_data, uri)

                descriptor = self._compile(copy.deepcopy(schema_data), uri)
                self.registry.register(descriptor)
                logger.debug(
                    "Registered schema %s (%d properties)", uri, len(descriptor.properties)
                )
                return descriptor
            finally:
                clear_schema_context()

    def compile_anonymous(
        self, schema_data: dict[str, Any], base_uri: str | None = None
    ) -> SchemaDescriptor:
        """Compile an inline schema without registering it.

        *base_uri* anchors `$ref` resolution; the descriptor itself has no identity.
        """
        return self._compile(copy.deepcopy(schema_data), normalize_uri(base_uri), anonymous=True)

    def _compile(
        self, schema_data: dict[str, Any], uri: str | None, anonymous: bool = False
    ) -> SchemaDescriptor:
        descriptor = SchemaDescriptor(
            raw_data=schema_data,
            uri=None if anonymous else uri,
            base_uri=uri,
            registry=self.registry,
        )

        if "$ref" in schema_data:
            descriptor.reference = self._lookup(schema_data["$ref"], uri)

        parent = None
        if "extends" in schema_data:
            parent = self._lookup(
                schema_data["extends"],
                uri,
                message=(
                    f"Could not find schema to extend: {schema_data['extends']} "
                    "Parent schema must be compiled before child schema."
                ),
            )
            descriptor.parent = parent

        # Nested anonymous schemas inherit this schema's URI unless it declares its own id.
        nested_uri = None if "id" in schema_data else uri

        for key, property_data in (schema_data.get("properties") or {}).items():
            if parent is not None and key in parent.properties:
                # Shallow merge only; whether nested keys should merge recursively is undecided.
                property_data = {**parent.properties[key].raw_data, **property_data}
            descriptor.properties[key] = self._compile_nested(property_data, uri, nested_uri)
            descriptor.keys[property_name(key)] = key

        descriptor.additional_properties = self._additional_properties(
            schema_data.get("additionalProperties"), uri, nested_uri
        )

        for key, dependency in (schema_data.get("dependencies") or {}).items():
            if isinstance(dependency, str):
                descriptor.dependencies[key] = [dependency]
            elif isinstance(dependency, list):
                descriptor.dependencies[key] = list(dependency)
            elif isinstance(dependency, dict):
                descriptor.dependencies[key] = self._compile_nested(dependency, uri, nested_uri)
            else:
                raise SchemaDocumentError(
                    f"Dependency for '{key}' must be a key, a list of keys or a schema",
                    details={"key": key, "dependency": dependency},
                )

        items = schema_data.get("items")
        if isinstance(items, dict) and "$ref" not in items:
            descriptor.items = self._compile_nested(items, uri, nested_uri)

        declared_type = schema_data.get("type")
        if isinstance(declared_type, list):
            union_types: list = []
            for index, member in enumerate(declared_type):
                if member in declared_type[:index]:
                    continue
                if isinstance(member, dict):
                    member = self._compile_nested(member, uri, nested_uri)
                union_types.append(member)
            descriptor.union_types = union_types

        return descriptor

    def _compile_nested(
        self, schema_data: dict[str, Any], owner_uri: str | None, nested_uri: str | None
    ) -> SchemaDescriptor:
        if not isinstance(schema_data, dict):
            raise SchemaDocumentError(
                f"Nested schema must be an object, got {type(schema_data).__name__}",
                details={"schema": schema_data},
            )
        nested = self._compile(schema_data, owner_uri, anonymous=True)
        nested.uri = nested_uri
        return nested

    def _additional_properties(
        self, value: Any, owner_uri: str | None, nested_uri: str | None
    ) -> AdditionalProperties:
        if value is None or value is True:
            return AdditionalProperties.unrestricted()
        if value is False:
            return AdditionalProperties.disallowed()
        return AdditionalProperties.from_schema(self._compile_nested(value, owner_uri, nested_uri))

    def _lookup(self, reference: str, base_uri: str | None, message: str | None = None) -> SchemaDescriptor:
        resolved = resolve_uri(base_uri, reference)
        target = self.registry.get(resolved)
        if target is None:
            raise UnresolvedReferenceError(
                reference,
                resolved,
                message
                or f"Could not find schema: {reference} Referenced schema must be compiled first.",
            )
        return target


def compile_schema(
    schema_data: dict[str, Any],
    base_uri: str | None = None,
    registry: SchemaRegistry | None = None,
) -> SchemaDescriptor:
    """Compile *schema_data* with a one-off compiler.

    Without a *registry* a fresh one is created, which only suits
    self-contained documents.
    """
    return SchemaCompiler(registry if registry is not None else SchemaRegistry()).compile(
        schema_data, base_uri
    )

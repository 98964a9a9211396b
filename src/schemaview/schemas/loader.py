"""Schema file loader with dependency-ordered compilation."""

import json
import logging
from graphlib import CycleError, TopologicalSorter
from pathlib import Path
from typing import Any, Iterable

from schemaview.models.descriptor import SchemaDescriptor
from schemaview.schemas.registry import SchemaRegistry
from schemaview.schemas.uri import normalize_uri, resolve_uri

logger = logging.getLogger(__name__)


def load_json(path: Path) -> dict:
    """Load a JSON file and return parsed dict."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def file_uri(path: Path) -> str:
    """Return the canonical `file://` URI for *path*."""
    return normalize_uri(Path(path).resolve().as_uri())


def referenced_uris(schema_data: Any, base_uri: str | None) -> set[str]:
    """Collect every `extends` and `$ref` target named anywhere in *schema_data*."""
    found: set[str] = set()
    if isinstance(schema_data, dict):
        for keyword in ("extends", "$ref"):
            reference = schema_data.get(keyword)
            if isinstance(reference, str):
                found.add(resolve_uri(base_uri, reference))
        for value in schema_data.values():
            if isinstance(value, (dict, list)):
                found |= referenced_uris(value, base_uri)
    elif isinstance(schema_data, list):
        for value in schema_data:
            found |= referenced_uris(value, base_uri)
    return found


def compile_file(path: Path, registry: SchemaRegistry) -> SchemaDescriptor:
    """Compile the schema document at *path* under its file URI."""
    from schemaview.services.compiler.schema_compiler import SchemaCompiler

    return SchemaCompiler(registry).compile(load_json(path), file_uri(path))


def compile_files(paths: Iterable[Path], registry: SchemaRegistry) -> dict[str, SchemaDescriptor]:
    """Compile several schema documents, parents and `$ref` targets first.

    Only dependencies among *paths* are ordered; references to schemas outside
    the batch must already be registered. Self references are ignored.

    Returns:
        Mapping of file URI to compiled descriptor, in compilation order.
    """
    from schemaview.services.compiler.schema_compiler import SchemaCompiler

    documents = {file_uri(path): load_json(path) for path in paths}
    graph = TopologicalSorter()
    for uri, schema_data in documents.items():
        dependencies = referenced_uris(schema_data, uri) & documents.keys()
        dependencies.discard(uri)
        graph.add(uri, *dependencies)

    try:
        order = list(graph.static_order())
    except CycleError as exc:
        logger.warning("Circular schema references %s, compiling in given order", exc.args[1])
        order = list(documents)

    compiler = SchemaCompiler(registry)
    compiled: dict[str, SchemaDescriptor] = {}
    for uri in order:
        compiled[uri] = compiler.compile(documents[uri], uri)
    return compiled

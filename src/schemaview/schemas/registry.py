"""Schema registry mapping canonical URIs to compiled descriptors."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Iterator

from schemaview.schemas.uri import normalize_uri

if TYPE_CHECKING:
    from schemaview.models.descriptor import SchemaDescriptor

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Caller-owned table of compiled schemas, keyed by normalized URI.

    Registration is last-write-wins. Compilation is a check-then-insert
    sequence, so compilers hold `lock` while they resolve and register.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, SchemaDescriptor] = {}
        self.lock = threading.RLock()

    def get(self, uri: str | None) -> SchemaDescriptor | None:
        if uri is None:
            return None
        return self._schemas.get(normalize_uri(uri))

    def register(self, descriptor: SchemaDescriptor) -> None:
        """Register *descriptor* under its URI. Anonymous schemas are skipped."""
        if descriptor.uri is None:
            return
        uri = normalize_uri(descriptor.uri)
        with self.lock:
            previous = self._schemas.get(uri)
            if previous is not None and previous is not descriptor:
                logger.debug("Replacing registered schema %s", uri)
            self._schemas[uri] = descriptor

    def all_schemas(self) -> dict[str, SchemaDescriptor]:
        """Return a snapshot of every registered schema."""
        with self.lock:
            return dict(self._schemas)

    def clear(self) -> None:
        with self.lock:
            self._schemas.clear()

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and normalize_uri(uri) in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __iter__(self) -> Iterator[str]:
        return iter(self.all_schemas())

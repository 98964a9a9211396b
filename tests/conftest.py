"""Shared test fixtures."""

import logging
from pathlib import Path

import pytest

from schemaview.schemas.loader import compile_file
from schemaview.schemas.registry import SchemaRegistry

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def registry():
    """A fresh, empty registry for each test."""
    return SchemaRegistry()


@pytest.fixture
def load_schema(registry):
    """Compile schema documents from tests/data by name, in the order given.

    Returns the descriptor of the last name.
    """

    def _load(*names):
        descriptor = None
        for name in names:
            descriptor = compile_file(DATA_DIR / f"{name}.json", registry)
        return descriptor

    return _load


@pytest.fixture
def restore_logging():
    """Put the schemaview logger back the way it was after a logging test."""
    logger = logging.getLogger("schemaview")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate

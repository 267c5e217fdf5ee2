"""Configuration for pytest."""

import logging
from typing import Iterator

import pytest

@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """CLI commands reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

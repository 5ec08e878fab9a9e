"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo structlog.configure() calls made by the CLI between tests."""
    yield
    structlog.reset_defaults()

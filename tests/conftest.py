"""Pytest fixtures shared by the resource group test suite."""

from __future__ import annotations

import os
from typing import Any, Iterator, List

import pytest
import structlog

from resource_group.core.config import get_settings
from tests.mocks.mock_handlers import Recorder


@pytest.fixture(autouse=True)
def reset_library_state(monkeypatch) -> Iterator[None]:
    """Ensure each test starts from default settings and logging."""
    for key in list(os.environ):
        if key.upper().startswith("RESOURCE_GROUP_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    structlog.reset_defaults()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def recorder() -> Recorder:
    """A fresh recording cleanup handler."""
    return Recorder()


@pytest.fixture
def call_log() -> List[Any]:
    """Shared log for asserting cross-group ordering."""
    return []

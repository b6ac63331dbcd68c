"""
Pytest Configuration and Fixtures for asyncemit Tests
=====================================================

Purpose
-------
Shared fixtures for the asyncemit test suite.

Responsibilities
----------------
- Put the package into testing mode with debug logging
- Provide fresh Emitter instances
- Provide a call recorder for asserting delivery order

Architecture Notes
------------------
- All tests are unit tests; there is no external infrastructure
- Async tests use pytest-asyncio in strict mode (explicit markers)
- Each test gets a new emitter; emitters share no state
"""

from __future__ import annotations

import os
from typing import Any, Callable, Generator

import pytest

from asyncemit import Emitter
from asyncemit.core.config import Config
from asyncemit.core.logging.logger import clear_log_context


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure test environment."""
    os.environ["ASYNCEMIT_ENV"] = "testing"
    os.environ["ASYNCEMIT_LOG_LEVEL"] = "DEBUG"
    Config.reload()


@pytest.fixture(autouse=True)
def _clean_log_context() -> Generator[None, None, None]:
    clear_log_context()
    yield
    clear_log_context()


# ============================================================================
# EMITTER FIXTURES
# ============================================================================


@pytest.fixture
def emitter() -> Emitter:
    """Fresh emitter with metrics enabled."""
    return Emitter(enable_metrics=True)


class CallRecorder:
    """
    Records listener calls in order.

    Usage:
        calls = CallRecorder()
        emitter.subscribe("x", calls.listener("a"))
        await emitter.emit_serial("x", 1)
        assert calls.events == [("a", 1)]
    """

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def listener(self, label: str) -> Callable[[Any], None]:
        def record(data: Any) -> None:
            self.events.append((label, data))

        record.__qualname__ = f"record[{label}]"
        return record

    def wildcard(self, label: str) -> Callable[[str, Any], None]:
        def record(event_name: str, data: Any) -> None:
            self.events.append((label, event_name, data))

        record.__qualname__ = f"record_any[{label}]"
        return record

    def labels(self) -> list[Any]:
        return [event[0] for event in self.events]


@pytest.fixture
def calls() -> CallRecorder:
    return CallRecorder()

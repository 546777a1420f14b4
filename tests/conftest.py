"""Shared fixtures for ALU tests."""

from __future__ import annotations

import pytest

from alu import ALUEngine, ChangeEvent
from bounds import INT4


@pytest.fixture
def engine() -> ALUEngine:
    return ALUEngine()


@pytest.fixture
def tiny_engine() -> ALUEngine:
    """A 4-bit engine, small enough to reason about by hand."""
    return ALUEngine(INT4)


@pytest.fixture
def events(engine) -> list[ChangeEvent]:
    """Every change event the ``engine`` fixture fires, in order."""
    received: list[ChangeEvent] = []
    engine.subscribe(received.append)
    return received

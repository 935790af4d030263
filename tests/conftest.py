"""
Pytest configuration for handleff tests.

Provides fixtures for capturing the driver's loguru records and for running
with effect creation context capture enabled.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger

from handleff import utils


@pytest.fixture
def loguru_messages() -> Iterator[list[str]]:
    """Enable handleff's loguru namespace and collect formatted messages."""
    messages: list[str] = []
    logger.enable("handleff")
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(sink_id)
        logger.disable("handleff")


@pytest.fixture
def debug_effects(monkeypatch: pytest.MonkeyPatch) -> None:
    """Capture a CreationContext for every effect invocation."""
    monkeypatch.setattr(utils, "DEBUG_EFFECTS", True)

from __future__ import annotations

import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_logging():
    # Sinks added during a test may point at a captured stream that is closed afterwards.
    yield
    logger.remove()
    logger.add(sys.__stderr__, level="WARNING")


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

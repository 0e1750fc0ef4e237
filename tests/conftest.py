"""
Pytest fixtures for the bundle kernel test suite.

Provides:
- Deterministic collaborators (clock, id generator, codec, settings)
- Generators wired to those collaborators
- Structured log capture
"""

import json
import logging
from datetime import UTC, datetime
from io import StringIO

import pytest

from bundle_kernel.domain.clock import DeterministicClock
from bundle_kernel.domain.codec import AttributeValueCodec
from bundle_kernel.domain.identifiers import SequentialIdGenerator
from bundle_kernel.domain.reconciliation import ReadResultReconciler
from bundle_kernel.domain.rollback import RollbackRequestGenerator
from bundle_kernel.domain.settings import KernelSettings
from bundle_kernel.domain.staging import StagingRequestGenerator
from bundle_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

FIXED_TIME = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
FIXED_TIME_ISO = "2024-06-15T12:00:00.000Z"
TEST_TABLE = "resource-db-test"


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def log_stream() -> StringIO:
    """Configure JSON logging into a buffer at DEBUG level."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    configure_logging(level=logging.DEBUG, handler=handler)
    return stream


@pytest.fixture
def read_logs(log_stream):
    """Callable returning every JSON log line captured so far."""

    def _read() -> list[dict]:
        return [json.loads(line) for line in log_stream.getvalue().splitlines() if line]

    return _read


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_TIME)


@pytest.fixture
def id_generator() -> SequentialIdGenerator:
    return SequentialIdGenerator("res")


@pytest.fixture
def codec() -> AttributeValueCodec:
    return AttributeValueCodec()


@pytest.fixture
def settings() -> KernelSettings:
    return KernelSettings(resource_table=TEST_TABLE)


@pytest.fixture
def staging_generator(clock, id_generator, codec, settings) -> StagingRequestGenerator:
    return StagingRequestGenerator(
        clock=clock, id_generator=id_generator, codec=codec, settings=settings
    )


@pytest.fixture
def rollback_generator(settings) -> RollbackRequestGenerator:
    return RollbackRequestGenerator(settings=settings)


@pytest.fixture
def reconciler(codec) -> ReadResultReconciler:
    return ReadResultReconciler(codec=codec)

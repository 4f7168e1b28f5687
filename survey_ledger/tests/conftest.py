"""Pytest configuration and fixtures for survey_ledger tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from survey_ledger.adapters.inbound import OperationDispatcher
from survey_ledger.adapters.outbound import InMemoryLedgerState
from survey_ledger.application import SurveyLedger
from survey_ledger.infrastructure.config import Config, StorageConfig
from survey_ledger.infrastructure.container import Container
from survey_ledger.infrastructure.metrics import MetricsRegistry

VALID_ARGS = ["m1", "SurveyA", "cust1", "7", "great", "2024-01-01"]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Provide a test configuration backed by a temporary directory."""
    return Config(
        storage=StorageConfig(backend="file", data_dir=temp_dir / "ledger"),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def state() -> InMemoryLedgerState:
    """Provide an empty in-memory ledger."""
    return InMemoryLedgerState()


@pytest.fixture
def ledger(state: InMemoryLedgerState, metrics_registry: MetricsRegistry) -> SurveyLedger:
    """Provide a ledger service over the in-memory state."""
    return SurveyLedger(state, metrics=metrics_registry)


@pytest.fixture
def dispatcher(ledger: SurveyLedger, metrics_registry: MetricsRegistry) -> OperationDispatcher:
    """Provide a dispatcher over the ledger service."""
    return OperationDispatcher(ledger, metrics=metrics_registry)


@pytest.fixture
def container() -> Generator[None, None, None]:
    """Reset the singleton container around a test."""
    Container.reset()
    yield
    Container.reset()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")

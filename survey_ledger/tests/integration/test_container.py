"""Integration tests for dependency wiring."""

from __future__ import annotations

import pytest

from survey_ledger.adapters.outbound import FileLedgerState, InMemoryLedgerState
from survey_ledger.infrastructure import container as container_module
from survey_ledger.infrastructure.config import Config, LedgerConfig, ServerConfig
from survey_ledger.infrastructure.container import Container, create_state, get_container
from survey_ledger.infrastructure.metrics import MetricsRegistry

VALID = ["m1", "SurveyA", "cust1", "7", "great", "2024-01-01"]


@pytest.mark.integration
@pytest.mark.usefixtures("container")
class TestContainer:
    """Tests for the Container singleton."""

    def test_file_backend_wiring(
        self, test_config: Config, metrics_registry: MetricsRegistry
    ) -> None:
        container = Container.create(test_config, metrics=metrics_registry)

        assert isinstance(container.state, FileLedgerState)
        assert container.metrics is metrics_registry
        assert container.dispatcher.ledger is container.ledger

        container.dispatcher.invoke("init_survey", VALID)
        assert container.ledger.list_record_ids() == ["m1"]
        assert (test_config.storage.data_dir / "state").is_dir()

    def test_singleton(self, test_config: Config, metrics_registry: MetricsRegistry) -> None:
        first = Container.create(test_config, metrics=metrics_registry)

        assert Container.create() is first
        assert get_container() is first

    def test_ledger_keys_from_config(self, metrics_registry: MetricsRegistry) -> None:
        config = Config(ledger=LedgerConfig(index_key="_marbleindex", probe_key="probe"))

        container = Container.create(config, metrics=metrics_registry)

        assert isinstance(container.state, InMemoryLedgerState)
        assert container.ledger.index_key == "_marbleindex"
        assert container.ledger.probe_key == "probe"


@pytest.mark.integration
def test_create_state_memory_default() -> None:
    assert isinstance(create_state(Config()), InMemoryLedgerState)


@pytest.mark.integration
@pytest.mark.usefixtures("container")
def test_serve_uses_server_settings(
    metrics_registry: MetricsRegistry, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: dict = {}
    monkeypatch.setattr(
        container_module,
        "setup_metrics",
        lambda port, metrics: calls.update(metrics_port=port, metrics=metrics),
    )
    monkeypatch.setattr(
        container_module,
        "run_server",
        lambda dispatcher, host, port: calls.update(dispatcher=dispatcher, host=host, port=port),
    )
    config = Config(server=ServerConfig(host="127.0.0.1", port=9090, metrics_port=9091))
    container = Container.create(config, metrics=metrics_registry)

    container.serve()

    assert calls == {
        "metrics_port": 9091,
        "metrics": metrics_registry,
        "dispatcher": container.dispatcher,
        "host": "127.0.0.1",
        "port": 9090,
    }

"""Unit tests for the SurveyLedger application service."""

from __future__ import annotations

import pytest

from survey_ledger.adapters.outbound import InMemoryLedgerState
from survey_ledger.application import SurveyLedger
from survey_ledger.domain.errors import StorageError
from survey_ledger.domain.services import encode_index
from survey_ledger.infrastructure.metrics import MetricsRegistry
from survey_ledger.ports.inbound import SurveyLedgerPort


def create(ledger: SurveyLedger, record_id: str, score: str = "5") -> None:
    ledger.create_record([record_id, "S", "C", score, "F", "D"])


@pytest.mark.unit
class TestSurveyLedger:
    """Tests for the composed ledger service."""

    def test_implements_port(self, ledger: SurveyLedger) -> None:
        assert isinstance(ledger, SurveyLedgerPort)

    def test_initialize(self, ledger: SurveyLedger, state: InMemoryLedgerState) -> None:
        create(ledger, "m1")

        ledger.initialize(-4)

        assert ledger.read("abc") == b"-4"
        assert ledger.list_record_ids() == []

    def test_custom_keys(self, state: InMemoryLedgerState, metrics_registry: MetricsRegistry) -> None:
        ledger = SurveyLedger(
            state, index_key="_marbleindex", probe_key="probe", metrics=metrics_registry
        )
        ledger.initialize(1)
        create(ledger, "m1")

        assert state.get("probe") == b"1"
        assert state.get("_marbleindex") == b'["m1"]'

    def test_list_records_in_index_order(self, ledger: SurveyLedger) -> None:
        for record_id in ["c", "a", "b"]:
            create(ledger, record_id)

        assert [r.id for r in ledger.list_records()] == ["c", "a", "b"]

    def test_list_records_skips_dangling(
        self, ledger: SurveyLedger, state: InMemoryLedgerState
    ) -> None:
        create(ledger, "a")
        create(ledger, "b")
        state.delete("a")  # bypasses the index

        assert [r.id for r in ledger.list_records()] == ["b"]
        assert ledger.list_record_ids() == ["a", "b"]

    def test_index_gauge(self, ledger: SurveyLedger, metrics_registry: MetricsRegistry) -> None:
        create(ledger, "a")
        create(ledger, "b")

        ledger.list_record_ids()

        assert metrics_registry.index_entries._value.get() == 2

    def test_orphan_counted(
        self,
        ledger: SurveyLedger,
        state: InMemoryLedgerState,
        metrics_registry: MetricsRegistry,
    ) -> None:
        state.fail_next("put", "_surveyindex")

        with pytest.raises(StorageError):
            create(ledger, "a")

        counter = metrics_registry.index_inconsistencies_total.labels(kind="orphan_record")
        assert counter._value.get() == 1

    def test_dangling_counted(
        self,
        ledger: SurveyLedger,
        state: InMemoryLedgerState,
        metrics_registry: MetricsRegistry,
    ) -> None:
        create(ledger, "a")
        state.fail_next("put", "_surveyindex")

        with pytest.raises(StorageError):
            ledger.delete_record("a")

        counter = metrics_registry.index_inconsistencies_total.labels(kind="dangling_id")
        assert counter._value.get() == 1


@pytest.mark.unit
class TestReconcileIndex:
    """Tests for rebuilding the index from a key scan."""

    def test_consistent_index_unchanged(self, ledger: SurveyLedger) -> None:
        create(ledger, "b")
        create(ledger, "a")
        ledger.write_raw("counter", b"3")

        report = ledger.reconcile_index()

        assert not report.changed
        assert report.index == ["b", "a"]

    def test_repairs_orphan_and_dangling(
        self, ledger: SurveyLedger, state: InMemoryLedgerState
    ) -> None:
        create(ledger, "keep")
        create(ledger, "gone")
        state.fail_next("put", "_surveyindex")
        with pytest.raises(StorageError):
            create(ledger, "orphan")
        state.delete("gone")

        report = ledger.reconcile_index()

        assert report.added == ["orphan"]
        assert report.removed == ["gone"]
        assert ledger.list_record_ids() == ["keep", "orphan"]

    def test_collapses_duplicate_entries(
        self, ledger: SurveyLedger, state: InMemoryLedgerState
    ) -> None:
        create(ledger, "a")
        state.put("_surveyindex", encode_index(["a", "a"]))

        report = ledger.reconcile_index()

        assert report.index == ["a"]
        assert report.removed == ["a"]

    def test_raw_keys_not_indexed(self, ledger: SurveyLedger) -> None:
        ledger.write_raw("abc", b"100")
        ledger.write_raw("x", b'{"id":"y"}')

        assert ledger.reconcile_index().index == []

    def test_scan_failure(self, ledger: SurveyLedger, state: InMemoryLedgerState) -> None:
        state.fail_next("keys")

        with pytest.raises(StorageError, match="list ledger keys"):
            ledger.reconcile_index()

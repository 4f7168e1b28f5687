"""Unit tests for the ledger state adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from survey_ledger.adapters.outbound import FileLedgerState, InMemoryLedgerState
from survey_ledger.application import SurveyLedger
from survey_ledger.infrastructure.metrics import MetricsRegistry
from survey_ledger.ports.outbound import LedgerStatePort


@pytest.fixture(params=["memory", "file"])
def any_state(request: pytest.FixtureRequest, temp_dir: Path) -> LedgerStatePort:
    if request.param == "memory":
        return InMemoryLedgerState()
    return FileLedgerState(temp_dir)


@pytest.mark.unit
class TestLedgerStateContract:
    """Behaviour shared by every LedgerStatePort implementation."""

    def test_implements_port(self, any_state: LedgerStatePort) -> None:
        assert isinstance(any_state, LedgerStatePort)

    def test_get_absent(self, any_state: LedgerStatePort) -> None:
        assert any_state.get("missing") is None

    def test_put_get_overwrite(self, any_state: LedgerStatePort) -> None:
        any_state.put("k", b"one")
        any_state.put("k", b"two")

        assert any_state.get("k") == b"two"

    def test_empty_value_is_present(self, any_state: LedgerStatePort) -> None:
        any_state.put("k", b"")

        assert any_state.get("k") == b""

    def test_delete_absent_succeeds(self, any_state: LedgerStatePort) -> None:
        any_state.delete("missing")

    def test_delete(self, any_state: LedgerStatePort) -> None:
        any_state.put("k", b"v")
        any_state.delete("k")

        assert any_state.get("k") is None
        assert "k" not in any_state.keys()

    def test_keys(self, any_state: LedgerStatePort) -> None:
        for key in ["b", "a/../x", "_surveyindex", "ünï"]:
            any_state.put(key, b"v")

        assert sorted(any_state.keys()) == sorted(["b", "a/../x", "_surveyindex", "ünï"])

    @pytest.mark.parametrize("key", ["", "x" * 64, "r" * 300, "é" * 200])
    def test_key_lengths(self, any_state: LedgerStatePort, key: str) -> None:
        any_state.put(key, b"v")

        assert any_state.get(key) == b"v"
        assert any_state.keys() == [key]

        any_state.delete(key)
        assert any_state.get(key) is None
        assert any_state.keys() == []

    def test_transaction_is_reentrant(self, any_state: LedgerStatePort) -> None:
        with any_state.transaction():
            with any_state.transaction():
                any_state.put("k", b"v")

        assert any_state.get("k") == b"v"


@pytest.mark.unit
class TestInMemoryLedgerState:
    """Instrumentation of the in-memory adapter."""

    def test_call_counters(self) -> None:
        state = InMemoryLedgerState()
        state.get("a")
        state.put("a", b"1")
        state.delete("a")

        assert state.calls["get"] == 1
        assert state.writes == 2

    def test_fail_next_is_one_shot(self) -> None:
        state = InMemoryLedgerState()
        state.fail_next("put", "a")

        with pytest.raises(OSError):
            state.put("a", b"1")
        state.put("a", b"1")

        assert state.get("a") == b"1"

    def test_fail_next_matches_key(self) -> None:
        state = InMemoryLedgerState()
        state.fail_next("put", "a")

        state.put("b", b"1")

        with pytest.raises(OSError):
            state.put("a", b"1")

    def test_initial_values_copied(self) -> None:
        initial = {"a": b"1"}
        state = InMemoryLedgerState(initial)
        state.put("b", b"2")

        assert initial == {"a": b"1"}
        assert len(state) == 2


@pytest.mark.unit
class TestFileLedgerState:
    """Persistence of the file adapter."""

    def test_survives_reopen(self, temp_dir: Path) -> None:
        FileLedgerState(temp_dir).put("m1", b"data")

        assert FileLedgerState(temp_dir).get("m1") == b"data"

    def test_no_temp_files_left(self, temp_dir: Path) -> None:
        state = FileLedgerState(temp_dir)
        state.put("m1", b"data")

        assert list((temp_dir / "state").glob("*.tmp")) == []

    def test_foreign_files_ignored(self, temp_dir: Path) -> None:
        state = FileLedgerState(temp_dir)
        (temp_dir / "state" / "not-hex.val").write_bytes(b"x")
        state.put("k", b"v")

        assert state.keys() == ["k"]

    def test_clear(self, temp_dir: Path) -> None:
        state = FileLedgerState(temp_dir)
        state.put("a", b"1")
        state.clear()

        assert state.keys() == []

    def test_long_key_nested_segments(self, temp_dir: Path) -> None:
        """Long keys are split into directories with short names."""
        state = FileLedgerState(temp_dir)
        long_key = "m" * 150
        state.put(long_key, b"data")
        state.put("m" * 64, b"short")

        names = [p.name for p in (temp_dir / "state").rglob("*")]
        limit = FileLedgerState.SEGMENT + len(FileLedgerState.SUFFIX)
        assert all(len(name) <= limit for name in names)
        assert sorted(state.keys()) == sorted([long_key, "m" * 64])

        state.delete(long_key)

        assert [p.name for p in (temp_dir / "state").iterdir()] == [
            ("m" * 64).encode().hex() + ".val"
        ]

    def test_long_record_id_through_ledger(
        self, temp_dir: Path, metrics_registry: MetricsRegistry
    ) -> None:
        ledger = SurveyLedger(FileLedgerState(temp_dir), metrics=metrics_registry)
        record_id = "survey-response-" + "0" * 200

        ledger.create_record([record_id, "S", "C", "1", "F", "D"])

        assert ledger.list_record_ids() == [record_id]
        assert ledger.get_record(record_id).id == record_id

"""In-memory ledger state adapter.

A dictionary-backed implementation of LedgerStatePort for testing and
development. Data is not persisted across restarts.

Besides the port it offers test instrumentation:
    - per-operation call counters (``calls``, ``writes``)
    - one-shot failure injection (``fail_next``)
    - an ``after_get`` hook that runs between a read and the caller's
      follow-up write, to simulate another operation interleaving

Usage:
    state = InMemoryLedgerState()
    state.put("k", b"v")
    state.get("k")
"""

from __future__ import annotations

import threading
from collections import Counter
from contextlib import contextmanager
from typing import Callable, Iterator

AfterGetHook = Callable[[str, "bytes | None"], None]


class InMemoryLedgerState:
    """In-memory implementation of LedgerStatePort.

    Transitions are serialized with a re-entrant lock: ``transaction()``
    holds it for the whole operation, individual calls take it briefly.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        """Initialize storage, optionally pre-populated."""
        self._values: dict[str, bytes] = dict(initial or {})
        self._lock = threading.RLock()
        self._failures: list[tuple[str, str | None]] = []
        self.calls: Counter[str] = Counter()
        self.after_get: AfterGetHook | None = None

    @property
    def writes(self) -> int:
        """Number of put and delete calls made so far."""
        return self.calls["put"] + self.calls["delete"]

    def fail_next(self, operation: str, key: str | None = None) -> None:
        """Make the next ``operation`` call (optionally on ``key``) raise OSError."""
        self._failures.append((operation, key))

    def _check_failure(self, operation: str, key: str) -> None:
        for position, (failing_op, failing_key) in enumerate(self._failures):
            if failing_op == operation and failing_key in (None, key):
                del self._failures[position]
                raise OSError(f"injected {operation} failure on {key}")

    def get(self, key: str) -> bytes | None:
        """Read a value, or None if absent."""
        with self._lock:
            self.calls["get"] += 1
            self._check_failure("get", key)
            value = self._values.get(key)
        if self.after_get is not None:
            self.after_get(key, value)
        return value

    def put(self, key: str, value: bytes) -> None:
        """Store a value."""
        with self._lock:
            self.calls["put"] += 1
            self._check_failure("put", key)
            self._values[key] = bytes(value)

    def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""
        with self._lock:
            self.calls["delete"] += 1
            self._check_failure("delete", key)
            self._values.pop(key, None)

    def keys(self) -> list[str]:
        """List stored keys in insertion order."""
        with self._lock:
            self.calls["keys"] += 1
            self._check_failure("keys", "")
            return list(self._values)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the state lock for the duration of one operation."""
        with self._lock:
            yield

    def snapshot(self) -> dict[str, bytes]:
        """Copy of every stored key and value."""
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        """Number of stored keys."""
        return len(self._values)

"""Ledger state port for key/value persistence.

This outbound port defines the contract for the substrate that holds every
record, the record index and any auxiliary raw keys. The substrate is the
only persistence mechanism; the ledger keeps no state between operations.

The substrate is responsible for:
- Single-key get, put and delete
- Serializing each top-level operation as one atomic transition
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class LedgerStatePort(Protocol):
    """Protocol for key/value ledger state.

    Failures of the underlying store are raised as ``OSError``. An absent
    key is not a failure: ``get`` returns None and ``delete`` is a no-op.

    Serialization:
        The index is maintained by read-modify-write. Two operations that
        interleave inside one transition can lose each other's update, so
        callers run every top-level operation inside ``transaction()``.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Read the value stored under a key.

        Args:
            key: The ledger key.

        Returns:
            The stored bytes, or None if the key is absent.

        Raises:
            OSError: If the read fails.
        """
        ...

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Store a value under a key, replacing any previous value.

        Raises:
            OSError: If the write fails.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Deleting an absent key succeeds.

        Raises:
            OSError: If the delete fails.
        """
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """List every key currently stored.

        Only index reconciliation enumerates the ledger.

        Raises:
            OSError: If the listing fails.
        """
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Run the enclosed operations as one serialized transition."""
        ...

"""File-based ledger state adapter.

Implements LedgerStatePort using the local filesystem. Each key is one
file whose name is the hex encoding of the key's UTF-8 bytes, so any key
(including "/" or "..") maps to a safe file name.

Hex names longer than one segment (128 characters, a 64-byte key) are
split into nested directories, one per full segment, so long keys stay
under the per-name limit of common filesystems. The whole path is still
bounded by the platform's path length.

Usage:
    state = FileLedgerState("/path/to/data")
    state.put("m1", b"{...}")
    value = state.get("m1")

Directory structure:
    data_dir/
        state/
            6d31.val
            5f737572766579696e646578.val
            <128 hex chars>/
                <remaining hex>.val
"""

from __future__ import annotations

import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class FileLedgerState:
    """File-based implementation of LedgerStatePort.

    Writes go to a temporary file that is renamed over the target, so a
    reader never sees a half-written value. Serialization is per process.

    Attributes:
        data_dir: Root directory for all storage
    """

    SUFFIX = ".val"
    SEGMENT = 128

    def __init__(self, data_dir: str | Path) -> None:
        """Initialize file storage.

        Args:
            data_dir: Root directory for storage
        """
        self._data_dir = Path(data_dir)
        self._state_dir = self._data_dir / "state"
        self._state_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    @property
    def data_dir(self) -> Path:
        """Root data directory."""
        return self._data_dir

    def _path(self, key: str) -> Path:
        name = key.encode("utf-8").hex()
        segments = [name[i : i + self.SEGMENT] for i in range(0, len(name), self.SEGMENT)]
        *dirs, last = segments or [""]
        return self._state_dir.joinpath(*dirs, f"{last}{self.SUFFIX}")

    def _key(self, path: Path) -> str | None:
        *dirs, last = path.relative_to(self._state_dir).parts
        if any(len(part) != self.SEGMENT for part in dirs):
            return None
        try:
            return bytes.fromhex("".join(dirs) + last[: -len(self.SUFFIX)]).decode("utf-8")
        except ValueError:
            return None  # not written by this adapter

    def get(self, key: str) -> bytes | None:
        """Read a value from disk, or None if absent."""
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            return None

    def put(self, key: str, value: bytes) -> None:
        """Atomically replace the value stored under ``key``."""
        path = self._path(key)
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._state_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def delete(self, key: str) -> None:
        """Remove a key's file; absent keys are ignored."""
        path = self._path(key)
        with self._lock:
            path.unlink(missing_ok=True)
            parent = path.parent
            while parent != self._state_dir and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent

    def keys(self) -> list[str]:
        """List stored keys, sorted by their encoded name."""
        keys = []
        for path in sorted(self._state_dir.rglob(f"*{self.SUFFIX}")):
            key = self._key(path)
            if key is not None:
                keys.append(key)
        return keys

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Serialize one operation against others in this process."""
        with self._lock:
            yield

    def clear(self) -> None:
        """Delete all stored data.

        Warning: This permanently deletes every key!
        """
        with self._lock:
            for path in list(self._state_dir.rglob(f"*{self.SUFFIX}")):
                path.unlink()
            for directory in sorted(self._state_dir.rglob("*"), reverse=True):
                if directory.is_dir() and not any(directory.iterdir()):
                    directory.rmdir()

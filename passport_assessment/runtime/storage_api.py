"""
passport_assessment.runtime.storage_api — host byte store for contract state.

Design goals
------------
- Deterministic: pure functions over (key, value); no wall-clock.
- Simple default: in-process memory backend for local runs & tests.
- Durable option: SQLite backend (single ``kv`` table, BLOB keys & values).
- Atomic batches: ``write_batch`` applies all puts in one transaction or none.
- Safe: strict byte-length caps read from passport_assessment.config.

Backend API
-----------
- get(key: bytes) -> Optional[bytes]
- set(key: bytes, value: bytes) -> None
- write_batch(items: Iterable[tuple[bytes, bytes]]) -> None
- close() -> None

Any exception raised by a backend is re-raised as ``StoreFailure`` by the
``Storage`` handle; contracts never see raw sqlite3/OS errors.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Protocol, Tuple, Union, runtime_checkable

from passport_assessment.config import load_config
from passport_assessment.errors import StoreFailure

log = logging.getLogger(__name__)

# ---------------------------- Backend API ---------------------------- #


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for contract storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def set(self, key: bytes, value: bytes) -> None: ...
    def write_batch(self, items: Iterable[Tuple[bytes, bytes]]) -> None: ...
    def close(self) -> None: ...


class MemoryBackend:
    """Thread-safe in-memory backend for local runs and tests."""

    def __init__(self) -> None:
        self._store: Dict[bytes, bytes] = {}
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._store[key] = value

    def write_batch(self, items: Iterable[Tuple[bytes, bytes]]) -> None:
        staged = list(items)
        with self._lock:
            self._store.update(staged)

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        with self._lock:
            return iter(sorted(self._store.items()))

    def __len__(self) -> int:
        return len(self._store)

    def close(self) -> None:
        pass


def _migrate(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            k BLOB PRIMARY KEY,
            v BLOB NOT NULL
        )
        """
    )


class SQLiteBackend:
    """
    SQLite-backed store. Batches execute inside a single ``BEGIN IMMEDIATE``
    transaction, so a failed batch leaves no partial writes.
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"], *, create: bool = True) -> None:
        p = Path(path).expanduser()
        if not create and not p.exists():
            raise FileNotFoundError(f"SQLite store not found at {p}")
        if create:
            p.parent.mkdir(parents=True, exist_ok=True)
        self.path = p
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(
            str(p),
            isolation_level=None,  # autocommit; we explicitly BEGIN for batches
            check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")
        _migrate(self._conn)
        log.debug("opened sqlite store", extra={"path": str(p)})

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            row = self._conn.execute("SELECT v FROM kv WHERE k = ?", (memoryview(key),)).fetchone()
        return bytes(row[0]) if row is not None else None

    def set(self, key: bytes, value: bytes) -> None:
        self.write_batch([(key, value)])

    def write_batch(self, items: Iterable[Tuple[bytes, bytes]]) -> None:
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                for k, v in items:
                    self._conn.execute(
                        "INSERT INTO kv(k, v) VALUES(?, ?) ON CONFLICT(k) DO UPDATE SET v=excluded.v",
                        (memoryview(k), memoryview(v)),
                    )
                self._conn.execute("COMMIT")
            except BaseException:
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "SQLiteBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_backend(path: Optional[Union[str, "os.PathLike[str]"]] = None) -> StorageBackend:
    """
    Open the configured backend: SQLite at ``path`` (or PASSPORT_DB), else memory.
    """
    target = path if path is not None else load_config().db_path
    if target is None:
        return MemoryBackend()
    return SQLiteBackend(target)


# --------------------------- Validation helpers --------------------------- #


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError("storage key must be bytes")
    if len(key) == 0:
        raise ValueError("storage key must be non-empty")
    cfg = load_config()
    if cfg.strict_mode and len(key) > cfg.max_storage_key_bytes:
        raise StoreFailure(
            f"storage key too long (>{cfg.max_storage_key_bytes} bytes)",
            context={"op": "validate", "size": len(key)},
        )
    return bytes(key)


def _check_value(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("storage value must be bytes")
    cfg = load_config()
    if cfg.strict_mode and len(value) > cfg.max_storage_value_bytes:
        raise StoreFailure(
            f"storage value too large (>{cfg.max_storage_value_bytes} bytes)",
            context={"op": "validate", "size": len(value)},
        )
    return bytes(value)


# --------------------------- Contract-facing handle --------------------------- #


class Storage:
    """
    Contract-facing byte store over a backend.

    Keys/values are validated against the configured caps; backend errors are
    converted to ``StoreFailure`` so they travel through the contract error
    channel.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value for `key`, or None if not set."""
        k = _check_key(key)
        try:
            return self.backend.get(k)
        except StoreFailure:
            raise
        except Exception as e:
            raise StoreFailure.wrap(e, op="get", key=k) from e

    def set(self, key: bytes, value: bytes) -> None:
        """Set `key` to `value` (overwrites existing)."""
        k = _check_key(key)
        v = _check_value(value)
        try:
            self.backend.set(k, v)
        except StoreFailure:
            raise
        except Exception as e:
            raise StoreFailure.wrap(e, op="set", key=k) from e


__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "Storage",
    "open_backend",
]

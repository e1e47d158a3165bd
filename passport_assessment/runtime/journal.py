"""
passport_assessment.runtime.journal — per-invocation write overlay.

Writes go to an in-memory overlay; reads consult the overlay first, then the
backend. ``commit()`` flushes the overlay to the backend with a single
``write_batch`` call; ``revert()`` discards it. Either way the journal is
closed afterwards.

    j = Journal(backend)
    storage = Storage(j)
    ...                      # contract reads/writes through `storage`
    j.commit()               # or j.revert()

The journal satisfies the ``StorageBackend`` protocol, so the contract-facing
``Storage`` handle never knows it is staged.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from passport_assessment.errors import StoreFailure

from .storage_api import StorageBackend


class JournalClosed(RuntimeError):
    """Raised when a journal is used after commit/revert."""


class Journal:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._overlay: Dict[bytes, bytes] = {}
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def pending(self) -> Dict[bytes, bytes]:
        """A copy of the staged writes."""
        return dict(self._overlay)

    def _require_open(self) -> None:
        if not self._open:
            raise JournalClosed("journal already committed or reverted")

    # --- StorageBackend surface ---

    def get(self, key: bytes) -> Optional[bytes]:
        self._require_open()
        if key in self._overlay:
            return self._overlay[key]
        return self._backend.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._require_open()
        self._overlay[key] = value

    def write_batch(self, items: Iterable[Tuple[bytes, bytes]]) -> None:
        self._require_open()
        self._overlay.update(items)

    def close(self) -> None:
        self.revert()

    # --- transaction control ---

    def commit(self) -> int:
        """Flush staged writes to the backend; returns the number of keys written."""
        self._require_open()
        self._open = False
        if not self._overlay:
            return 0
        items = sorted(self._overlay.items())
        self._overlay = {}
        try:
            self._backend.write_batch(items)
        except Exception as e:
            raise StoreFailure.wrap(e, op="commit") from e
        return len(items)

    def revert(self) -> None:
        """Discard staged writes (idempotent)."""
        self._overlay = {}
        self._open = False


__all__ = ["Journal", "JournalClosed"]

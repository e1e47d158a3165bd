"""
passport_assessment.runtime — host side of the contract

The byte store, the per-invocation journal, the typed Item/Map adapter and the
invocation context live here. The Engine (``runtime.engine``) ties them to the
contract handlers; it is not re-exported to keep ``contract`` -> ``runtime``
imports acyclic.

    from passport_assessment.runtime import Storage, MemoryBackend, Journal
    from passport_assessment.runtime.engine import Engine
"""

from __future__ import annotations

from .context import BlockInfo, Coin, Deps, Env, MessageInfo, coins, default_env
from .journal import Journal
from .outcome import Outcome, Response
from .state_adapter import Item, Map
from .storage_api import MemoryBackend, SQLiteBackend, Storage, StorageBackend, open_backend

__all__ = [
    "BlockInfo",
    "Coin",
    "coins",
    "Deps",
    "Env",
    "default_env",
    "MessageInfo",
    "Journal",
    "Outcome",
    "Response",
    "Item",
    "Map",
    "MemoryBackend",
    "SQLiteBackend",
    "Storage",
    "StorageBackend",
    "open_backend",
]

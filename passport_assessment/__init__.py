"""
passport_assessment — owner-gated score registry contract and its host runtime.

A single owner may assign a signed 32-bit score to any address; anyone may
read the owner or a score (unset scores read as 0).

Public entrypoints (lazy; heavy imports happen on first use):

- version() -> str
- instantiate(owner: str, *, sender: str | None=None, engine=None) -> Outcome
- execute(sender: str, address: str, new_score: int, *, engine=None) -> Outcome
- query(msg: Mapping | str | bytes, *, engine=None) -> Outcome
- export_schemas(out_dir=None) -> list[Path]

Each call without an explicit ``engine`` runs against the configured store
(PASSPORT_DB, or a fresh in-memory store when unset).
"""

from __future__ import annotations

import importlib
from typing import Any, Optional

from .version import __version__


def version() -> str:
    """Return the package version string."""
    return __version__


def _engine(engine: Any = None) -> Any:
    if engine is not None:
        return engine
    return importlib.import_module(".runtime.engine", __name__).Engine()


def _env() -> Any:
    return importlib.import_module(".runtime.context", __name__).default_env()


def _info(sender: str) -> Any:
    return importlib.import_module(".runtime.context", __name__).MessageInfo(sender=sender)


def instantiate(owner: str, *, sender: Optional[str] = None, engine: Any = None) -> Any:
    """Record `owner` as the contract owner."""
    return _engine(engine).instantiate(_env(), _info(sender or owner), {"owner": owner})


def execute(sender: str, address: str, new_score: int, *, engine: Any = None) -> Any:
    """Owner-only: set `address`'s score to `new_score`."""
    msg = {"set_score": {"address": address, "new_score": new_score}}
    return _engine(engine).execute(_env(), _info(sender), msg)


def query(msg: Any, *, engine: Any = None) -> Any:
    """Run a read-only query; the Outcome carries JSON bytes."""
    return _engine(engine).query(_env(), msg)


def export_schemas(out_dir: Any = None) -> Any:
    return importlib.import_module(".schema", __name__).export_schemas(out_dir)


__all__ = [
    "__version__",
    "version",
    "instantiate",
    "execute",
    "query",
    "export_schemas",
]

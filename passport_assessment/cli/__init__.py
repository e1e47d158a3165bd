"""
passport_assessment.cli
-----------------------

Command-line entrypoints. The console script ``passport-assessment`` maps to
``passport_assessment.cli.main:main``; ``resolve_entrypoint`` lets tooling
look it up without importing typer eagerly.
"""

from __future__ import annotations

from importlib import import_module
from typing import Callable, Dict

ENTRYPOINTS: Dict[str, str] = {
    "passport-assessment": "passport_assessment.cli.main:main",
}


def resolve_entrypoint(name: str) -> Callable[[], None]:
    """
    Resolve a CLI name to its `main()` callable.

    Raises KeyError for unknown names and ImportError for malformed targets.
    """
    target = ENTRYPOINTS[name]
    module_path, _, attr = target.partition(":")
    if not module_path or not attr:
        raise ImportError(f"Malformed entrypoint target: {target!r}")
    main_fn = getattr(import_module(module_path), attr)
    if not callable(main_fn):
        raise AttributeError(f"Entrypoint {target!r} is not callable")
    return main_fn


__all__ = ["ENTRYPOINTS", "resolve_entrypoint"]

"""passport_assessment.version — package and contract version.

BASE_VERSION is what ``instantiate`` records in contract storage, so it stays
fixed for a release. ``__version__`` is the installed distribution's version
when available (editable installs included), else BASE_VERSION.
"""

from __future__ import annotations

from importlib import metadata as importlib_metadata

BASE_VERSION = "0.1.0"

DIST_NAME = "passport-assessment"


def installed_version(dist_name: str = DIST_NAME) -> str:
    try:
        return importlib_metadata.version(dist_name)
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = installed_version()

__all__ = ["__version__", "BASE_VERSION", "DIST_NAME", "installed_version"]

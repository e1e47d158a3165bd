"""
passport_assessment.config — storage caps, store location and logging knobs.

Safe to import very early; no third-party deps.

Configuration precedence:
  1) Environment variables (PASSPORT_*)
  2) Hardcoded safe defaults below

Env vars:
  - PASSPORT_STRICT                 (bool)   default: true
  - PASSPORT_MAX_STORAGE_KEY_BYTES  (int)    default: 65_536    (64 KiB)
  - PASSPORT_MAX_STORAGE_VAL_BYTES  (int)    default: 131_072   (128 KiB)
  - PASSPORT_DB                     (path)   default: unset -> in-memory store
  - PASSPORT_LOG_LEVEL              (str)    default: INFO
  - PASSPORT_LOG_FORMAT             (str)    "json" | "text", default: auto

Usage:
    from passport_assessment.config import load_config
    CFG = load_config()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if not raw:
        return None
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple, default: Optional[str]) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val if val in choices else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class AssessmentConfig:
    # Reject malformed keys/values at the storage boundary
    strict_mode: bool

    max_storage_key_bytes: int
    max_storage_value_bytes: int

    # None means an in-memory store
    db_path: Optional[Path]

    log_level: str
    log_format: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_mode": self.strict_mode,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "db_path": str(self.db_path) if self.db_path else None,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def load_config() -> AssessmentConfig:
    """Build and cache an AssessmentConfig from environment + safe defaults."""
    return AssessmentConfig(
        strict_mode=_env_bool("PASSPORT_STRICT", True),
        max_storage_key_bytes=_env_int("PASSPORT_MAX_STORAGE_KEY_BYTES", 65_536, min_v=16, max_v=65_536),
        max_storage_value_bytes=_env_int(
            "PASSPORT_MAX_STORAGE_VAL_BYTES", 131_072, min_v=64, max_v=1_048_576
        ),
        db_path=_env_path("PASSPORT_DB"),
        log_level=(os.getenv("PASSPORT_LOG_LEVEL") or "INFO").strip().upper(),
        log_format=_env_choice("PASSPORT_LOG_FORMAT", ("json", "text"), None),
    )


__all__ = ["AssessmentConfig", "load_config"]

from __future__ import annotations

import logging
from typing import Iterator

import pytest

from passport_assessment.config import load_config
from passport_assessment.runtime.context import Env, MessageInfo
from passport_assessment.runtime.engine import Engine
from passport_assessment.runtime.storage_api import MemoryBackend
from passport_assessment.testing import mock_env, mock_info


@pytest.fixture(autouse=True)
def _fresh_config() -> Iterator[None]:
    """Config is cached per process; tests tweak PASSPORT_* env vars freely."""
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture()
def engine(backend: MemoryBackend) -> Engine:
    return Engine(backend)


@pytest.fixture()
def env() -> Env:
    return mock_env()


@pytest.fixture()
def owner_info() -> MessageInfo:
    return mock_info("owner")


@pytest.fixture()
def initialized(engine: Engine, env: Env, owner_info: MessageInfo) -> Engine:
    engine.instantiate(env, owner_info, {"owner": "owner"}).unwrap()
    return engine

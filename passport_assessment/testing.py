"""
Test helpers mirroring a host's mock environment.

    deps = mock_dependencies()          # Deps over a fresh in-memory store
    env = mock_env()
    info = mock_info("owner", coins(1000, "earth"))
    value = from_binary(query_bytes, OwnerResponse)
"""

from __future__ import annotations

from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

from passport_assessment.runtime.context import BlockInfo, Coin, Deps, Env, MessageInfo
from passport_assessment.runtime.storage_api import MemoryBackend, Storage

M = TypeVar("M", bound=BaseModel)

MOCK_CONTRACT_ADDR = "cosmos2contract"
MOCK_CHAIN_ID = "cosmos-testnet-14002"
MOCK_HEIGHT = 12_345
MOCK_TIME_NS = 1_571_797_419_879_305_533


def mock_env() -> Env:
    return Env(
        block=BlockInfo(height=MOCK_HEIGHT, time_ns=MOCK_TIME_NS, chain_id=MOCK_CHAIN_ID),
        contract_address=MOCK_CONTRACT_ADDR,
    )


def mock_info(sender: str, funds: Iterable[Coin] = ()) -> MessageInfo:
    return MessageInfo.create(sender, funds)


def mock_dependencies() -> Deps:
    return Deps(storage=Storage(MemoryBackend()))


def from_binary(data: bytes, model: Type[M]) -> M:
    return model.model_validate_json(data)


__all__ = [
    "MOCK_CONTRACT_ADDR",
    "mock_env",
    "mock_info",
    "mock_dependencies",
    "from_binary",
]

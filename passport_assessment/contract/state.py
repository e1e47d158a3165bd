"""
Persistent state of the passport assessment contract.

Two collections plus the contract version record:

    STATE          b"state"          -> State{owner}
    SCORES         "scores" map      -> address -> i32
    CONTRACT_INFO  b"contract_info"  -> ContractVersion{contract, version}

``ContractStore`` is the only way handlers touch them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from passport_assessment.runtime.state_adapter import INT32, Item, Map, ModelCodec
from passport_assessment.runtime.storage_api import Storage

from .msg import Addr


class State(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: Addr


class ContractVersion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    contract: str
    version: str


STATE: Item[State] = Item("state", ModelCodec(State))
SCORES: Map[int] = Map("scores", INT32)
CONTRACT_INFO: Item[ContractVersion] = Item("contract_info", ModelCodec(ContractVersion))


class ContractStore:
    """Typed view of the contract's storage for one invocation."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def load_state(self) -> Optional[State]:
        return STATE.may_load(self.storage)

    def require_state(self) -> State:
        """Like ``load_state`` but raises ``Uninitialized`` when absent."""
        return STATE.load(self.storage)

    def save_state(self, state: State) -> None:
        STATE.save(self.storage, state)

    def get_score(self, address: Addr) -> Optional[int]:
        return SCORES.may_load(self.storage, address)

    def set_score(self, address: Addr, score: int) -> None:
        SCORES.save(self.storage, address, score)

    def set_contract_version(self, contract: str, version: str) -> None:
        CONTRACT_INFO.save(self.storage, ContractVersion(contract=contract, version=version))

    def get_contract_version(self) -> Optional[ContractVersion]:
        return CONTRACT_INFO.may_load(self.storage)


__all__ = ["State", "ContractVersion", "STATE", "SCORES", "CONTRACT_INFO", "ContractStore"]

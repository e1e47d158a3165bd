"""
passport_assessment.runtime.context — Env/MessageInfo passed to handlers.

These lightweight records carry the invocation's block environment and the
already-authenticated caller. They contain only pure data and perform strict
validation.

Design notes
------------
- Addresses are opaque strings; the host never normalizes or checks them.
- ``MessageInfo.sender`` is the only field the contract reads for
  authorization.
- Numeric fields are validated to be non-negative.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple

from .storage_api import Storage

Addr = str


class ContextError(ValueError):
    """Validation or coercion failure for Env/MessageInfo."""


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


def _require_str(name: str, v: Any) -> str:
    if not isinstance(v, str):
        raise ContextError(f"{name} must be str, got {type(v).__name__}")
    return v


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int

    def __post_init__(self) -> None:
        _require_str("denom", self.denom)
        _require_non_negative_int("amount", self.amount)


def coins(amount: int, denom: str) -> Tuple[Coin, ...]:
    """Single-denomination funds helper: ``coins(1000, "earth")``."""
    return (Coin(denom=denom, amount=amount),)


@dataclass(frozen=True)
class BlockInfo:
    height: int
    time_ns: int
    chain_id: str

    def __post_init__(self) -> None:
        _require_non_negative_int("height", self.height)
        _require_non_negative_int("time_ns", self.time_ns)
        _require_str("chain_id", self.chain_id)


@dataclass(frozen=True)
class Env:
    """
    Deterministic per-invocation environment.

    Fields
    ------
    block:             Height, consensus time (ns) and chain id.
    contract_address:  Address of the contract instance being invoked.
    """

    block: BlockInfo
    contract_address: Addr

    def __post_init__(self) -> None:
        _require_str("contract_address", self.contract_address)


LOCAL_CHAIN_ID = "passport-local"
LOCAL_CONTRACT_ADDR = "passport_assessment"


def default_env(*, height: int = 0, chain_id: str = LOCAL_CHAIN_ID, contract_address: Addr = LOCAL_CONTRACT_ADDR) -> Env:
    """Env for standalone runs (CLI, package façade): local chain id, wall-clock time."""
    return Env(
        block=BlockInfo(height=height, time_ns=time.time_ns(), chain_id=chain_id),
        contract_address=contract_address,
    )


@dataclass(frozen=True)
class MessageInfo:
    """
    Caller identity handed over by the host.

    Fields
    ------
    sender:  Authenticated caller address.
    funds:   Coins attached to the message (unused by this contract).
    """

    sender: Addr
    funds: Tuple[Coin, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require_str("sender", self.sender)
        object.__setattr__(self, "funds", tuple(self.funds))

    @classmethod
    def create(cls, sender: Addr, funds: Iterable[Coin] = ()) -> "MessageInfo":
        return cls(sender=sender, funds=tuple(funds))


@dataclass(frozen=True)
class Deps:
    """Explicit handle to everything a handler may touch (only storage here)."""

    storage: Storage


__all__ = [
    "Deps",
    "Addr",
    "ContextError",
    "Coin",
    "coins",
    "BlockInfo",
    "Env",
    "default_env",
    "MessageInfo",
]

"""
Passport assessment contract.

Entry points (called by the runtime engine inside one journaled invocation):

    instantiate(deps, env, info, InstantiateMsg) -> Response
        Record the owner and the contract version. Re-running overwrites the
        owner; there is no once-only guard.

    execute(deps, env, info, SetScore) -> Response
        Owner-only: store `new_score` for `address`, replacing any prior value.

    query(deps, env, GetOwner | GetScore) -> bytes
        JSON-encoded OwnerResponse / ScoreResponse. Unset scores read as 0.

Failures are raised as ContractError subclasses; the engine turns them into
an Outcome and discards any staged writes.
"""

from __future__ import annotations

from typing import Union

from passport_assessment.errors import Unauthorized
from passport_assessment.runtime.context import Deps, Env, MessageInfo
from passport_assessment.runtime.outcome import Response
from passport_assessment.version import BASE_VERSION

from .msg import Addr, GetOwner, GetScore, InstantiateMsg, OwnerResponse, ScoreResponse, SetScore
from .state import ContractStore, State

CONTRACT_NAME = "crates.io:passport_assessment"
CONTRACT_VERSION = BASE_VERSION


def instantiate(deps: Deps, env: Env, info: MessageInfo, msg: InstantiateMsg) -> Response:
    store = ContractStore(deps.storage)
    store.set_contract_version(CONTRACT_NAME, CONTRACT_VERSION)
    store.save_state(State(owner=msg.owner))
    return Response().add_attribute("method", "instantiate")


def execute(deps: Deps, env: Env, info: MessageInfo, msg: SetScore) -> Response:
    if isinstance(msg, SetScore):
        return try_set_score(deps, info, msg.address, msg.new_score)
    raise TypeError(f"unsupported execute message: {type(msg).__name__}")


def try_set_score(deps: Deps, info: MessageInfo, address: Addr, new_score: int) -> Response:
    store = ContractStore(deps.storage)
    state = store.require_state()
    if info.sender != state.owner:
        raise Unauthorized()
    store.set_score(address, new_score)
    return Response().add_attribute("method", "set_score")


def query(deps: Deps, env: Env, msg: Union[GetOwner, GetScore]) -> bytes:
    if isinstance(msg, GetOwner):
        return query_owner(deps).model_dump_json().encode("utf-8")
    if isinstance(msg, GetScore):
        return query_score(deps, msg.address).model_dump_json().encode("utf-8")
    raise TypeError(f"unsupported query message: {type(msg).__name__}")


def query_score(deps: Deps, address: Addr) -> ScoreResponse:
    score = ContractStore(deps.storage).get_score(address)
    return ScoreResponse(score=score if score is not None else 0)


def query_owner(deps: Deps) -> OwnerResponse:
    state = ContractStore(deps.storage).require_state()
    return OwnerResponse(owner=state.owner)


__all__ = [
    "CONTRACT_NAME",
    "CONTRACT_VERSION",
    "instantiate",
    "execute",
    "try_set_score",
    "query",
    "query_score",
    "query_owner",
]

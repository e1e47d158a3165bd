"""
passport_assessment.runtime.engine — invocation harness for the contract.

Every entrypoint runs as one serialized, all-or-nothing invocation:

    1) decode the message (model instance, mapping, or JSON str/bytes)
    2) open a Journal over the backend and hand the handler a Deps handle
    3) run the handler
    4) commit staged writes on success (execute/instantiate), revert otherwise
    5) return an Outcome; ContractError never escapes an entrypoint

Queries always revert, so they cannot persist anything even by accident.

Usage
-----
    engine = Engine()                      # in-memory backend
    env, info = mock_env(), mock_info("owner")
    engine.instantiate(env, info, {"owner": "owner"}).unwrap()
    engine.execute(env, info, {"set_score": {"address": "a", "new_score": 5}})
    engine.query(env, {"get_score": {"address": "a"}}).unwrap()  # b'{"score":5}'
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from passport_assessment import logging as plog
from passport_assessment.contract import contract as _contract
from passport_assessment.contract.msg import (
    ExecuteMsg,
    GetOwner,
    GetScore,
    InstantiateMsg,
    QueryMsg,
    SetScore,
)
from passport_assessment.contract.state import ContractStore, ContractVersion
from passport_assessment.errors import ContractError, InvalidMessage

from .context import Deps, Env, MessageInfo
from .journal import Journal
from .outcome import Outcome, Response
from .storage_api import Storage, StorageBackend, open_backend

log = logging.getLogger(__name__)

T = TypeVar("T")
RawMsg = Union[BaseModel, Dict[str, Any], str, bytes, bytearray]


# ------------------------------- decoding --------------------------------- #


def _validation_context(kind: str, e: ValidationError) -> Dict[str, Any]:
    errors: List[Dict[str, Any]] = [
        {"loc": ".".join(str(p) for p in err.get("loc", ())), "msg": err.get("msg", "")}
        for err in e.errors()
    ]
    return {"kind": kind, "errors": errors}


def _validate(kind: str, model: Type[BaseModel], raw: Any) -> Any:
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return model.model_validate_json(raw)
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidMessage(
            f"invalid {kind} message: {e.error_count()} validation error(s)",
            context=_validation_context(kind, e),
        ) from e


def decode_instantiate(raw: RawMsg) -> InstantiateMsg:
    if isinstance(raw, InstantiateMsg):
        return raw
    return _validate("instantiate", InstantiateMsg, raw)


def decode_execute(raw: RawMsg) -> SetScore:
    if isinstance(raw, SetScore):
        return raw
    if isinstance(raw, ExecuteMsg):
        return raw.variant
    return _validate("execute", ExecuteMsg, raw).variant


def decode_query(raw: RawMsg) -> Union[GetOwner, GetScore]:
    if isinstance(raw, (GetOwner, GetScore)):
        return raw
    if isinstance(raw, QueryMsg):
        return raw.variant
    return _validate("query", QueryMsg, raw).variant


# ------------------------------- Engine ----------------------------------- #


class Engine:
    """Runs contract entrypoints against one backend, one invocation at a time."""

    def __init__(self, backend: Optional[StorageBackend] = None) -> None:
        self.backend: StorageBackend = backend if backend is not None else open_backend()
        self._lock = threading.RLock()

    # ---------- entrypoints ---------- #

    def instantiate(self, env: Env, info: MessageInfo, msg: RawMsg) -> Outcome[Response]:
        def run(deps: Deps) -> Response:
            return _contract.instantiate(deps, env, info, decode_instantiate(msg))

        return self._invoke("instantiate", run, env=env, sender=info.sender, persist=True)

    def execute(self, env: Env, info: MessageInfo, msg: RawMsg) -> Outcome[Response]:
        def run(deps: Deps) -> Response:
            return _contract.execute(deps, env, info, decode_execute(msg))

        return self._invoke("execute", run, env=env, sender=info.sender, persist=True)

    def query(self, env: Env, msg: RawMsg) -> Outcome[bytes]:
        def run(deps: Deps) -> bytes:
            return _contract.query(deps, env, decode_query(msg))

        return self._invoke("query", run, env=env, sender=None, persist=False)

    def contract_version(self) -> Outcome[Optional[ContractVersion]]:
        """Read the version record written at instantiation (None before it)."""

        def run(deps: Deps) -> Optional[ContractVersion]:
            return ContractStore(deps.storage).get_contract_version()

        return self._invoke("contract_version", run, env=None, sender=None, persist=False)

    # ---------- lifecycle ---------- #

    def close(self) -> None:
        self.backend.close()

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------- internals ---------- #

    def _invoke(
        self,
        op: str,
        run: Callable[[Deps], T],
        *,
        env: Optional[Env],
        sender: Optional[str],
        persist: bool,
    ) -> Outcome[T]:
        with self._lock, plog.trace_scope():
            plog.bind(op=op, sender=sender, height=env.block.height if env is not None else None)
            journal = Journal(self.backend)
            deps = Deps(storage=Storage(journal))
            try:
                value = run(deps)
                written = journal.commit() if persist else 0
            except ContractError as err:
                journal.revert()
                _log_failure(err)
                return Outcome.failure(err)
            finally:
                if journal.is_open:
                    journal.revert()
            log.debug("invocation ok", extra={"keys_written": written})
            return Outcome.success(value)


def _log_failure(err: ContractError) -> None:
    level = logging.WARNING if err.fatal else logging.INFO
    log.log(level, "invocation failed: %s", err.message, extra={"code": err.code})


__all__ = [
    "Engine",
    "decode_instantiate",
    "decode_execute",
    "decode_query",
]

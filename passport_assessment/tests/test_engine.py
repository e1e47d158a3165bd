from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Tuple

import pytest

from passport_assessment.contract.msg import ExecuteMsg, GetScore, QueryMsg, SetScore
from passport_assessment.errors import InvalidMessage, StoreFailure, Unauthorized, Uninitialized
from passport_assessment.runtime.engine import Engine, decode_execute, decode_query
from passport_assessment.runtime.storage_api import MemoryBackend
from passport_assessment.testing import mock_info


class FlakyBackend(MemoryBackend):
    """Memory backend whose reads or batch writes can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key: bytes) -> Optional[bytes]:
        if self.fail_reads:
            raise OSError("disk unreadable")
        return super().get(key)

    def write_batch(self, items: Iterable[Tuple[bytes, bytes]]) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        super().write_batch(items)


def _set(engine: Engine, env, sender: str, address: str, score: int):
    return engine.execute(env, mock_info(sender), {"set_score": {"address": address, "new_score": score}})


def _score(engine: Engine, env, address: str) -> int:
    return json.loads(engine.query(env, {"get_score": {"address": address}}).unwrap())["score"]


def test_instantiate_and_query(initialized, env):
    out = initialized.query(env, {"get_owner": {}})
    assert out.ok
    assert json.loads(out.value) == {"owner": "owner"}


def test_execute_returns_response(initialized, env):
    out = _set(initialized, env, "owner", "someone", 50)
    assert out.ok
    assert out.value.attribute("method") == "set_score"
    assert _score(initialized, env, "someone") == 50


def test_unauthorized_is_an_outcome_not_an_exception(initialized, env):
    out = _set(initialized, env, "anyone", "someone", 50)
    assert out.is_err()
    err = out.unwrap_err()
    assert isinstance(err, Unauthorized)
    assert not err.fatal
    with pytest.raises(Unauthorized):
        out.unwrap()


def test_failed_execute_persists_nothing(initialized, backend, env):
    before = dict(backend.items())
    assert _set(initialized, env, "anyone", "someone", 50).is_err()
    assert dict(backend.items()) == before


def test_execute_before_instantiate(engine, env):
    out = _set(engine, env, "owner", "someone", 1)
    assert isinstance(out.unwrap_err(), Uninitialized)
    assert out.unwrap_err().fatal


def test_get_owner_before_instantiate(engine, env):
    out = engine.query(env, {"get_owner": {}})
    assert out.unwrap_err().code == "uninitialized"


def test_json_string_and_model_messages(initialized, env):
    assert initialized.execute(env, mock_info("owner"), '{"set_score":{"address":"a","new_score":4}}').ok
    assert initialized.execute(env, mock_info("owner"), SetScore(address="b", new_score=5)).ok
    assert initialized.execute(env, mock_info("owner"), ExecuteMsg.wrap(SetScore(address="c", new_score=6))).ok
    assert _score(initialized, env, "a") == 4
    assert json.loads(initialized.query(env, b'{"get_score":{"address":"b"}}').unwrap()) == {"score": 5}
    assert json.loads(initialized.query(env, QueryMsg.wrap(GetScore(address="c"))).unwrap()) == {"score": 6}


@pytest.mark.parametrize(
    "msg",
    [
        {"set_score": {"address": "a"}},
        {"set_score": {"address": "a", "new_score": 2**31}},
        {"set_score": {"address": "a", "new_score": "5"}},
        {"set_score": {"address": "a", "new_score": 1, "extra": True}},
        {"setScore": {"address": "a", "new_score": 1}},
        "not json",
    ],
)
def test_invalid_execute_messages(initialized, env, msg):
    out = initialized.execute(env, mock_info("owner"), msg)
    err = out.unwrap_err()
    assert isinstance(err, InvalidMessage)
    assert err.context["kind"] == "execute"


def test_non_utf8_address_on_execute(initialized, backend, env):
    before = dict(backend.items())
    err = _set(initialized, env, "owner", "\ud800", 1).unwrap_err()
    assert isinstance(err, InvalidMessage)
    assert err.context["kind"] == "execute"
    assert dict(backend.items()) == before


def test_non_utf8_address_on_query(initialized, env):
    err = initialized.query(env, {"get_score": {"address": "bad\udfff"}}).unwrap_err()
    assert isinstance(err, InvalidMessage)
    assert err.context["kind"] == "query"


def test_non_utf8_owner_on_instantiate(engine, env):
    err = engine.instantiate(env, mock_info("owner"), {"owner": "\ud800"}).unwrap_err()
    assert isinstance(err, InvalidMessage)
    assert engine.contract_version().unwrap() is None


def test_invalid_query_message(engine, env):
    err = engine.query(env, {"get_everything": {}}).unwrap_err()
    assert isinstance(err, InvalidMessage)
    assert err.to_dict()["code"] == "invalid_message"


def test_decoders():
    assert decode_execute({"set_score": {"address": "x", "new_score": -1}}) == SetScore(address="x", new_score=-1)
    assert decode_query({"get_score": {"address": "x"}}) == GetScore(address="x")
    with pytest.raises(InvalidMessage):
        decode_query({"get_owner": {}, "get_score": {"address": "x"}})


def test_reinstantiate_overwrites_owner(initialized, env):
    assert initialized.instantiate(env, mock_info("other"), {"owner": "other"}).ok
    assert json.loads(initialized.query(env, {"get_owner": {}}).unwrap()) == {"owner": "other"}
    assert _set(initialized, env, "owner", "a", 1).is_err()
    assert _set(initialized, env, "other", "a", 1).ok


def test_contract_version(engine, env):
    assert engine.contract_version().unwrap() is None
    engine.instantiate(env, mock_info("owner"), {"owner": "owner"}).unwrap()
    version = engine.contract_version().unwrap()
    assert version.contract == "crates.io:passport_assessment"


def test_write_failure_becomes_store_failure(env):
    backend = FlakyBackend()
    engine = Engine(backend)
    engine.instantiate(env, mock_info("owner"), {"owner": "owner"}).unwrap()

    backend.fail_writes = True
    err = _set(engine, env, "owner", "someone", 9).unwrap_err()
    assert isinstance(err, StoreFailure)
    assert err.context["op"] == "commit"
    assert isinstance(err.__cause__, OSError)

    backend.fail_writes = False
    assert _score(engine, env, "someone") == 0


def test_read_failure_becomes_store_failure(env):
    backend = FlakyBackend()
    engine = Engine(backend)
    backend.fail_reads = True
    err = engine.query(env, {"get_score": {"address": "a"}}).unwrap_err()
    assert isinstance(err, StoreFailure)
    assert err.context["op"] == "get"


def test_corrupt_state_is_store_failure(initialized, backend, env):
    backend.set(b"state", b"\xff\xff")
    err = initialized.query(env, {"get_owner": {}}).unwrap_err()
    assert isinstance(err, StoreFailure)
    assert err.context["op"] == "decode"


def test_failures_are_logged(initialized, env, caplog):
    with caplog.at_level(logging.INFO, logger="passport_assessment.runtime.engine"):
        _set(initialized, env, "anyone", "someone", 1)
    rec = next(r for r in caplog.records if r.getMessage().startswith("invocation failed"))
    assert rec.levelno == logging.INFO
    assert rec.code == "unauthorized"


def test_engine_context_manager_closes_backend(env):
    closed = []

    class Closing(MemoryBackend):
        def close(self) -> None:
            closed.append(True)

    with Engine(Closing()) as engine:
        engine.instantiate(env, mock_info("owner"), {"owner": "owner"}).unwrap()
    assert closed == [True]

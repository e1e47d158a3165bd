"""
Property tests for the score registry.

- unset scores read as zero
- only the owner can change scores; a rejected call changes nothing
- the last successful write wins
- writing one address never changes another
"""

from __future__ import annotations

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from passport_assessment.runtime.engine import Engine
from passport_assessment.runtime.storage_api import MemoryBackend
from passport_assessment.runtime.state_adapter import INT32_MAX, INT32_MIN
from passport_assessment.testing import mock_env, mock_info

addresses = st.one_of(st.text(max_size=40), st.text(min_size=250, max_size=600))
scores = st.integers(min_value=INT32_MIN, max_value=INT32_MAX)

ENV = mock_env()


def _fresh(owner: str = "owner") -> Engine:
    engine = Engine(MemoryBackend())
    engine.instantiate(ENV, mock_info(owner), {"owner": owner}).unwrap()
    return engine


def _score(engine: Engine, address: str) -> int:
    return json.loads(engine.query(ENV, {"get_score": {"address": address}}).unwrap())["score"]


def _set(engine: Engine, sender: str, address: str, score: int):
    return engine.execute(ENV, mock_info(sender), {"set_score": {"address": address, "new_score": score}})


@settings(max_examples=100, deadline=None)
@given(address=addresses)
def test_default_zero(address: str) -> None:
    assert _score(_fresh(), address) == 0


@settings(max_examples=100, deadline=None)
@given(owner=addresses, sender=addresses, address=addresses, score=scores)
def test_authorization_gate(owner: str, sender: str, address: str, score: int) -> None:
    engine = _fresh(owner)
    backend = engine.backend
    before = list(backend.items())

    out = _set(engine, sender, address, score)

    if sender == owner:
        assert out.ok
        assert _score(engine, address) == score
    else:
        assert out.unwrap_err().code == "unauthorized"
        assert list(backend.items()) == before


@settings(max_examples=100, deadline=None)
@given(address=addresses, writes=st.lists(scores, min_size=1, max_size=8))
def test_last_write_wins(address: str, writes) -> None:
    engine = _fresh()
    for value in writes:
        _set(engine, "owner", address, value).unwrap()
    assert _score(engine, address) == writes[-1]


@settings(max_examples=100, deadline=None)
@given(a=addresses, b=addresses, first=scores, second=scores)
def test_non_interference(a: str, b: str, first: int, second: int) -> None:
    if a == b:
        return
    engine = _fresh()
    _set(engine, "owner", a, first).unwrap()
    _set(engine, "owner", b, second).unwrap()
    assert _score(engine, a) == first
    assert _score(engine, b) == second

from __future__ import annotations

import io
import json
import logging

from passport_assessment import logging as plog
from passport_assessment.runtime.engine import Engine
from passport_assessment.runtime.storage_api import MemoryBackend
from passport_assessment.testing import mock_env, mock_info


def _record(msg: str, **extra) -> logging.LogRecord:
    rec = logging.LogRecord("passport_assessment.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_trace_scope_binds_and_restores():
    plog.clear_context()
    plog.bind(op="outer")
    with plog.trace_scope("abc") as tid:
        assert tid == "abc"
        plog.bind(sender="owner")
        assert plog.context() == {"op": "outer", "trace_id": "abc", "sender": "owner"}
    assert plog.context() == {"op": "outer"}
    plog.unbind("op")
    assert plog.context() == {}


def test_json_formatter_includes_context_and_extras():
    plog.clear_context()
    with plog.trace_scope("t1"):
        plog.bind(op="execute")
        line = plog.JSONFormatter().format(_record("hello", key=b"\x01\x02"))
    data = json.loads(line)
    assert data["msg"] == "hello"
    assert data["level"] == "INFO"
    assert data["trace_id"] == "t1"
    assert data["op"] == "execute"
    assert data["key"] == "0102"


def test_text_formatter_one_line():
    plog.clear_context()
    with plog.trace_scope("t2"):
        plog.bind(op="query", height=7)
        line = plog.TextFormatter().format(_record("done", code="unauthorized"))
    assert "| INFO  |" in line
    assert "trace_id=t2 op=query height=7" in line
    assert "code=unauthorized" in line
    assert line.endswith("| done")


def test_configure_json_stream():
    buf = io.StringIO()
    plog.configure(json=True, level="INFO", stream=buf)
    engine = Engine(MemoryBackend())
    env = mock_env()
    engine.instantiate(env, mock_info("owner"), {"owner": "owner"}).unwrap()
    engine.execute(env, mock_info("anyone"), {"set_score": {"address": "a", "new_score": 1}})

    lines = [json.loads(line) for line in buf.getvalue().splitlines()]
    failed = [d for d in lines if d["msg"].startswith("invocation failed")]
    assert len(failed) == 1
    assert failed[0]["op"] == "execute"
    assert failed[0]["sender"] == "anyone"
    assert failed[0]["code"] == "unauthorized"
    assert "trace_id" in failed[0]


def test_configure_respects_level():
    buf = io.StringIO()
    plog.configure(json=False, level="WARNING", stream=buf)
    plog.get_logger("passport_assessment.x").info("quiet")
    plog.get_logger("passport_assessment.x").warning("loud")
    out = buf.getvalue()
    assert "quiet" not in out
    assert "loud" in out

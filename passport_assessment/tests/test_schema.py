from __future__ import annotations

import json

from passport_assessment.schema import SCHEMA_MODELS, export_schemas, schema_for
from passport_assessment.contract.msg import ExecuteMsg, InstantiateMsg, QueryMsg

EXPECTED = {
    "instantiate_msg.json",
    "execute_msg.json",
    "query_msg.json",
    "state.json",
    "owner_response.json",
    "score_response.json",
}


def test_export_writes_one_file_per_shape(tmp_path):
    (tmp_path / "stale.json").write_text("{}")
    paths = export_schemas(tmp_path)
    assert {p.name for p in paths} == EXPECTED
    assert {p.name for p in tmp_path.glob("*.json")} == EXPECTED
    assert len(paths) == len(SCHEMA_MODELS)


def test_schemas_are_draft07_json(tmp_path):
    for path in export_schemas(tmp_path):
        doc = json.loads(path.read_text())
        assert doc["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert "title" in doc


def test_instantiate_schema_requires_owner():
    doc = schema_for(InstantiateMsg)
    assert doc["required"] == ["owner"]
    assert doc["additionalProperties"] is False


def test_execute_schema_is_externally_tagged():
    doc = schema_for(ExecuteMsg)
    assert doc["title"] == "ExecuteMsg"
    text = json.dumps(doc)
    assert '"set_score"' in text
    assert '"new_score"' in text


def test_query_schema_lists_both_variants():
    text = json.dumps(schema_for(QueryMsg))
    assert '"get_owner"' in text
    assert '"get_score"' in text

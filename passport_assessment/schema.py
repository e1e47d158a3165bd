"""
passport_assessment.schema — JSON Schema export for the contract's messages.

Writes one ``<name>.json`` file per shape into an output directory (default
``./schema``), clearing stale ``*.json`` files first:

    instantiate_msg.json  execute_msg.json  query_msg.json
    state.json            owner_response.json  score_response.json
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from pydantic import BaseModel

from passport_assessment.contract.msg import (
    ExecuteMsg,
    InstantiateMsg,
    OwnerResponse,
    QueryMsg,
    ScoreResponse,
)
from passport_assessment.contract.state import State

log = logging.getLogger(__name__)

SCHEMA_MODELS: List[Type[BaseModel]] = [
    InstantiateMsg,
    ExecuteMsg,
    QueryMsg,
    State,
    OwnerResponse,
    ScoreResponse,
]


def _file_stem(model: Type[BaseModel]) -> str:
    title = str(model.model_config.get("title") or model.__name__)
    return re.sub(r"(?<!^)(?=[A-Z])", "_", title).lower()


def schema_for(model: Type[BaseModel]) -> Dict[str, object]:
    doc = model.model_json_schema()
    doc.setdefault("title", model.model_config.get("title") or model.__name__)
    return {"$schema": "http://json-schema.org/draft-07/schema#", **doc}


def remove_schemas(out_dir: Path) -> int:
    removed = 0
    for p in sorted(out_dir.glob("*.json")):
        p.unlink()
        removed += 1
    return removed


def export_schemas(out_dir: Optional[Union[str, Path]] = None) -> List[Path]:
    """Write all schemas to `out_dir`; returns the written paths."""
    target = Path(out_dir) if out_dir is not None else Path.cwd() / "schema"
    target.mkdir(parents=True, exist_ok=True)
    remove_schemas(target)

    written: List[Path] = []
    for model in SCHEMA_MODELS:
        path = target / f"{_file_stem(model)}.json"
        path.write_text(json.dumps(schema_for(model), indent=2, sort_keys=True) + "\n", encoding="utf-8")
        written.append(path)
        log.info("exported schema", extra={"path": str(path)})
    return written


__all__ = ["SCHEMA_MODELS", "schema_for", "remove_schemas", "export_schemas"]

"""Shared plumbing for the versioned artifact modules.

Canonical JSON (sort_keys=True, indent=2) makes identical artifacts
byte-identical, so a re-run over the same revision stores the same payload.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

JsonSource = Union[str, bytes, dict, Path]
M = TypeVar("M", bound=BaseModel)


def read_json_source(source: JsonSource) -> dict:
    """JSON text, bytes, an already-parsed dict, or a file Path."""
    if isinstance(source, Path):
        return json.loads(source.read_text(encoding="utf-8"))
    if isinstance(source, (str, bytes)):
        return json.loads(source)
    return source


def load_model(model_cls: Type[M], source: JsonSource) -> M:
    return model_cls.model_validate(read_json_source(source))


def canonical_json(model: BaseModel, *, indent: int = 2) -> str:
    raw = json.loads(model.model_dump_json())
    return json.dumps(raw, sort_keys=True, indent=indent, ensure_ascii=False)


def model_errors(model_cls: Type[BaseModel], data: dict) -> List[str]:
    """Human-readable validation errors; an empty list means valid."""
    try:
        model_cls.model_validate(data)
    except ValidationError as exc:
        return [f"{e['loc']}: {e['msg']}" for e in exc.errors()]
    return []

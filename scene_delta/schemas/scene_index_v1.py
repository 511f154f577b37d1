"""SceneIndex artifact v1.0.0: load, dump, validate."""
from __future__ import annotations

from typing import List

from scene_delta.analysis.models import SceneIndex
from scene_delta.schemas._canonical import JsonSource, canonical_json, load_model, model_errors


def load_scene_index(source: JsonSource) -> SceneIndex:
    """Parse a SceneIndex.

    Raises:
        ValidationError: bad shape, unknown schema_version, or an empty scene span.
        FileNotFoundError: Path does not exist.
    """
    return load_model(SceneIndex, source)


def dump_scene_index(index: SceneIndex, *, indent: int = 2) -> str:
    return canonical_json(index, indent=indent)


def validate_scene_index(data: dict) -> List[str]:
    return model_errors(SceneIndex, data)

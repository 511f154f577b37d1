import json

import jsonschema

from .analysis.models import ChangeReport, SceneIndex
from .schema_loader import load_schema
from .schemas.change_report_v1 import dump_change_report
from .schemas.scene_index_v1 import dump_scene_index


def validate_scene_index(data: dict) -> None:
    """Validate a SceneIndex dict against the canonical SceneIndex.v1.json contract.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("SceneIndex.v1.json"))


def validate_change_report(data: dict) -> None:
    """Validate a ChangeReport dict against the canonical ChangeReport.v1.json contract.

    Raises jsonschema.ValidationError if non-conformant.
    """
    jsonschema.validate(data, load_schema("ChangeReport.v1.json"))


def validate_scene_index_model(index: SceneIndex) -> None:
    """Validate a SceneIndex model in its serialized (canonical JSON) form."""
    validate_scene_index(json.loads(dump_scene_index(index)))


def validate_change_report_model(report: ChangeReport) -> None:
    """Validate a ChangeReport model in its serialized (canonical JSON) form."""
    validate_change_report(json.loads(dump_change_report(report)))

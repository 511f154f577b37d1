"""ChangeReport artifact v1.0.0: load, dump, validate."""
from __future__ import annotations

from typing import List

from scene_delta.analysis.models import ChangeReport
from scene_delta.schemas._canonical import JsonSource, canonical_json, load_model, model_errors


def load_change_report(source: JsonSource) -> ChangeReport:
    """Parse a ChangeReport.  Raises pydantic ValidationError on bad data."""
    return load_model(ChangeReport, source)


def dump_change_report(report: ChangeReport, *, indent: int = 2) -> str:
    """Canonical JSON; the stored payload of a change_report__ version."""
    return canonical_json(report, indent=indent)


def validate_change_report(data: dict) -> List[str]:
    """Errors as strings, empty when valid.  Does not raise."""
    return model_errors(ChangeReport, data)

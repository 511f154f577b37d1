"""Versioned artifact loaders and validators."""

from scene_delta.schemas.change_report_v1 import (
    dump_change_report,
    load_change_report,
    validate_change_report,
)
from scene_delta.schemas.scene_index_v1 import (
    dump_scene_index,
    load_scene_index,
    validate_scene_index,
)

__all__ = [
    "load_scene_index",
    "dump_scene_index",
    "validate_scene_index",
    "load_change_report",
    "dump_change_report",
    "validate_change_report",
]

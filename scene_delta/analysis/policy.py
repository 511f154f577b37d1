"""Analysis word lists loaded from third_party/contracts/compat/analysis_terms.json.

The lists are data, not code: escalation terms, screenplay transition words
and time-of-day suffixes can be extended without touching the pipeline.
"""
from __future__ import annotations

import json
import pathlib as _pathlib
from typing import Tuple

_POLICY_FILE = (
    _pathlib.Path(__file__).resolve().parents[2]
    / "third_party" / "contracts" / "compat" / "analysis_terms.json"
)

_LIST_KEYS = ("escalation_terms", "transition_words", "time_of_day")


def load_analysis_terms(path: _pathlib.Path = _POLICY_FILE) -> dict[str, Tuple[str, ...]]:
    """Load and normalise the policy word lists.

    Lists are de-duplicated and sorted so that scan order (and therefore flag
    detail text) is deterministic.

    Raises:
        ValueError: the file is missing or not a JSON object of string lists.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ValueError(f"ERROR: policy file missing: {path}") from e

    if not isinstance(data, dict):
        raise ValueError(f"ERROR: invalid policy format: {path}")

    terms: dict[str, Tuple[str, ...]] = {}
    for key in _LIST_KEYS:
        raw = data.get(key, [])
        if not isinstance(raw, list):
            raise ValueError(f"ERROR: invalid policy format: {path} ({key})")
        terms[key] = tuple(sorted({t for t in raw if isinstance(t, str) and t.strip()}))
    return terms


_TERMS = load_analysis_terms()

ESCALATION_TERMS: Tuple[str, ...] = tuple(t.lower() for t in _TERMS["escalation_terms"])
TRANSITION_WORDS: frozenset = frozenset(t.upper() for t in _TERMS["transition_words"])
TIME_OF_DAY: Tuple[str, ...] = tuple(t.upper() for t in _TERMS["time_of_day"])

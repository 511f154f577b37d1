"""Canonical JSON-Schema contracts for the derived artifacts.

Schemas live in third_party/contracts/schemas/ and are read once per process;
every orchestrated save validates two artifacts against them.
"""
from functools import lru_cache
from pathlib import Path
import json

import jsonschema

SCHEMAS_DIR = Path(__file__).resolve().parents[1] / "third_party" / "contracts" / "schemas"


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict:
    """Read *name* from SCHEMAS_DIR and check it is itself a valid 2020-12 schema.

    Raises:
        FileNotFoundError: no such contract file.
        jsonschema.SchemaError: the contract file is not a valid schema.
    """
    schema_path = SCHEMAS_DIR / name
    if not schema_path.exists():
        raise FileNotFoundError(f"Missing canonical schema: {schema_path}")
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)
    return schema

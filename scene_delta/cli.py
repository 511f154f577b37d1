"""scene-delta CLI entry point."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional


def _split_types(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="scene-delta",
        description="scene-delta: deterministic screenplay change analysis",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    scenes_parser = sub.add_parser("scenes", help="Print the Scene Index JSON of a script")
    scenes_parser.add_argument("--script", required=True, metavar="script.txt",
                               help="Path to a plain-text screenplay")
    scenes_parser.add_argument("--source-doc-id", default="local")
    scenes_parser.add_argument("--version-id", default="local")

    diff_parser = sub.add_parser("diff", help="Print the Change Report JSON between two revisions")
    diff_parser.add_argument("--old", required=True, metavar="old.txt")
    diff_parser.add_argument("--new", required=True, metavar="new.txt")
    diff_parser.add_argument("--source-doc-id", default="local")
    diff_parser.add_argument("--doc-type", default="feature_script")
    diff_parser.add_argument("--from-version", default="old")
    diff_parser.add_argument("--to-version", default="new")
    diff_parser.add_argument("--existing-doc-types", metavar="a,b,c",
                             help="Comma-separated downstream doc types present in the project")

    derive_parser = sub.add_parser(
        "derive",
        help="Derive Scene Index + Change Report versions into an on-disk document store",
    )
    derive_parser.add_argument("--store", required=True, metavar="DIR",
                               help="Base directory of the document store")
    derive_parser.add_argument("--project", required=True)
    derive_parser.add_argument("--source-doc", required=True)
    derive_parser.add_argument("--doc-type", required=True)
    derive_parser.add_argument("--version", required=True)
    derive_parser.add_argument("--script", required=True, metavar="script.txt")
    derive_parser.add_argument("--previous", metavar="previous.txt")
    derive_parser.add_argument("--previous-version")
    derive_parser.add_argument("--actor", default="cli")
    derive_parser.add_argument("--existing-doc-types", metavar="a,b,c",
                               help="Defaults to the doc types already in the store")

    validate_parser = sub.add_parser(
        "validate-artifact",
        help="Validate a Scene Index or Change Report JSON file against its contract",
    )
    validate_parser.add_argument("--kind", required=True, choices=("scene-index", "change-report"))
    validate_parser.add_argument("--file", required=True, metavar="artifact.json")

    args = parser.parse_args()

    from scene_delta.logging_config import setup_logging
    setup_logging()

    if args.command == "scenes":
        try:
            print(scenes_json(Path(args.script), args.source_doc_id, args.version_id))
        except OSError as exc:
            print(f"ERROR: {exc}")
            sys.exit(1)
    elif args.command == "diff":
        try:
            print(diff_json(
                Path(args.old), Path(args.new),
                source_doc_id=args.source_doc_id,
                doc_type=args.doc_type,
                from_version=args.from_version,
                to_version=args.to_version,
                existing_doc_types=_split_types(args.existing_doc_types),
            ))
        except OSError as exc:
            print(f"ERROR: {exc}")
            sys.exit(1)
    elif args.command == "derive":
        sys.exit(derive(args))
    elif args.command == "validate-artifact":
        import jsonschema
        try:
            validate_artifact_file(args.kind, Path(args.file))
        except jsonschema.ValidationError as exc:
            print(f"ERROR: invalid {args.kind}: {exc.message}")
            sys.exit(1)
        except Exception as exc:
            print(f"ERROR: {exc}")
            sys.exit(1)
        print(f"OK: {args.kind} is valid")
        sys.exit(0)
    else:
        parser.print_help()
        sys.exit(1)


def scenes_json(script_path: Path, source_doc_id: str, version_id: str) -> str:
    from scene_delta.analysis.models import ScriptRevision
    from scene_delta.orchestrator import analyze_revision
    from scene_delta.schemas.scene_index_v1 import dump_scene_index

    revision = ScriptRevision(
        source_doc_id=source_doc_id,
        version_id=version_id,
        text=script_path.read_text(encoding="utf-8"),
    )
    scene_index, _ = analyze_revision(revision, "feature_script")
    return dump_scene_index(scene_index)


def diff_json(
    old_path: Path,
    new_path: Path,
    *,
    source_doc_id: str,
    doc_type: str,
    from_version: str,
    to_version: str,
    existing_doc_types: List[str],
) -> str:
    from scene_delta.analysis.models import ScriptRevision
    from scene_delta.orchestrator import analyze_revision
    from scene_delta.schemas.change_report_v1 import dump_change_report

    revision = ScriptRevision(
        source_doc_id=source_doc_id,
        version_id=to_version,
        text=new_path.read_text(encoding="utf-8"),
        previous_version_id=from_version,
        previous_text=old_path.read_text(encoding="utf-8"),
    )
    _, report = analyze_revision(revision, doc_type, existing_doc_types)
    return dump_change_report(report)


def derive(args: argparse.Namespace) -> int:
    """Run the orchestrator against a FileDocumentStore; returns the exit code."""
    from docstore.file_store import FileDocumentStore
    from scene_delta.analysis.models import ScriptSaveEvent
    from scene_delta.orchestrator import SCRIPT_DOC_TYPES, derive_script_documents

    if args.doc_type not in SCRIPT_DOC_TYPES:
        print(f"SKIP: {args.doc_type} is not a script document type")
        return 0

    try:
        new_text = Path(args.script).read_text(encoding="utf-8")
        previous_text = (
            Path(args.previous).read_text(encoding="utf-8") if args.previous else None
        )
    except OSError as exc:
        print(f"ERROR: {exc}")
        return 1

    if not new_text.strip():
        print("SKIP: script is empty")
        return 0

    store = FileDocumentStore(args.store)
    if args.existing_doc_types is None:
        existing = store.list_existing_doc_types(args.project)
    else:
        existing = _split_types(args.existing_doc_types)

    event = ScriptSaveEvent(
        project_id=args.project,
        source_doc_id=args.source_doc,
        source_doc_type=args.doc_type,
        new_version_id=args.version,
        new_plaintext=new_text,
        previous_plaintext=previous_text,
        previous_version_id=args.previous_version if previous_text is not None else None,
        actor_id=args.actor,
        existing_doc_types=existing,
    )
    result = derive_script_documents(event, store)
    if result is None:
        print("ERROR: derivation failed")
        return 1
    print(
        f"OK: {result.scene_index_doc_type} {result.scene_index_version_id}, "
        f"{result.change_report_doc_type} {result.change_report_version_id}"
    )
    return 0


def validate_artifact_file(kind: str, artifact_path: Path) -> None:
    """Load an artifact JSON file and validate it against its canonical contract.

    Raises ``jsonschema.ValidationError`` if the file does not conform.
    """
    from scene_delta.contract_validate import validate_change_report, validate_scene_index

    data = json.loads(artifact_path.read_text(encoding="utf-8"))
    if kind == "scene-index":
        validate_scene_index(data)
    else:
        validate_change_report(data)


if __name__ == "__main__":
    main()

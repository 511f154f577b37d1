"""CLI tests: scenes, diff, derive and validate-artifact subcommands."""
from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

from scene_delta.contract_validate import validate_change_report, validate_scene_index
from scene_delta.tests.script_fixtures import NEW_ATTIC, OLD_TWO_SCENES

_REPO_ROOT = Path(__file__).resolve().parents[2]


def _run(*args: str):
    return subprocess.run(
        [sys.executable, "-m", "scene_delta.cli", *args],
        capture_output=True, text=True, cwd=_REPO_ROOT,
    )


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# scenes / diff
# ---------------------------------------------------------------------------

class TestScenesCommand:

    def test_prints_valid_scene_index(self, tmp_path: Path):
        script = _write(tmp_path / "s.txt", OLD_TWO_SCENES)
        result = _run("scenes", "--script", str(script), "--source-doc-id", "doc1")
        assert result.returncode == 0, result.stderr
        data = json.loads(result.stdout)
        validate_scene_index(data)
        assert [s["ordinal"] for s in data["scenes"]] == [1, 2]

    def test_missing_file(self, tmp_path: Path):
        result = _run("scenes", "--script", str(tmp_path / "nope.txt"))
        assert result.returncode == 1
        assert result.stdout.startswith("ERROR:")


class TestDiffCommand:

    def test_prints_valid_change_report(self, tmp_path: Path):
        old = _write(tmp_path / "old.txt", OLD_TWO_SCENES)
        new = _write(tmp_path / "new.txt", NEW_ATTIC)
        result = _run(
            "diff", "--old", str(old), "--new", str(new),
            "--existing-doc-types", "character_bible,deck",
        )
        assert result.returncode == 0, result.stderr
        data = json.loads(result.stdout)
        validate_change_report(data)
        assert data["removed_characters"] == ["MARY"]
        assert data["from_version_id"] == "old"

    def test_output_is_deterministic(self, tmp_path: Path):
        old = _write(tmp_path / "old.txt", OLD_TWO_SCENES)
        new = _write(tmp_path / "new.txt", NEW_ATTIC)
        first = _run("diff", "--old", str(old), "--new", str(new))
        second = _run("diff", "--old", str(old), "--new", str(new))
        assert first.stdout == second.stdout


# ---------------------------------------------------------------------------
# derive
# ---------------------------------------------------------------------------

class TestDeriveCommand:

    def _derive(self, tmp_path: Path, *extra: str):
        script = _write(tmp_path / "new.txt", NEW_ATTIC)
        return _run(
            "derive", "--store", str(tmp_path / "store"), "--project", "proj1",
            "--source-doc", "doc1", "--version", "v2", "--script", str(script), *extra,
        )

    def test_derives_into_file_store(self, tmp_path: Path):
        previous = _write(tmp_path / "old.txt", OLD_TWO_SCENES)
        result = self._derive(
            tmp_path, "--doc-type", "feature_script",
            "--previous", str(previous), "--previous-version", "v1",
        )
        assert result.returncode == 0, result.stdout + result.stderr
        assert result.stdout.startswith("OK:")
        index = json.loads((tmp_path / "store" / "projects" / "proj1" / "index.json").read_text())
        assert sorted(index) == ["change_report__doc1", "scene_graph__doc1"]

    def test_second_run_appends_version(self, tmp_path: Path):
        self._derive(tmp_path, "--doc-type", "feature_script")
        self._derive(tmp_path, "--doc-type", "feature_script")
        index = json.loads((tmp_path / "store" / "projects" / "proj1" / "index.json").read_text())
        versions = tmp_path / "store" / "documents" / index["scene_graph__doc1"] / "versions"
        assert sorted(p.name for p in versions.iterdir()) == ["0001.json", "0002.json"]

    def test_non_script_type_is_skipped(self, tmp_path: Path):
        result = self._derive(tmp_path, "--doc-type", "deck")
        assert result.returncode == 0
        assert result.stdout.startswith("SKIP:")
        assert not (tmp_path / "store").exists()


# ---------------------------------------------------------------------------
# validate-artifact
# ---------------------------------------------------------------------------

class TestValidateArtifactCommand:

    def test_valid_change_report(self, tmp_path: Path):
        old = _write(tmp_path / "old.txt", OLD_TWO_SCENES)
        new = _write(tmp_path / "new.txt", NEW_ATTIC)
        report = _write(tmp_path / "report.json", _run("diff", "--old", str(old), "--new", str(new)).stdout)
        result = _run("validate-artifact", "--kind", "change-report", "--file", str(report))
        assert result.returncode == 0
        assert "OK: change-report is valid" in result.stdout

    def test_invalid_scene_index(self, tmp_path: Path):
        bad = _write(tmp_path / "bad.json", json.dumps({"scenes": []}))
        result = _run("validate-artifact", "--kind", "scene-index", "--file", str(bad))
        assert result.returncode == 1
        assert "ERROR: invalid scene-index" in result.stdout

    def test_missing_file(self, tmp_path: Path):
        result = _run("validate-artifact", "--kind", "scene-index", "--file", str(tmp_path / "x.json"))
        assert result.returncode == 1
        assert result.stdout.startswith("ERROR:")


class TestNoCommand:

    def test_prints_help_and_fails(self):
        result = _run()
        assert result.returncode == 1
        assert "scene-delta" in result.stdout

# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the define editor CLI."""

import io
import json
import re
from pathlib import Path

import pytest

from cli.define_editor import run
from sdefs.build_target import BuildTargetGroup
from sdefs.database import SQLitePreferenceStore
from sdefs.preferences import Preferences


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _run(argv: list[str]) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    exit_code = run(argv, stdout=stdout, stderr=stderr)
    return exit_code, _strip_ansi(stdout.getvalue()), stderr.getvalue()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "prefs.sqlite"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    _write_file(
        root / "Assets" / "Game.cs",
        "#define GAME_FLAG\n#if NETWORKING && !OFFLINE_MODE\n#endif\n",
    )
    _write_file(root / "WebPlayerTemplates" / "Page.cs", "#if TEMPLATE_FLAG\n")
    return root


def test_ph5_cli_001_requires_a_command() -> None:
    exit_code, _, _ = _run([])

    assert exit_code == 2


def test_ph5_cli_002_scan_fails_when_path_is_missing(
    tmp_path: Path, db_path: Path
) -> None:
    exit_code, _, stderr = _run(
        ["scan", "--path", str(tmp_path / "missing"), "--db", str(db_path)]
    )

    assert exit_code == 2
    assert "Path is not a directory" in stderr


def test_ph5_cli_003_scan_json_lists_defines_and_caches_them(
    project: Path, db_path: Path
) -> None:
    exit_code, stdout, _ = _run(
        ["scan", "--path", str(project), "--db", str(db_path), "--format", "json"]
    )

    assert exit_code == 0
    payload = json.loads(stdout)
    assert payload == {
        "defines": ["GAME_FLAG", "NETWORKING", "OFFLINE_MODE"],
        "errors": [],
    }
    preferences = Preferences(SQLitePreferenceStore(db_path=db_path))
    assert preferences.cached_defines() == ["GAME_FLAG", "NETWORKING", "OFFLINE_MODE"]


def test_ph5_cli_004_scan_table_reports_counts(project: Path, db_path: Path) -> None:
    exit_code, stdout, _ = _run(["scan", "--path", str(project), "--db", str(db_path)])

    assert exit_code == 0
    assert "Defines (3)" in stdout
    assert "NETWORKING" in stdout
    assert "files_scanned=1 symbols_found=3 errors=0" in stdout


def test_ph5_cli_005_apply_then_list_shows_enabled_state(
    project: Path, db_path: Path
) -> None:
    _run(["scan", "--path", str(project), "--db", str(db_path)])

    exit_code, stdout, _ = _run(
        [
            "apply",
            "--db",
            str(db_path),
            "--target",
            "StandaloneLinux64",
            "--enable",
            "NETWORKING",
            "--enable",
            "GAME_FLAG",
        ]
    )
    assert exit_code == 0
    assert "Changes: 2" in stdout
    assert "defines=NETWORKING;GAME_FLAG" in stdout

    exit_code, stdout, _ = _run(
        [
            "list",
            "--db",
            str(db_path),
            "--target",
            "StandaloneWindows",
            "--format",
            "json",
        ]
    )
    assert exit_code == 0
    payload = json.loads(stdout)
    assert payload["group"] == "Standalone"
    assert payload["defines"] == [
        {"name": "GAME_FLAG", "enabled": True},
        {"name": "NETWORKING", "enabled": True},
        {"name": "OFFLINE_MODE", "enabled": False},
    ]


def test_ph5_cli_006_apply_disable_removes_from_group(db_path: Path) -> None:
    preferences = Preferences(SQLitePreferenceStore(db_path=db_path))
    preferences.set_enabled_defines(BuildTargetGroup.ANDROID, ["A", "B"])

    exit_code, stdout, _ = _run(
        ["apply", "--db", str(db_path), "--target", "android", "--disable", "A"]
    )

    assert exit_code == 0
    assert "defines=B" in stdout
    assert preferences.enabled_defines(BuildTargetGroup.ANDROID) == ["B"]


def test_ph5_cli_007_apply_without_changes_writes_nothing(db_path: Path) -> None:
    exit_code, stdout, _ = _run(["apply", "--db", str(db_path)])

    assert exit_code == 0
    assert "Changes: 0" in stdout


def test_ph5_cli_008_invalid_target_is_rejected(db_path: Path) -> None:
    exit_code, _, stderr = _run(["list", "--db", str(db_path), "--target", "Dreamcast"])

    assert exit_code == 2
    assert "Invalid build target: Dreamcast" in stderr


def test_ph5_cli_009_ignore_path_add_remove_and_scan(
    project: Path, db_path: Path
) -> None:
    exit_code, stdout, _ = _run(
        ["ignore-path", "remove", "WebPlayerTemplates/", "--db", str(db_path)]
    )
    assert exit_code == 0
    assert "WebPlayerTemplates/" not in stdout

    exit_code, stdout, _ = _run(["ignore-path", "add", "Assets/", "--db", str(db_path)])
    assert exit_code == 0
    assert stdout.split() == ["Assets/"]

    _, stdout, _ = _run(
        ["scan", "--path", str(project), "--db", str(db_path), "--format", "json"]
    )
    assert json.loads(stdout)["defines"] == ["TEMPLATE_FLAG"]


def test_ph5_cli_010_target_shows_and_switches_active_target(db_path: Path) -> None:
    exit_code, stdout, _ = _run(["target", "--db", str(db_path)])
    assert exit_code == 0
    assert "target=StandaloneWindows64 group=Standalone" in stdout

    exit_code, stdout, _ = _run(["target", "iOS", "--db", str(db_path)])
    assert exit_code == 0
    assert "target=iOS group=iOS" in stdout

    _, stdout, _ = _run(["list", "--db", str(db_path), "--format", "json"])
    assert json.loads(stdout)["target"] == "iOS"


def test_ph5_cli_011_preference_failure_returns_error(tmp_path: Path) -> None:
    db_path = tmp_path / "not-a-db.sqlite"
    db_path.write_text("this is not sqlite", encoding="utf-8")

    exit_code, _, stderr = _run(["target", "--db", str(db_path)])

    assert exit_code == 2
    assert "Preference store failed" in stderr


def test_ph5_cli_012_default_database_lives_in_working_directory(
    tmp_path: Path,
) -> None:
    exit_code, _, _ = _run(["target", "PS4"])

    assert exit_code == 0
    assert (tmp_path / ".sdefs.sqlite").exists()


@pytest.mark.parametrize("marker", ["", "   "])
def test_ph5_cli_013_scan_rejects_blank_marker(
    tmp_path: Path, db_path: Path, marker: str
) -> None:
    root = tmp_path / "project"
    _write_file(root / "Foo.cs", "using UnityEngine;\npublic class Foo {}\n")
    preferences = Preferences(SQLitePreferenceStore(db_path=db_path))
    preferences.set_cached_defines(["KEPT"])

    exit_code, stdout, stderr = _run(
        [
            "scan",
            "--path",
            str(root),
            "--db",
            str(db_path),
            "--marker",
            marker,
            "--format",
            "json",
        ]
    )

    assert exit_code == 2
    assert stdout == ""
    assert "Invalid scan option" in stderr
    assert preferences.cached_defines() == ["KEPT"]


def test_ph5_cli_014_scan_accepts_extension_without_dot(
    tmp_path: Path, db_path: Path
) -> None:
    root = tmp_path / "project"
    _write_file(root / "native.c", "#if NATIVE_FLAG\n")

    exit_code, stdout, _ = _run(
        [
            "scan",
            "--path",
            str(root),
            "--db",
            str(db_path),
            "--extension",
            "c",
            "--format",
            "json",
        ]
    )

    assert exit_code == 0
    assert json.loads(stdout)["defines"] == ["NATIVE_FLAG"]


def test_ph5_cli_015_ignore_path_accepts_options_before_action(
    db_path: Path,
) -> None:
    exit_code, stdout, _ = _run(["ignore-path", "--db", str(db_path), "add", "Plugins/"])

    assert exit_code == 0
    assert stdout.split() == ["WebPlayerTemplates/", "Plugins/"]
    preferences = Preferences(SQLitePreferenceStore(db_path=db_path))
    assert preferences.ignored_paths() == ["WebPlayerTemplates/", "Plugins/"]

    exit_code, stdout, _ = _run(["ignore-path", "list", "--db", str(db_path)])
    assert exit_code == 0
    assert stdout.split() == ["WebPlayerTemplates/", "Plugins/"]

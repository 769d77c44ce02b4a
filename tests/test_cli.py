# ABOUTME: Tests for the command line interface.
# ABOUTME: Verifies listing, session paging and mutation commands via CliRunner.

import json
from pathlib import Path

from click.testing import CliRunner

from claude_projects.cli import cli


def _invoke(projects_dir: Path, config_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(
        cli,
        ["--projects-dir", str(projects_dir), "--config", str(config_path), *args],
    )


def test_cli_list_json(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "list", "--format", "json")

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload[0]["name"] == "my-app"
    assert payload[0]["session_meta"]["total"] == 2


def test_cli_list_table(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "list")

    assert result.exit_code == 0
    assert "my-app" in result.output


def test_cli_sessions_json(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(
        projects_dir, config_path, "sessions", "my-app", "--limit", "1", "--format", "json"
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["total"] == 2
    assert payload["has_more"] is True
    assert len(payload["sessions"]) == 1


def test_cli_resolve(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "resolve", "my-app")

    assert result.exit_code == 0
    assert result.output.strip() == "/home/u/app"


def test_cli_messages(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "messages", "my-app", "s2")

    assert result.exit_code == 0
    assert json.loads(result.output) == [{"sessionId": "s2", "cwd": "/home/u/app"}]


def test_cli_rename(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "rename", "my-app", "Shiny")

    assert result.exit_code == 0
    assert json.loads(config_path.read_text()) == {"my-app": {"displayName": "Shiny"}}


def test_cli_rename_unknown_project(projects_dir: Path, config_path: Path) -> None:
    result = _invoke(projects_dir, config_path, "rename", "nope", "X")

    assert result.exit_code == 1
    assert "Project not found: nope" in result.output


def test_cli_add(projects_dir: Path, config_path: Path, tmp_path: Path) -> None:
    target = tmp_path / "repo"
    target.mkdir()

    result = _invoke(projects_dir, config_path, "add", str(target), "--display-name", "Repo")

    assert result.exit_code == 0
    assert "Added Repo" in result.output


def test_cli_delete_session(projects_dir: Path, config_path: Path, scenario_project: str) -> None:
    result = _invoke(projects_dir, config_path, "delete-session", "my-app", "s2", "--yes")

    assert result.exit_code == 0
    remaining = (projects_dir / "my-app" / "b.jsonl").read_text()
    assert '"s2"' not in remaining
    assert '"s1"' in remaining


def test_cli_delete_project_with_sessions(
    projects_dir: Path, config_path: Path, scenario_project: str
) -> None:
    result = _invoke(projects_dir, config_path, "delete-project", "my-app", "--yes")

    assert result.exit_code == 1
    assert (projects_dir / "my-app").exists()

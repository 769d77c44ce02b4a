# ABOUTME: Pytest configuration and shared fixtures.
# ABOUTME: Builds project log trees under tmp_path and catalogs over them.

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from claude_projects.catalog import ProjectCatalog
from claude_projects.loaders import LocalLogStore
from claude_projects.project_config import ConfigStore

LogWriter = Callable[..., Path]


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    """Root directory holding one subdirectory per project."""
    path = tmp_path / "projects"
    path.mkdir()
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "project-config.json"


@pytest.fixture
def write_log(projects_dir: Path) -> LogWriter:
    """Write a JSONL log file for a project with a controlled mtime.

    Entries may be dicts (serialized as JSON) or raw strings written verbatim.
    """

    def _write(project: str, filename: str, entries: list, mtime: float | None = None) -> Path:
        project_dir = projects_dir / project
        project_dir.mkdir(exist_ok=True)
        path = project_dir / filename
        with path.open("w") as f:
            for entry in entries:
                f.write((entry if isinstance(entry, str) else json.dumps(entry)) + "\n")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def store(projects_dir: Path) -> LocalLogStore:
    return LocalLogStore(projects_dir)


@pytest.fixture
def config_store(config_path: Path) -> ConfigStore:
    return ConfigStore(config_path)


@pytest.fixture
def catalog(store: LocalLogStore, config_store: ConfigStore) -> ProjectCatalog:
    return ProjectCatalog(store, config_store)


@pytest.fixture
def scenario_project(write_log: LogWriter) -> str:
    """Project with a newer and an older log file sharing session s1."""
    write_log(
        "my-app",
        "a.jsonl",
        [
            {
                "sessionId": "s1",
                "cwd": "/home/u/app",
                "message": {"role": "user", "content": "Fix the bug"},
            }
        ],
        mtime=2_000_000,
    )
    write_log(
        "my-app",
        "b.jsonl",
        [
            {"sessionId": "s1", "cwd": "/home/u/app-old"},
            {"sessionId": "s2", "cwd": "/home/u/app"},
        ],
        mtime=1_000_000,
    )
    return "my-app"

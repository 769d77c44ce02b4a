from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

from .base import LogFile, LogStore

PROJECTS_DIR = Path.home() / ".claude" / "projects"
ENV_PROJECTS_DIR = "CLAUDE_CODE_PROJECTS_DIR"
LOG_SUFFIX = ".jsonl"

logger = logging.getLogger(__name__)


def resolve_projects_dir(root_dir: Path | None = None) -> Path:
    if root_dir is not None:
        return root_dir
    env_value = os.environ.get(ENV_PROJECTS_DIR)
    if env_value:
        return Path(env_value).expanduser()
    return PROJECTS_DIR


class LocalLogStore(LogStore):
    """Log store over a directory holding one subdirectory per project."""

    def __init__(self, root_dir: Path | None = None) -> None:
        self.root_dir = resolve_projects_dir(root_dir)

    def project_dir(self, project_name: str) -> Path:
        return self.root_dir / project_name

    def project_names(self) -> list[str]:
        try:
            entries = list(os.scandir(self.root_dir))
        except OSError as exc:
            logger.warning("Cannot read projects directory %s: %s", self.root_dir, exc)
            return []
        return [entry.name for entry in entries if entry.is_dir()]

    def has_project(self, project_name: str) -> bool:
        return self.project_dir(project_name).is_dir()

    def log_files(self, project_name: str) -> list[LogFile]:
        project_dir = self.project_dir(project_name)
        files: list[LogFile] = []
        for entry in os.scandir(project_dir):
            if not entry.name.endswith(LOG_SUFFIX) or not entry.is_file():
                continue
            files.append(LogFile(path=Path(entry.path), modified=entry.stat().st_mtime))
        files.sort(key=lambda item: (-item.modified, item.path.name))
        return files

    def iter_lines(self, log_file: LogFile) -> Iterator[str]:
        with log_file.path.open(encoding="utf-8", errors="replace") as f:
            for line in f:
                yield line.rstrip("\r\n")

    def remove_lines(self, log_file: LogFile, matches: Callable[[str], bool]) -> int:
        path = log_file.path
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        tmp_path = Path(tmp_name)
        removed = 0
        try:
            with os.fdopen(fd, "wb") as dst, path.open("rb") as src:
                for raw in src:
                    if matches(raw.decode("utf-8", errors="replace").rstrip("\r\n")):
                        removed += 1
                        continue
                    dst.write(raw)
            if removed:
                shutil.copymode(path, tmp_path)
                os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        return removed

    def remove_project(self, project_name: str) -> None:
        project_dir = self.project_dir(project_name)
        if project_dir.exists():
            shutil.rmtree(project_dir)

# ABOUTME: Top-level catalog of projects and sessions over the log directories.
# ABOUTME: Merges on-disk projects with manually added ones and applies config overrides.

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from .errors import (
    ProjectNotFoundError,
    ProjectValidationError,
    SessionNotFoundError,
    StorageError,
)
from .loaders import LocalLogStore, LogStore
from .models import Project, ProjectConfigEntry, SessionMeta, SessionPage
from .parsers import parse_entry
from .project_config import ConfigStore
from .resolver import DirectoryCache, DirectoryResolver, encode_project_name
from .sessions import SessionAggregator

PREVIEW_LIMIT = 5

logger = logging.getLogger(__name__)


class ProjectCatalog:
    """Projects discovered from log directories plus manually registered ones.

    Each catalog owns its directory cache, so independent catalogs in one
    process never share resolved paths.
    """

    def __init__(
        self,
        store: LogStore | None = None,
        config_store: ConfigStore | None = None,
        cache: DirectoryCache | None = None,
    ) -> None:
        self.store = store if store is not None else LocalLogStore()
        self.config_store = config_store if config_store is not None else ConfigStore()
        self.resolver = DirectoryResolver(self.store, cache)
        self.aggregator = SessionAggregator(self.store)

    @classmethod
    def from_paths(
        cls, projects_dir: Path | None = None, config_path: Path | None = None
    ) -> ProjectCatalog:
        return cls(LocalLogStore(projects_dir), ConfigStore(config_path))

    def list(self) -> list[Project]:
        config = self.config_store.load()
        projects: list[Project] = []
        on_disk = self.store.project_names()

        for name in on_disk:
            full_path = self.resolver.resolve(name)
            page = self.aggregator.sessions_for(name, PREVIEW_LIMIT, 0)
            entry = config.get(name)
            custom_name = entry.display_name if entry else None
            projects.append(
                Project(
                    name=name,
                    display_name=custom_name or generate_display_name(full_path),
                    full_path=full_path,
                    is_manually_added=bool(entry and entry.manually_added),
                    session_meta=SessionMeta(total=page.total, has_more=page.has_more),
                    sessions=page.sessions,
                )
            )

        existing = set(on_disk)
        for name, entry in config.items():
            if name in existing or not entry.manually_added:
                continue
            full_path = entry.original_path or self.resolver.resolve(name)
            projects.append(
                Project(
                    name=name,
                    display_name=entry.display_name or generate_display_name(full_path),
                    full_path=full_path,
                    is_manually_added=True,
                )
            )
        return projects

    def sessions(self, name: str, limit: int = PREVIEW_LIMIT, offset: int = 0) -> SessionPage:
        return self.aggregator.sessions_for(name, limit, offset)

    def messages(self, name: str, session_id: str) -> list[dict[str, Any]]:
        return self.aggregator.messages_for(name, session_id)

    def resolve(self, name: str) -> str:
        return self.resolver.resolve(name)

    def invalidate(self, name: str | None = None) -> None:
        """Drop resolved directories after the logs changed on disk."""
        self.resolver.cache.invalidate(name)
        logger.info("Project directory cache cleared%s", f" for {name}" if name else "")

    def is_empty(self, name: str) -> bool:
        return self.sessions(name, 1, 0).total == 0

    def rename(self, name: str, display_name: str) -> None:
        """Set the display name override; an empty name clears it."""
        self._require_project(name)
        display_name = display_name.strip()
        with self.config_store.editing() as config:
            entry = config.get(name) or ProjectConfigEntry()
            entry.display_name = display_name or None
            if entry.is_blank():
                config.pop(name, None)
            else:
                config[name] = entry

    def add_manually(self, path: str, display_name: str | None = None) -> Project:
        absolute = Path(path).expanduser().resolve()
        if not absolute.exists():
            raise ProjectValidationError(f"Path does not exist: {absolute}")

        name = encode_project_name(str(absolute))
        if self.store.has_project(name):
            raise ProjectValidationError(f"Project already exists for path: {absolute}")

        with self.config_store.editing() as config:
            if name in config:
                raise ProjectValidationError(f"Project already configured for path: {absolute}")
            config[name] = ProjectConfigEntry(
                manually_added=True,
                original_path=str(absolute),
                display_name=display_name or None,
            )

        logger.info("Added project %s for %s", name, absolute)
        return Project(
            name=name,
            display_name=display_name or generate_display_name(str(absolute)),
            full_path=str(absolute),
            is_manually_added=True,
        )

    def delete_empty(self, name: str) -> None:
        """Remove a project that has no sessions, including its config entry."""
        self._require_project(name)
        if not self.is_empty(name):
            raise ProjectValidationError("Cannot delete project with existing sessions")

        with self.config_store.editing() as config:
            try:
                self.store.remove_project(name)
            except OSError as exc:
                raise StorageError(f"Cannot remove project {name}: {exc}") from exc
            config.pop(name, None)
        logger.info("Deleted project %s", name)

    def delete_session(self, name: str, session_id: str) -> None:
        """Strip every line of the session from the project's log files."""
        if not self.store.has_project(name):
            raise ProjectNotFoundError(name)
        try:
            log_files = self.store.log_files(name)
        except OSError as exc:
            raise StorageError(f"Cannot read logs for project {name}: {exc}") from exc

        def belongs_to_session(line: str) -> bool:
            entry = parse_entry(line)
            return entry is not None and entry.session_id == session_id

        removed = 0
        for log_file in log_files:
            try:
                removed += self.store.remove_lines(log_file, belongs_to_session)
            except OSError as exc:
                raise StorageError(f"Cannot rewrite {log_file.path}: {exc}") from exc
        if not removed:
            raise SessionNotFoundError(name, session_id)
        logger.info("Deleted session %s from %s (%d lines)", session_id, name, removed)

    def _require_project(self, name: str) -> None:
        if self.store.has_project(name):
            return
        if name in self.config_store.load():
            return
        raise ProjectNotFoundError(name)


def generate_display_name(project_path: str) -> str:
    """Name a project after its manifest, or a shortened form of its path."""
    manifest_name = _manifest_name(Path(project_path))
    if manifest_name:
        return manifest_name

    if project_path.startswith("/"):
        parts = [part for part in project_path.split("/") if part]
        if len(parts) > 3:
            return ".../" + "/".join(parts[-2:])
    return project_path


def _manifest_name(project_dir: Path) -> str | None:
    try:
        package = json.loads((project_dir / "package.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        package = None
    if isinstance(package, dict) and _is_name(package.get("name")):
        return package["name"]

    try:
        with (project_dir / "pyproject.toml").open("rb") as f:
            pyproject = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    project_table = pyproject.get("project")
    if isinstance(project_table, dict) and _is_name(project_table.get("name")):
        return project_table["name"]
    return None


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value)

# ABOUTME: Persistence for per-project overrides in a single JSON document.
# ABOUTME: Loads leniently and writes atomically under a process-wide writer lock.

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import ValidationError

from .errors import StorageError
from .models import ProjectConfigEntry

CONFIG_PATH = Path.home() / ".claude" / "project-config.json"
ENV_CONFIG_PATH = "CLAUDE_CODE_PROJECT_CONFIG"

ProjectConfig = dict[str, ProjectConfigEntry]

logger = logging.getLogger(__name__)


def resolve_config_path(config_path: Path | None = None) -> Path:
    if config_path is not None:
        return config_path
    env_value = os.environ.get(ENV_CONFIG_PATH)
    if env_value:
        return Path(env_value).expanduser()
    return CONFIG_PATH


class ConfigStore:
    """Reads and writes the project config document as a whole.

    Mutations go through editing(), which holds a lock across the
    read-modify-write so writers in one process never interleave.
    """

    _write_lock = threading.Lock()

    def __init__(self, config_path: Path | None = None) -> None:
        self.path = resolve_config_path(config_path)

    def load(self, strict: bool = False) -> ProjectConfig:
        """Read the config document.

        Unreadable or malformed content is skipped with a warning. With
        strict set it raises StorageError instead, and editing() loads this way.
        """
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            if strict:
                raise StorageError(f"Cannot read project config {self.path}: {exc}") from exc
            logger.warning("Ignoring unreadable project config %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            if strict:
                raise StorageError(f"Project config {self.path} is not a JSON object")
            return {}

        config: ProjectConfig = {}
        for project_name, raw in data.items():
            try:
                config[project_name] = ProjectConfigEntry.model_validate(raw)
            except ValidationError as exc:
                if strict:
                    raise StorageError(
                        f"Malformed config entry for {project_name} in {self.path}"
                    ) from exc
                logger.warning("Ignoring malformed config entry for %s", project_name)
        return config

    def save(self, config: ProjectConfig) -> None:
        payload = {
            name: entry.model_dump(by_alias=True, exclude_none=True)
            for name, entry in config.items()
        }
        try:
            _atomic_write_text(self.path, json.dumps(payload, indent=2))
        except OSError as exc:
            raise StorageError(f"Cannot write project config {self.path}: {exc}") from exc
        logger.info("Saved project config with %d entries", len(payload))

    @contextmanager
    def editing(self) -> Iterator[ProjectConfig]:
        """Yield the current config and save it if the block exits cleanly."""
        with self._write_lock:
            config = self.load(strict=True)
            yield config
            self.save(config)


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

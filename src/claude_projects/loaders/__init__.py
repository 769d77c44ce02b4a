from __future__ import annotations

from .base import LogFile, LogStore
from .local import LocalLogStore, resolve_projects_dir

__all__ = ["LocalLogStore", "LogFile", "LogStore", "resolve_projects_dir"]

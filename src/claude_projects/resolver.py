# ABOUTME: Resolves the working directory a project's sessions ran in.
# ABOUTME: Votes over cwd values in the logs and memoizes results until invalidated.

from __future__ import annotations

import logging
import threading
from collections import Counter
from datetime import datetime

from .loaders import LogStore
from .parsers import parse_entry

RECENCY_THRESHOLD = 0.25

logger = logging.getLogger(__name__)


def encode_project_name(path: str) -> str:
    """Turn an absolute path into a project identifier."""
    return path.replace("/", "-")


def decode_project_name(project_name: str) -> str:
    """Best-effort inverse of encode_project_name.

    Lossy: dashes that were part of a directory name come back as separators.
    """
    return project_name.replace("-", "/")


class DirectoryCache:
    """Memo table of project name to resolved directory.

    Entries never expire; they are dropped only through invalidate(). Each
    key has its own lock so concurrent misses on one project scan once.
    Every invalidation also advances a generation, so a scan that started
    before it cannot store its result afterwards.
    """

    def __init__(self) -> None:
        self._paths: dict[str, str] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}
        self._epoch = 0
        self._generations: dict[str, int] = {}

    def get(self, project_name: str) -> str | None:
        with self._lock:
            return self._paths.get(project_name)

    def set(self, project_name: str, path: str) -> None:
        with self._lock:
            self._paths[project_name] = path

    def generation(self, project_name: str) -> tuple[int, int]:
        with self._lock:
            return self._epoch, self._generations.get(project_name, 0)

    def set_if_current(self, project_name: str, path: str, generation: tuple[int, int]) -> bool:
        """Store path unless project_name was invalidated since generation was taken."""
        with self._lock:
            if (self._epoch, self._generations.get(project_name, 0)) != generation:
                return False
            self._paths[project_name] = path
            return True

    def key_lock(self, project_name: str) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(project_name, threading.Lock())

    def invalidate(self, project_name: str | None = None) -> None:
        with self._lock:
            if project_name is None:
                self._paths.clear()
                self._generations.clear()
                self._key_locks.clear()
                self._epoch += 1
            else:
                self._paths.pop(project_name, None)
                self._generations[project_name] = self._generations.get(project_name, 0) + 1

    def __contains__(self, project_name: object) -> bool:
        with self._lock:
            return project_name in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


class DirectoryResolver:
    """Infers a project's authoritative working directory from its logs."""

    def __init__(self, store: LogStore, cache: DirectoryCache | None = None) -> None:
        self.store = store
        self.cache = cache if cache is not None else DirectoryCache()

    def resolve(self, project_name: str) -> str:
        cached = self.cache.get(project_name)
        if cached is not None:
            return cached

        with self.cache.key_lock(project_name):
            cached = self.cache.get(project_name)
            if cached is not None:
                return cached
            generation = self.cache.generation(project_name)
            path = self._scan(project_name)
            if self.cache.set_if_current(project_name, path, generation):
                logger.debug("Cached project directory: %s -> %s", project_name, path)
            else:
                logger.debug("Discarded stale directory for %s after invalidation", project_name)
            return path

    def _scan(self, project_name: str) -> str:
        fallback = decode_project_name(project_name)
        try:
            log_files = self.store.log_files(project_name)
        except OSError as exc:
            logger.warning("Cannot read logs for %s, using %s: %s", project_name, fallback, exc)
            return fallback
        if not log_files:
            return fallback

        logger.debug("Extracting project directory for %s from %d files", project_name, len(log_files))
        counts: Counter[str] = Counter()
        latest_cwd: str | None = None
        latest_timestamp: datetime | None = None

        for log_file in log_files:
            try:
                for line in self.store.iter_lines(log_file):
                    entry = parse_entry(line)
                    if entry is None or entry.cwd is None:
                        continue
                    counts[entry.cwd] += 1
                    if entry.timestamp is not None and (
                        latest_timestamp is None or entry.timestamp > latest_timestamp
                    ):
                        latest_timestamp = entry.timestamp
                        latest_cwd = entry.cwd
            except OSError as exc:
                logger.warning("Skipping unreadable log %s: %s", log_file.path, exc)

        return choose_directory(counts, latest_cwd) or fallback


def choose_directory(counts: Counter[str], latest_cwd: str | None) -> str | None:
    """Pick the working directory from cwd occurrence counts.

    The most recent cwd wins when it was seen at least RECENCY_THRESHOLD as
    often as the most frequent one; otherwise the most frequent wins, ties
    going to the first one counted.
    """
    if not counts:
        return None
    if len(counts) == 1:
        return next(iter(counts))

    max_count = max(counts.values())
    if latest_cwd is not None and counts[latest_cwd] >= max_count * RECENCY_THRESHOLD:
        return latest_cwd
    # Counter preserves insertion order, so the first maximum is the first seen.
    for cwd, count in counts.items():
        if count == max_count:
            return cwd
    return None

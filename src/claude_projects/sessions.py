# ABOUTME: Aggregates log entries into per-session records for a project.
# ABOUTME: Deduplicates across files newest-first and paginates by last activity.

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .loaders import LogFile, LogStore
from .models import Session, SessionPage
from .parsers import SUMMARY_PLACEHOLDER, parse_entry, summary_from_message

EARLY_EXIT_FACTOR = 2
EARLY_EXIT_MIN_FILES = 3

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)

logger = logging.getLogger(__name__)


class SessionAggregator:
    def __init__(self, store: LogStore) -> None:
        self.store = store

    def sessions_for(self, project_name: str, limit: int = 5, offset: int = 0) -> SessionPage:
        """Return one page of the project's sessions, most recent first.

        Files are read newest first and a session seen in a newer file is never
        replaced by an older file's copy. Scanning stops early once enough
        sessions are collected to fill the page twice over, after a minimum
        number of files. An unreadable project yields an empty page.
        """
        try:
            log_files = self.store.log_files(project_name)
        except OSError as exc:
            logger.warning("Cannot read sessions for project %s: %s", project_name, exc)
            return SessionPage(offset=offset, limit=limit)

        collected: dict[str, Session] = {}
        min_files = min(EARLY_EXIT_MIN_FILES, len(log_files))
        wanted = (limit + offset) * EARLY_EXIT_FACTOR

        for processed, log_file in enumerate(log_files, start=1):
            for session in self._aggregate_file(log_file).values():
                collected.setdefault(session.id, session)
            if len(collected) >= wanted and processed >= min_files:
                logger.debug(
                    "Stopped after %d of %d files for %s", processed, len(log_files), project_name
                )
                break

        ordered = sorted(collected.values(), key=_activity_key, reverse=True)
        total = len(ordered)
        return SessionPage(
            sessions=ordered[offset : offset + limit],
            total=total,
            has_more=offset + limit < total,
            offset=offset,
            limit=limit,
        )

    def _aggregate_file(self, log_file: LogFile) -> dict[str, Session]:
        sessions: dict[str, Session] = {}
        try:
            for line in self.store.iter_lines(log_file):
                entry = parse_entry(line)
                if entry is None or entry.session_id is None:
                    continue

                session = sessions.get(entry.session_id)
                if session is None:
                    session = Session(id=entry.session_id, summary=SUMMARY_PLACEHOLDER)
                    sessions[entry.session_id] = session

                if entry.is_summary_marker:
                    session.summary = entry.summary
                elif session.summary == SUMMARY_PLACEHOLDER:
                    derived = summary_from_message(entry)
                    if derived is not None:
                        session.summary = derived

                session.message_count += 1
                if entry.timestamp is not None and (
                    session.last_activity is None or entry.timestamp > session.last_activity
                ):
                    session.last_activity = entry.timestamp
                if entry.cwd is not None:
                    session.cwd = entry.cwd
        except OSError as exc:
            logger.warning("Skipping unreadable log %s: %s", log_file.path, exc)
        return sessions

    def messages_for(self, project_name: str, session_id: str) -> list[dict[str, Any]]:
        """Collect the raw entries of one session across all log files."""
        try:
            log_files = self.store.log_files(project_name)
        except OSError as exc:
            logger.warning("Cannot read messages for project %s: %s", project_name, exc)
            return []

        found: list[tuple[datetime, dict[str, Any]]] = []
        for log_file in log_files:
            try:
                for line in self.store.iter_lines(log_file):
                    entry = parse_entry(line)
                    if entry is None or entry.session_id != session_id:
                        continue
                    found.append((entry.timestamp or _EPOCH, json.loads(line)))
            except OSError as exc:
                logger.warning("Skipping unreadable log %s: %s", log_file.path, exc)

        found.sort(key=lambda item: item[0])
        return [raw for _, raw in found]


def _activity_key(session: Session) -> datetime:
    return session.last_activity or _EPOCH

# ABOUTME: Log entry parsing utilities for Claude Code project logs.
# ABOUTME: Decodes JSONL lines leniently and derives session summaries from messages.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

SUMMARY_PLACEHOLDER = "New Session"
SUMMARY_MAX_CHARS = 50
COMMAND_PREFIX = "<command-name>"


class LogMessage(BaseModel):
    """The message payload carried by a log entry."""

    model_config = ConfigDict(extra="ignore")

    role: str | None = None
    content: Any = None

    @field_validator("role", mode="before")
    @classmethod
    def _role_as_text(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class LogEntry(BaseModel):
    """One decoded line of a project log file.

    Every field is optional. Values of the wrong type are dropped rather than
    rejecting the whole line, so a stray field never hides a session id.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: str | None = Field(default=None, alias="sessionId")
    type: str | None = None
    timestamp: datetime | None = None
    cwd: str | None = None
    summary: str | None = None
    message: LogMessage | None = None

    @field_validator("session_id", "type", "cwd", "summary", mode="before")
    @classmethod
    def _non_empty_text(cls, value: Any) -> str | None:
        if isinstance(value, str) and value:
            return value
        return None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> datetime | None:
        if not isinstance(value, str) or not value:
            return None
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @field_validator("message", mode="before")
    @classmethod
    def _message_object(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def is_summary_marker(self) -> bool:
        return self.type == "summary" and bool(self.summary)

    @property
    def is_user_message(self) -> bool:
        return self.message is not None and self.message.role == "user"


def parse_entry(line: str) -> LogEntry | None:
    """Decode one log line, returning None for blank or malformed lines."""
    if not line.strip():
        return None
    try:
        return LogEntry.model_validate_json(line)
    except ValidationError:
        return None


def summary_from_message(entry: LogEntry) -> str | None:
    """Derive a session summary from a user message, if it can serve as one.

    Only plain-text content counts. Slash-command invocations start with the
    reserved command tag and are never used.
    """
    if not entry.is_user_message:
        return None
    content = entry.message.content
    if not isinstance(content, str) or not content:
        return None
    if content.startswith(COMMAND_PREFIX):
        return None
    if len(content) > SUMMARY_MAX_CHARS:
        return content[:SUMMARY_MAX_CHARS] + "..."
    return content

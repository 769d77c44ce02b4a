# ABOUTME: Pydantic records returned by the catalog and persisted in the config file.
# ABOUTME: Defines sessions, projects, pagination pages and per-project overrides.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """One conversation aggregated from log entries sharing a session id."""

    id: str
    summary: str
    message_count: int = 0
    last_activity: datetime | None = None
    cwd: str = ""


class SessionMeta(BaseModel):
    """Size of the session preview window attached to a project."""

    total: int = 0
    has_more: bool = False


class SessionPage(BaseModel):
    """A slice of a project's sessions, most recent first."""

    sessions: list[Session] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    offset: int = 0
    limit: int = 0


class Project(BaseModel):
    """A project with its resolved working directory and session preview."""

    name: str
    display_name: str
    full_path: str
    is_manually_added: bool = False
    session_meta: SessionMeta = Field(default_factory=SessionMeta)
    sessions: list[Session] = Field(default_factory=list)


class ProjectConfigEntry(BaseModel):
    """Overrides stored for one project in the config document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    display_name: str | None = Field(default=None, alias="displayName")
    manually_added: bool | None = Field(default=None, alias="manuallyAdded")
    original_path: str | None = Field(default=None, alias="originalPath")

    def is_blank(self) -> bool:
        return not self.model_dump(exclude_none=True)

# ABOUTME: Exception hierarchy for project catalog operations.
# ABOUTME: Separates not-found, precondition and storage failures for callers.

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for all catalog errors."""


class ProjectNotFoundError(CatalogError):
    """The referenced project has no log directory and no config entry."""

    def __init__(self, project_name: str):
        self.project_name = project_name
        super().__init__(f"Project not found: {project_name}")


class SessionNotFoundError(CatalogError):
    """No log file of the project contains the session."""

    def __init__(self, project_name: str, session_id: str):
        self.project_name = project_name
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found in project {project_name}")


class ProjectValidationError(CatalogError):
    """A precondition of a write operation does not hold."""


class StorageError(CatalogError):
    """Reading or writing catalog data on disk failed during a write operation."""

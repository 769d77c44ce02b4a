# ABOUTME: Project and session catalog built from Claude Code JSONL logs.
# ABOUTME: Exposes the catalog entry point and the typed errors it raises.

from claude_projects.catalog import ProjectCatalog
from claude_projects.errors import (
    CatalogError,
    ProjectNotFoundError,
    ProjectValidationError,
    SessionNotFoundError,
    StorageError,
)

__version__ = "0.1.0"

__all__ = [
    "CatalogError",
    "ProjectCatalog",
    "ProjectNotFoundError",
    "ProjectValidationError",
    "SessionNotFoundError",
    "StorageError",
]

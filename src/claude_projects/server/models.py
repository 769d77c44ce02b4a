# ABOUTME: Pydantic models for API request/response validation.
# ABOUTME: Defines request bodies and wrapper payloads for project endpoints.

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models import Project


class RenameRequest(BaseModel):
    """New display name for a project; empty clears the override."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field(default="", alias="displayName")


class AddProjectRequest(BaseModel):
    """Directory to register as a project."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(min_length=1)
    display_name: str | None = Field(default=None, alias="displayName")


class InvalidateRequest(BaseModel):
    """Project whose cached directory is stale, or None for all projects."""

    project: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True


class AddProjectResponse(SuccessResponse):
    project: Project


class MessagesResponse(BaseModel):
    messages: list[dict[str, Any]]

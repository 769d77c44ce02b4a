from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from .models import Project, Session


def to_json(payload: BaseModel | Sequence[BaseModel] | list[dict[str, Any]]) -> str:
    if isinstance(payload, BaseModel):
        data: Any = payload.model_dump(mode="json")
    else:
        data = [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in payload
        ]
    return json.dumps(data, ensure_ascii=True, indent=2)


def render_projects_table(projects: list[Project]) -> None:
    console = Console()
    table = Table(title="Projects")
    table.add_column("Name", style="cyan")
    table.add_column("Display name", style="magenta")
    table.add_column("Path", style="white")
    table.add_column("Sessions", style="green", justify="right")

    for project in projects:
        total = str(project.session_meta.total)
        if project.session_meta.has_more:
            total += "+"
        if project.is_manually_added and not project.sessions:
            total = "manual"
        table.add_row(project.name, project.display_name, project.full_path, total)
    console.print(table)


def render_sessions_table(sessions: list[Session], title: str = "Sessions") -> None:
    console = Console()
    table = Table(title=title)
    table.add_column("Session", style="cyan")
    table.add_column("Summary", style="white")
    table.add_column("Messages", style="green", justify="right")
    table.add_column("Last activity", style="magenta")

    for session in sessions:
        last_activity = session.last_activity.isoformat() if session.last_activity else "unknown"
        table.add_row(session.id[:8], session.summary, str(session.message_count), last_activity)
    console.print(table)

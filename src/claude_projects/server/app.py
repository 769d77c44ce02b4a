from __future__ import annotations

import webbrowser

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from ..catalog import ProjectCatalog
from ..errors import (
    CatalogError,
    ProjectNotFoundError,
    ProjectValidationError,
    SessionNotFoundError,
)
from ..models import Project, SessionPage
from .models import (
    AddProjectRequest,
    AddProjectResponse,
    InvalidateRequest,
    MessagesResponse,
    RenameRequest,
    SuccessResponse,
)


def create_app(catalog: ProjectCatalog) -> FastAPI:
    app = FastAPI(title="Claude Projects")
    app.state.catalog = catalog

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})

    @app.get("/api/projects")
    def list_projects() -> list[Project]:
        return app.state.catalog.list()

    @app.get("/api/projects/{name}/sessions")
    def get_sessions(
        name: str,
        limit: int = Query(5, ge=0, le=100),
        offset: int = Query(0, ge=0),
    ) -> SessionPage:
        return app.state.catalog.sessions(name, limit=limit, offset=offset)

    @app.get("/api/projects/{name}/sessions/{session_id}/messages")
    def get_session_messages(name: str, session_id: str) -> MessagesResponse:
        return MessagesResponse(messages=app.state.catalog.messages(name, session_id))

    @app.put("/api/projects/{name}/rename")
    def rename_project(name: str, request: RenameRequest) -> SuccessResponse:
        app.state.catalog.rename(name, request.display_name)
        return SuccessResponse()

    @app.post("/api/projects/create")
    def create_project(request: AddProjectRequest) -> AddProjectResponse:
        project = app.state.catalog.add_manually(request.path, request.display_name)
        return AddProjectResponse(project=project)

    @app.delete("/api/projects/{name}")
    def delete_project(name: str) -> SuccessResponse:
        app.state.catalog.delete_empty(name)
        return SuccessResponse()

    @app.delete("/api/projects/{name}/sessions/{session_id}")
    def delete_session(name: str, session_id: str) -> SuccessResponse:
        app.state.catalog.delete_session(name, session_id)
        return SuccessResponse()

    @app.post("/api/cache/invalidate")
    def invalidate_cache(request: InvalidateRequest | None = None) -> SuccessResponse:
        app.state.catalog.invalidate(request.project if request else None)
        return SuccessResponse()

    return app


def _status_for(exc: CatalogError) -> int:
    if isinstance(exc, (ProjectNotFoundError, SessionNotFoundError)):
        return 404
    if isinstance(exc, ProjectValidationError):
        return 400
    return 500


def run_server(catalog: ProjectCatalog, host: str, port: int, open_browser: bool) -> None:
    app = create_app(catalog)
    if open_browser:
        webbrowser.open(f"http://{host}:{port}/api/projects")
    uvicorn.run(app, host=host, port=port, log_level="warning")

# ABOUTME: HTTP server package for the project catalog.
# ABOUTME: Provides the FastAPI application and API endpoints.

from claude_projects.server.app import create_app, run_server

__all__ = ["create_app", "run_server"]

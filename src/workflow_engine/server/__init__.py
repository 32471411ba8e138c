"""FastAPI server adapter for the workflow engine.

Design intent:
- Keep validation and transition logic in `workflow_engine.engine.*`
- Keep transport concerns (routing, status codes, CORS, docs) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_engine.server.app import create_app

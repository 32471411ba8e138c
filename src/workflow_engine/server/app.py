"""FastAPI app factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflow_engine import __version__
from workflow_engine.engine.config import EngineSettings
from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.documents import seed_definitions
from workflow_engine.engine.errors import WorkflowEngineError
from workflow_engine.engine.instance_engine import InstanceEngine
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.router import router

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[str, int] = {
    "Conflict": 409,
    "NotFound": 404,
    "InvalidDefinition": 400,
    "UnknownAction": 400,
    "IllegalTransition": 400,
    "TerminalStateViolation": 400,
    "InconsistentState": 500,
}


def _engine_error_handler(_request: Request, exc: WorkflowEngineError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("Engine invariant violated", extra={"kind": exc.kind, "reason": exc.message})
    return JSONResponse(status_code=status_code, content={"kind": exc.kind, "detail": exc.message})


def create_app(
    settings: ServerSettings | None = None,
    engine_settings: EngineSettings | None = None,
    *,
    definitions: DefinitionStore | None = None,
) -> FastAPI:
    settings = settings or ServerSettings()
    engine_settings = engine_settings or EngineSettings()

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="Register workflow definitions and drive instances through them.",
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        openapi_url="/openapi.json" if settings.docs_enabled else None,
    )

    store = definitions if definitions is not None else DefinitionStore()
    if engine_settings.definitions_path is not None:
        seeded = seed_definitions(store, engine_settings.definitions_path)
        logger.info(
            "Seed definitions loaded",
            extra={"path": str(engine_settings.definitions_path), "count": len(seeded)},
        )

    app.state.settings = settings
    app.state.definitions = store
    app.state.instances = InstanceEngine(store)

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(WorkflowEngineError, _engine_error_handler)
    app.include_router(router)
    return app

"""REST routes for definitions and instances.

Routes are thin: they translate JSON documents to domain values, call the engine
core and translate the result back. Engine errors propagate to the exception
handler registered in :mod:`workflow_engine.server.app`.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from workflow_engine import __version__
from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.documents import DefinitionDocument
from workflow_engine.engine.instance_engine import InstanceEngine
from workflow_engine.server.models import (
    ApiError,
    ApiInstance,
    ApiInstanceState,
    ExecuteActionRequest,
    StartInstanceRequest,
)

router = APIRouter()

_ERRORS: dict[int | str, dict[str, object]] = {
    400: {"model": ApiError},
    404: {"model": ApiError},
    409: {"model": ApiError},
    500: {"model": ApiError},
}


def _definitions(request: Request) -> DefinitionStore:
    store = getattr(request.app.state, "definitions", None)
    if not isinstance(store, DefinitionStore):
        raise HTTPException(status_code=500, detail="Definition store not configured")
    return store


def _instances(request: Request) -> InstanceEngine:
    engine = getattr(request.app.state, "instances", None)
    if not isinstance(engine, InstanceEngine):
        raise HTTPException(status_code=500, detail="Instance engine not configured")
    return engine


@router.get("/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.post(
    "/definitions",
    response_model=DefinitionDocument,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    tags=["definitions"],
    summary="Create a new workflow definition.",
)
def create_definition(
    document: DefinitionDocument, request: Request, response: Response
) -> DefinitionDocument:
    created = _definitions(request).create(document.to_domain())
    response.headers["Location"] = f"/definitions/{created.id}"
    return DefinitionDocument.from_domain(created)


@router.get(
    "/definitions",
    response_model=list[DefinitionDocument],
    tags=["definitions"],
    summary="List all workflow definitions.",
)
def list_definitions(request: Request) -> list[DefinitionDocument]:
    return [DefinitionDocument.from_domain(d) for d in _definitions(request).list()]


@router.get(
    "/definitions/{definition_id}",
    response_model=DefinitionDocument,
    responses=_ERRORS,
    tags=["definitions"],
    summary="Retrieve an existing definition by ID.",
)
def get_definition(definition_id: str, request: Request) -> DefinitionDocument:
    return DefinitionDocument.from_domain(_definitions(request).get(definition_id))


@router.post(
    "/instances",
    response_model=ApiInstanceState,
    responses=_ERRORS,
    tags=["instances"],
    summary="Start a new workflow instance for a chosen definition.",
)
def start_instance(body: StartInstanceRequest, request: Request) -> ApiInstanceState:
    snapshot = _instances(request).start(body.definitionId)
    return ApiInstanceState.from_snapshot(snapshot)


@router.get(
    "/instances",
    response_model=list[ApiInstanceState],
    tags=["instances"],
    summary="List instances, optionally for one definition.",
)
def list_instances(
    request: Request, definition_id: str | None = Query(default=None, alias="definitionId")
) -> list[ApiInstanceState]:
    snapshots = _instances(request).list(definition_id=definition_id)
    return [ApiInstanceState.from_snapshot(s) for s in snapshots]


@router.get(
    "/instances/{instance_id}",
    response_model=ApiInstance,
    responses=_ERRORS,
    tags=["instances"],
    summary="Retrieve the current state and history of an instance.",
)
def get_instance(instance_id: uuid.UUID, request: Request) -> ApiInstance:
    snapshot, actions = _instances(request).describe(instance_id)
    return ApiInstance.from_snapshot(snapshot, available_actions=actions)


@router.post(
    "/instances/{instance_id}/execute",
    response_model=ApiInstanceState,
    responses=_ERRORS,
    tags=["instances"],
    summary="Execute an action on a given instance.",
)
def execute_action(
    instance_id: uuid.UUID, body: ExecuteActionRequest, request: Request
) -> ApiInstanceState:
    snapshot = _instances(request).execute(instance_id, body.actionId)
    return ApiInstanceState.from_snapshot(snapshot)

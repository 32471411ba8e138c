"""Pydantic models for the REST server."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from workflow_engine.engine.models import HistoryEntry, InstanceSnapshot


class StartInstanceRequest(BaseModel):
    definitionId: str


class ExecuteActionRequest(BaseModel):
    actionId: str


class ApiHistoryEntry(BaseModel):
    actionId: str
    timestamp: datetime

    @classmethod
    def from_domain(cls, entry: HistoryEntry) -> ApiHistoryEntry:
        return cls(actionId=entry.action_id, timestamp=entry.timestamp)


class ApiInstanceState(BaseModel):
    id: uuid.UUID
    currentStateId: str

    @classmethod
    def from_snapshot(cls, snapshot: InstanceSnapshot) -> ApiInstanceState:
        return cls(id=snapshot.id, currentStateId=snapshot.current_state_id)


class ApiInstance(BaseModel):
    id: uuid.UUID
    definitionId: str
    currentStateId: str
    history: list[ApiHistoryEntry]
    availableActions: list[str] = Field(default_factory=list)

    @classmethod
    def from_snapshot(
        cls, snapshot: InstanceSnapshot, *, available_actions: list[str]
    ) -> ApiInstance:
        return cls(
            id=snapshot.id,
            definitionId=snapshot.definition_id,
            currentStateId=snapshot.current_state_id,
            history=[ApiHistoryEntry.from_domain(h) for h in snapshot.history],
            availableActions=available_actions,
        )


class ApiError(BaseModel):
    kind: str
    detail: str

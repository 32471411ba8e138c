"""Test configuration and fixtures."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.instance_engine import InstanceEngine
from workflow_engine.engine.models import Action, State, WorkflowDefinition


class StepClock:
    """A deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


def make_doc_review(definition_id: str = "doc-review") -> WorkflowDefinition:
    return WorkflowDefinition.build(
        definition_id,
        states=[
            State("draft", is_initial=True),
            State("in-review"),
            State("approved", is_final=True),
            State("rejected", is_final=True),
        ],
        actions=[
            Action("submit-for-review", frozenset({"draft"}), "in-review"),
            Action("approve", frozenset({"in-review"}), "approved"),
            Action("reject", frozenset({"in-review"}), "rejected"),
        ],
    )


def doc_review_json(definition_id: str = "doc-review") -> dict[str, object]:
    return {
        "id": definition_id,
        "states": [
            {"id": "draft", "isInitial": True},
            {"id": "in-review"},
            {"id": "approved", "isFinal": True},
            {"id": "rejected", "isFinal": True},
        ],
        "actions": [
            {"id": "submit-for-review", "fromStates": ["draft"], "toState": "in-review"},
            {"id": "approve", "fromStates": ["in-review"], "toState": "approved"},
            {"id": "reject", "fromStates": ["in-review"], "toState": "rejected"},
        ],
    }


@pytest.fixture
def doc_review() -> WorkflowDefinition:
    return make_doc_review()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store() -> DefinitionStore:
    return DefinitionStore()


@pytest.fixture
def engine(store: DefinitionStore, clock: StepClock) -> InstanceEngine:
    return InstanceEngine(store, clock=clock)


@pytest.fixture
def definition_factory():
    """Build a doc-review style definition under any id."""
    return make_doc_review


@pytest.fixture
def definition_payload():
    """Build the JSON document of a doc-review style definition under any id."""
    return doc_review_json

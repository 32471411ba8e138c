"""JSON documents describing workflow definitions.

These are the camelCase shapes accepted over HTTP and from definition files. They
only check shape; structural rules live in
:func:`workflow_engine.engine.definition_store.validate_definition`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.models import Action, State, WorkflowDefinition

logger = logging.getLogger(__name__)


class StateDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    isInitial: bool = False
    isFinal: bool = False
    enabled: bool = True

    def to_domain(self) -> State:
        return State(
            id=self.id, is_initial=self.isInitial, is_final=self.isFinal, enabled=self.enabled
        )

    @classmethod
    def from_domain(cls, state: State) -> StateDocument:
        return cls(
            id=state.id, isInitial=state.is_initial, isFinal=state.is_final, enabled=state.enabled
        )


class ActionDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    fromStates: list[str] = Field(default_factory=list)
    toState: str
    enabled: bool = True

    def to_domain(self) -> Action:
        return Action(
            id=self.id,
            from_states=frozenset(self.fromStates),
            to_state=self.toState,
            enabled=self.enabled,
        )

    @classmethod
    def from_domain(cls, action: Action) -> ActionDocument:
        return cls(
            id=action.id,
            # Sets carry no order; sort for stable output.
            fromStates=sorted(action.from_states),
            toState=action.to_state,
            enabled=action.enabled,
        )


class DefinitionDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    states: list[StateDocument] = Field(default_factory=list)
    actions: list[ActionDocument] = Field(default_factory=list)

    def to_domain(self) -> WorkflowDefinition:
        return WorkflowDefinition.build(
            self.id,
            states=[s.to_domain() for s in self.states],
            actions=[a.to_domain() for a in self.actions],
        )

    @classmethod
    def from_domain(cls, definition: WorkflowDefinition) -> DefinitionDocument:
        return cls(
            id=definition.id,
            states=[StateDocument.from_domain(s) for s in definition.states],
            actions=[ActionDocument.from_domain(a) for a in definition.actions],
        )


_DOCUMENT_LIST = TypeAdapter(list[DefinitionDocument])


def parse_definition_documents(raw: object) -> list[DefinitionDocument]:
    """Parse one definition object or a list of them.

    Raises:
        pydantic.ValidationError: if the payload does not have the expected shape.
    """

    if isinstance(raw, dict):
        return [DefinitionDocument.model_validate(raw)]
    return _DOCUMENT_LIST.validate_python(raw)


def load_definition_file(path: Path) -> list[DefinitionDocument]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return parse_definition_documents(raw)


def discover_definition_files(path: Path) -> list[Path]:
    """Return the definition files found at ``path``.

    A file is returned as-is; a directory yields its ``*.json`` files in name order.
    """

    if path.is_dir():
        return sorted(p for p in path.glob("*.json") if p.is_file())
    if path.exists():
        return [path]
    raise FileNotFoundError(str(path))


def seed_definitions(store: DefinitionStore, path: Path) -> list[WorkflowDefinition]:
    """Load every definition found at ``path`` into ``store``.

    Any unreadable file or rejected definition aborts the load.
    """

    created: list[WorkflowDefinition] = []
    for file in discover_definition_files(path):
        for document in load_definition_file(file):
            created.append(store.create(document.to_domain()))
        logger.info("Definitions loaded", extra={"path": str(file)})
    return created

"""Workflow engine core.

This package holds the parts with real invariants:
- immutable definitions (states and the actions between them)
- a store that only ever accepts well-formed definitions
- running instances and the transition rule applied to them

Everything here is synchronous and in-memory; transports live in
`workflow_engine.server`.
"""

from workflow_engine.engine.definition_store import DefinitionStore, validate_definition
from workflow_engine.engine.errors import (
    ConflictError,
    IllegalTransitionError,
    InconsistentStateError,
    InvalidDefinitionError,
    NotFoundError,
    TerminalStateViolationError,
    UnknownActionError,
    WorkflowEngineError,
)
from workflow_engine.engine.instance_engine import InstanceEngine
from workflow_engine.engine.models import (
    INSTANCE_STARTED,
    Action,
    HistoryEntry,
    InstanceSnapshot,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)

__all__ = [
    "INSTANCE_STARTED",
    "Action",
    "ConflictError",
    "DefinitionStore",
    "HistoryEntry",
    "IllegalTransitionError",
    "InconsistentStateError",
    "InstanceEngine",
    "InstanceSnapshot",
    "InvalidDefinitionError",
    "NotFoundError",
    "State",
    "TerminalStateViolationError",
    "UnknownActionError",
    "WorkflowDefinition",
    "WorkflowEngineError",
    "WorkflowInstance",
    "validate_definition",
]

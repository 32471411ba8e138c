"""Error taxonomy for the workflow engine.

Every failure surfaced by the core carries a stable ``kind`` (used by the
transport layer to pick a status code) and a descriptive message.
"""

from __future__ import annotations

from typing import ClassVar


class WorkflowEngineError(Exception):
    """Base class for all errors raised by the engine core."""

    kind: ClassVar[str] = "WorkflowEngineError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(WorkflowEngineError):
    """An entity with the given identifier already exists."""

    kind = "Conflict"


class NotFoundError(WorkflowEngineError):
    """A referenced definition or instance does not exist."""

    kind = "NotFound"


class InvalidDefinitionError(WorkflowEngineError, ValueError):
    """A definition violates a structural rule at creation time."""

    kind = "InvalidDefinition"


class UnknownActionError(WorkflowEngineError):
    kind = "UnknownAction"


class IllegalTransitionError(WorkflowEngineError, ValueError):
    """The action exists but is not permitted from the current state."""

    kind = "IllegalTransition"


class TerminalStateViolationError(WorkflowEngineError):
    """The instance sits in a final state; no actions are permitted."""

    kind = "TerminalStateViolation"


class InconsistentStateError(WorkflowEngineError):
    """An internal invariant does not hold (unknown current or target state)."""

    kind = "InconsistentState"

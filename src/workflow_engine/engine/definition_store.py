"""In-memory store of validated workflow definitions."""

from __future__ import annotations

import logging
import threading
from collections import Counter

from workflow_engine.engine.errors import ConflictError, InvalidDefinitionError, NotFoundError
from workflow_engine.engine.models import WorkflowDefinition

logger = logging.getLogger(__name__)


def _duplicates(ids: list[str]) -> list[str]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


def validate_definition(definition: WorkflowDefinition) -> None:
    """Check the structural rules a definition must satisfy to be accepted.

    Raises:
        InvalidDefinitionError: on the first violated rule.
    """

    if not definition.id.strip():
        raise InvalidDefinitionError("Definition id must not be empty.")

    state_ids = [s.id for s in definition.states]
    if any(not s.strip() for s in state_ids):
        raise InvalidDefinitionError("State ids must not be empty.")
    dup_states = _duplicates(state_ids)
    if dup_states:
        raise InvalidDefinitionError(f"Duplicate state ids: {', '.join(dup_states)}.")

    action_ids = [a.id for a in definition.actions]
    if any(not a.strip() for a in action_ids):
        raise InvalidDefinitionError("Action ids must not be empty.")
    dup_actions = _duplicates(action_ids)
    if dup_actions:
        raise InvalidDefinitionError(f"Duplicate action ids: {', '.join(dup_actions)}.")

    initial_count = sum(1 for s in definition.states if s.is_initial)
    if initial_count != 1:
        raise InvalidDefinitionError(
            f"Definition must have exactly one initial state (found {initial_count})."
        )

    known = definition.states_by_id
    for action in definition.actions:
        if not action.from_states:
            raise InvalidDefinitionError(
                f"Action '{action.id}' must list at least one source state."
            )
        unknown_from = sorted(s for s in action.from_states if s not in known)
        if unknown_from:
            raise InvalidDefinitionError(
                f"Action '{action.id}' references unknown source states: {', '.join(unknown_from)}."
            )
        if action.to_state not in known:
            raise InvalidDefinitionError(
                f"Action '{action.id}' targets unknown state '{action.to_state}'."
            )


class DefinitionStore:
    """Holds accepted definitions keyed by id.

    Conflict detection, validation and insertion happen under a single lock, so a
    rejected definition is never observable and concurrent creates with the same id
    have exactly one winner.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._definitions: dict[str, WorkflowDefinition] = {}

    def create(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        with self._lock:
            if definition.id in self._definitions:
                logger.warning(
                    "Definition rejected",
                    extra={"definition_id": definition.id, "kind": ConflictError.kind},
                )
                raise ConflictError(f"Definition with ID '{definition.id}' already exists.")

            try:
                validate_definition(definition)
            except InvalidDefinitionError as e:
                logger.warning(
                    "Definition rejected",
                    extra={"definition_id": definition.id, "kind": e.kind, "reason": e.message},
                )
                raise

            self._definitions[definition.id] = definition

        logger.info(
            "Definition created",
            extra={
                "definition_id": definition.id,
                "states": len(definition.states),
                "actions": len(definition.actions),
            },
        )
        return definition

    def find(self, definition_id: str) -> WorkflowDefinition | None:
        with self._lock:
            return self._definitions.get(definition_id)

    def get(self, definition_id: str) -> WorkflowDefinition:
        definition = self.find(definition_id)
        if definition is None:
            raise NotFoundError(f"Definition with ID '{definition_id}' not found.")
        return definition

    def list(self) -> list[WorkflowDefinition]:
        with self._lock:
            return list(self._definitions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, definition_id: object) -> bool:
        with self._lock:
            return definition_id in self._definitions

"""Running workflow instances and the transition rule applied to them."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.errors import (
    IllegalTransitionError,
    InconsistentStateError,
    NotFoundError,
    TerminalStateViolationError,
    UnknownActionError,
)
from workflow_engine.engine.models import InstanceSnapshot, WorkflowInstance

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class InstanceEngine:
    """Creates instances against stored definitions and executes actions on them.

    Each instance has its own lock: ``execute`` calls against one instance are
    serialized, calls against different instances never contend with each other.
    The instance map lock only guards inserts and lookups.
    """

    def __init__(self, definitions: DefinitionStore, *, clock: Clock = _utc_now) -> None:
        self._definitions = definitions
        self._clock = clock
        self._lock = threading.Lock()
        self._instances: dict[uuid.UUID, WorkflowInstance] = {}

    def _find(self, instance_id: uuid.UUID) -> WorkflowInstance | None:
        with self._lock:
            return self._instances.get(instance_id)

    def _require(self, instance_id: uuid.UUID) -> WorkflowInstance:
        instance = self._find(instance_id)
        if instance is None:
            raise NotFoundError(f"Instance with ID '{instance_id}' not found.")
        return instance

    def start(self, definition_id: str) -> InstanceSnapshot:
        definition = self._definitions.find(definition_id)
        if definition is None:
            logger.warning(
                "Instance start rejected",
                extra={"definition_id": definition_id, "kind": NotFoundError.kind},
            )
            raise NotFoundError(
                f"Definition with ID '{definition_id}' not found to start an instance."
            )

        instance = WorkflowInstance.start(
            definition_id=definition.id,
            initial_state_id=definition.initial_state.id,
            at=self._clock(),
        )
        # Snapshot before publishing; once in the map, other threads may mutate it.
        snapshot = instance.snapshot()
        with self._lock:
            self._instances[instance.id] = instance

        logger.info(
            "Instance started",
            extra={
                "definition_id": definition.id,
                "instance_id": str(instance.id),
                "state": snapshot.current_state_id,
            },
        )
        return snapshot

    def get(self, instance_id: uuid.UUID) -> InstanceSnapshot:
        instance = self._require(instance_id)
        with instance.lock:
            return instance.snapshot()

    def list(self, *, definition_id: str | None = None) -> list[InstanceSnapshot]:
        with self._lock:
            instances = list(self._instances.values())
        out: list[InstanceSnapshot] = []
        for instance in instances:
            if definition_id is not None and instance.definition_id != definition_id:
                continue
            with instance.lock:
                out.append(instance.snapshot())
        return out

    def _allowed_from(self, definition_id: str, current: str) -> list[str]:
        definition = self._definitions.find(definition_id)
        if definition is None:
            return []
        state = definition.state(current)
        if state is None or state.is_final:
            return []
        return [a.id for a in definition.actions if current in a.from_states]

    def available_actions(self, instance_id: uuid.UUID) -> list[str]:
        """Ids of the actions that may currently be executed on the instance."""

        return self.describe(instance_id)[1]

    def describe(self, instance_id: uuid.UUID) -> tuple[InstanceSnapshot, list[str]]:
        """Snapshot and available action ids, both read under the instance lock."""

        instance = self._require(instance_id)
        with instance.lock:
            snapshot = instance.snapshot()
            actions = self._allowed_from(instance.definition_id, snapshot.current_state_id)
        return snapshot, actions

    def execute(self, instance_id: uuid.UUID, action_id: str) -> InstanceSnapshot:
        """Apply ``action_id`` to the instance.

        Checks run in a fixed order and the first failure wins. Nothing is mutated
        unless every check passes.

        Raises:
            NotFoundError: unknown instance, or its definition is missing.
            InconsistentStateError: current or target state is not in the definition.
            TerminalStateViolationError: the instance is in a final state.
            UnknownActionError: the definition has no such action.
            IllegalTransitionError: the action is not allowed from the current state.
        """

        instance = self._require(instance_id)

        definition = self._definitions.find(instance.definition_id)
        if definition is None:
            raise NotFoundError(
                f"Definition with ID '{instance.definition_id}' not found for the instance."
            )

        with instance.lock:
            current_id = instance.current_state_id
            try:
                current = definition.state(current_id)
                if current is None:
                    raise InconsistentStateError(
                        f"Instance '{instance.id}' is in an unknown state '{current_id}'."
                    )

                if current.is_final:
                    raise TerminalStateViolationError(
                        f"Cannot execute actions on an instance in final state '{current_id}'."
                    )

                action = definition.action(action_id)
                if action is None:
                    raise UnknownActionError(
                        f"Action '{action_id}' not found in workflow definition '{definition.id}'."
                    )

                if current_id not in action.from_states:
                    raise IllegalTransitionError(
                        f"Action '{action_id}' cannot be executed from the current state "
                        f"'{current_id}'."
                    )

                if definition.state(action.to_state) is None:
                    raise InconsistentStateError(
                        f"Action '{action_id}' targets an unknown state '{action.to_state}'."
                    )
            except (
                InconsistentStateError,
                TerminalStateViolationError,
                UnknownActionError,
                IllegalTransitionError,
            ) as e:
                logger.warning(
                    "Action rejected",
                    extra={
                        "instance_id": str(instance.id),
                        "action_id": action_id,
                        "from_state": current_id,
                        "kind": e.kind,
                    },
                )
                raise

            instance.move_to(action_id=action.id, state_id=action.to_state, at=self._clock())
            snapshot = instance.snapshot()

        logger.info(
            "Action executed",
            extra={
                "instance_id": str(instance.id),
                "action_id": action.id,
                "from_state": current_id,
                "to_state": snapshot.current_state_id,
            },
        )
        return snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

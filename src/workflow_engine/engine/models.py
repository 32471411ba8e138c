"""Domain types for workflow definitions and running instances.

Definitions (and their states and actions) are immutable values. Instances are
the only mutable records, and they only change through :meth:`WorkflowInstance.move_to`,
which callers must invoke while holding the instance lock.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from workflow_engine.engine.errors import InconsistentStateError

INSTANCE_STARTED = "Instance Started"


@dataclass(frozen=True, slots=True)
class State:
    """A named state within a definition.

    ``enabled`` is carried for clients that want it but never consulted by the engine.
    """

    id: str
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class Action:
    """A transition rule: allowed source states and a single target state."""

    id: str
    from_states: frozenset[str]
    to_state: str
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.from_states, frozenset):
            object.__setattr__(self, "from_states", frozenset(self.from_states))


@dataclass(frozen=True, slots=True)
class WorkflowDefinition:
    id: str
    states: tuple[State, ...]
    actions: tuple[Action, ...]

    _states_by_id: Mapping[str, State] = field(init=False, repr=False, compare=False)
    _actions_by_id: Mapping[str, Action] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        states = tuple(self.states)
        actions = tuple(self.actions)
        object.__setattr__(self, "states", states)
        object.__setattr__(self, "actions", actions)
        object.__setattr__(self, "_states_by_id", MappingProxyType({s.id: s for s in states}))
        object.__setattr__(self, "_actions_by_id", MappingProxyType({a.id: a for a in actions}))

    @classmethod
    def build(
        cls, definition_id: str, *, states: Iterable[State], actions: Iterable[Action] = ()
    ) -> WorkflowDefinition:
        return cls(id=definition_id, states=tuple(states), actions=tuple(actions))

    @property
    def states_by_id(self) -> Mapping[str, State]:
        return self._states_by_id

    def state(self, state_id: str) -> State | None:
        return self._states_by_id.get(state_id)

    def action(self, action_id: str) -> Action | None:
        return self._actions_by_id.get(action_id)

    @property
    def initial_state(self) -> State:
        initial = [s for s in self.states if s.is_initial]
        if len(initial) != 1:
            raise InconsistentStateError(
                f"Definition '{self.id}' has {len(initial)} initial states; expected exactly one."
            )
        return initial[0]


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    action_id: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class InstanceSnapshot:
    """A consistent, read-only view of an instance at one point in time."""

    id: uuid.UUID
    definition_id: str
    current_state_id: str
    history: tuple[HistoryEntry, ...]


@dataclass(slots=True)
class WorkflowInstance:
    """A single running execution of a definition.

    The instance holds the definition id only; the definition itself is always looked
    up from the store.
    """

    definition_id: str
    current_state_id: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    history: list[HistoryEntry] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def start(cls, *, definition_id: str, initial_state_id: str, at: datetime) -> WorkflowInstance:
        instance = cls(definition_id=definition_id, current_state_id=initial_state_id)
        instance.history.append(HistoryEntry(action_id=INSTANCE_STARTED, timestamp=at))
        return instance

    def move_to(self, *, action_id: str, state_id: str, at: datetime) -> None:
        # History timestamps never go backwards, even if the wall clock does.
        if self.history and at < self.history[-1].timestamp:
            at = self.history[-1].timestamp
        self.current_state_id = state_id
        self.history.append(HistoryEntry(action_id=action_id, timestamp=at))

    def snapshot(self) -> InstanceSnapshot:
        return InstanceSnapshot(
            id=self.id,
            definition_id=self.definition_id,
            current_state_id=self.current_state_id,
            history=tuple(self.history),
        )

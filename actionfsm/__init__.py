"""actionfsm: an embeddable finite state machine driven by per-state actions.

Each state registers one action deciding where an event leads. Hooks keyed by
``(from, to)`` transitions, with ``ANY`` wildcards on either side, run
concurrently after a transition is decided and before it is committed.

Logging goes through the ``actionfsm`` logger, silent unless the application
configures logging.
"""

import logging

from actionfsm.core.errors import (
    ActionNotFoundError,
    ContextCancelledError,
    ContextValueError,
    EventNotFoundError,
    ExecutorStoppedError,
    FSMError,
    InvalidInitialStateError,
    NotInitializedError,
    StateNotFoundError,
    TransitionError,
)
from actionfsm.core.events import event_from_context, with_event
from actionfsm.core.state_machine import StateMachine
from actionfsm.core.states import state_from_context, with_state
from actionfsm.core.transitions import ANY, Exact, TransitionKey
from actionfsm.interfaces.types import ActionFunc, Event, State, TransitionHook
from actionfsm.runtime.async_support import AsyncStateMachine
from actionfsm.runtime.context import CancelScope, Context, EventContext, FsmContext
from actionfsm.runtime.executor import Executor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Engine
    "StateMachine",
    "AsyncStateMachine",
    "Executor",
    # Identifiers and keys
    "State",
    "Event",
    "ActionFunc",
    "TransitionHook",
    "ANY",
    "Exact",
    "TransitionKey",
    # Contexts
    "CancelScope",
    "Context",
    "EventContext",
    "FsmContext",
    "with_event",
    "event_from_context",
    "with_state",
    "state_from_context",
    # Errors
    "FSMError",
    "ActionNotFoundError",
    "InvalidInitialStateError",
    "ContextCancelledError",
    "ContextValueError",
    "EventNotFoundError",
    "StateNotFoundError",
    "TransitionError",
    "NotInitializedError",
    "ExecutorStoppedError",
]

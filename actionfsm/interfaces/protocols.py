# actionfsm/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Optional, Protocol, runtime_checkable

from actionfsm.interfaces.types import ActionResult, State
from actionfsm.runtime.context import EventContext, FsmContext


@runtime_checkable
class Action(Protocol):
    """
    Action protocol for type checking.

    An action decides the next state for the state it is registered under.

    Runtime Invariants:
    - Called at most once per ``process_event``.
    - May have external side effects; it is never retried by the engine.

    Error Handling:
    - Any exception raised propagates to the caller of ``process_event``
      unchanged, and the machine keeps its current state.
    """

    def __call__(self, event_ctx: EventContext, fsm_ctx: FsmContext) -> ActionResult:
        """Return ``(next_state, new_fsm_context_or_None)``."""
        ...


@runtime_checkable
class PostTransitionHook(Protocol):
    """
    Post-transition hook protocol for type checking.

    Runtime Invariants:
    - Receives the decided, not yet committed, next state and context by value.
    - Must not touch the machine itself.

    Error Handling:
    - Raised (or returned) exceptions are logged and never abort the transition.
    """

    def __call__(self, source: State, target: State, fsm_ctx: FsmContext) -> Optional[Any]: ...

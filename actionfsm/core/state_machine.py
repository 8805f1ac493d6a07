# actionfsm/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from actionfsm.core.actions import ActionRegistry
from actionfsm.core.errors import ActionNotFoundError, InvalidInitialStateError, NotInitializedError, TransitionError
from actionfsm.core.events import with_event
from actionfsm.core.hooks import HookRegistry
from actionfsm.core.states import with_state
from actionfsm.interfaces.types import ActionFunc, Event, State, TransitionHook
from actionfsm.runtime.concurrency import HookDispatcher
from actionfsm.runtime.context import CancelScope, Context, EventContext, FsmContext, ensure_context, first_error

_logger = logging.getLogger(__name__)


class StateMachine:
    """
    A finite state machine driven by per-state actions.

    Each registered state owns one action which, given the event context and
    the machine's FSM context, decides the next state. Post-transition hooks
    registered for the matching ``(from, to)`` keys run concurrently before the
    new state is committed.

    ``process_event`` is not safe for concurrent use on one instance; callers
    must serialize it (see ``actionfsm.runtime.executor.Executor``).
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        """
        :param logger: Optional logger; defaults to this module's logger, which
            stays silent unless the application configures logging.
        """
        self._logger = logger or _logger
        self._actions = ActionRegistry()
        self._hooks = HookRegistry()
        self._dispatcher = HookDispatcher(self._logger)

        self._state: Optional[State] = None
        self._initial_state: Optional[State] = None
        self._ctx: Optional[FsmContext] = None
        self._scope: Optional[CancelScope] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_logger(self, logger: logging.Logger) -> "StateMachine":
        """Replace the logger used by the machine and its hook dispatcher."""
        self._logger = logger
        self._dispatcher.logger = logger
        return self

    def when(self, state: State, action: Optional[ActionFunc]) -> "StateMachine":
        """
        Register the action deciding transitions out of ``state``. A later call
        for the same state replaces the earlier action.
        """
        self._actions.register(state, action)
        self._logger.debug("Added an action function for state [%s]", state)
        return self

    def register_post_transition(self, source: Any, target: Any, hook: TransitionHook) -> "StateMachine":
        """
        Add a hook run after a ``source -> target`` transition is decided and
        before it is committed. Either side may be ``ANY``.
        """
        self._hooks.register(source, target, hook)
        self._logger.debug("Added a post transition function for [%s] -> [%s]", source, target)
        return self

    def exists(self, state: State) -> bool:
        return self._actions.exists(state)

    def states(self) -> List[State]:
        return self._actions.states()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_with_state(self, state: State) -> "StateMachine":
        """
        Start the machine in ``state`` with a fresh, cancellable FSM context.
        Calling it again abandons the previous context without cancelling it.

        :raises InvalidInitialStateError: if ``state`` was never registered.
        """
        if not self._actions.exists(state):
            raise InvalidInitialStateError(state)

        self._scope = CancelScope()
        self._ctx = FsmContext(scope=self._scope)
        self._state = self._initial_state = state
        self._logger.info("Init FSM with state: %s", state)
        return self

    def close(self) -> None:
        """
        Cancel the running context. Every later ``process_event`` fails with
        ``ContextCancelledError``; hooks already running are left to finish.
        """
        if self._scope is None:
            return
        self._scope.cancel()
        self._logger.info("FSM has closed")

    def reset(self) -> "StateMachine":
        """Close the machine and start it again in its initial state."""
        self._require_initialized()
        self.close()
        self.init_with_state(self._initial_state)
        self._logger.info("FSM has reset")
        return self

    @property
    def current_state(self) -> Optional[State]:
        return self._state

    @property
    def initial_state(self) -> Optional[State]:
        return self._initial_state

    @property
    def context(self) -> Optional[FsmContext]:
        """The FSM context carried into the next transition."""
        return self._ctx

    @property
    def is_initialized(self) -> bool:
        return self._scope is not None

    @property
    def is_closed(self) -> bool:
        return self._scope is not None and self._scope.cancelled

    # ------------------------------------------------------------------
    # Event processing
    # ------------------------------------------------------------------

    def process_event(self, event: Event, ctx: Optional[Context] = None) -> None:
        """
        Run the current state's action for ``event`` and, if it picks a known
        state, run the matching hooks and commit the new state.

        Nothing is changed unless the whole call succeeds.

        :param event: The event token; stamped into the event context.
        :param ctx: Optional caller context; a background context if None.
        :raises ActionNotFoundError: no action for the current state, or the
            action chose an unknown state.
        :raises ContextCancelledError: the machine was closed or a context
            involved in the call was cancelled.
        :raises Exception: whatever the action itself raised.
        """
        action, event_ctx, fsm_ctx = self._begin(event, ctx)
        next_state, next_ctx = self._decide(action(event_ctx, fsm_ctx), event_ctx, fsm_ctx)
        hooks = self._hooks.resolve(self._state, next_state).all()
        self._dispatcher.dispatch(self._state, next_state, next_ctx, hooks)
        self._commit(next_state, next_ctx)

    def _require_initialized(self) -> None:
        if self._scope is None:
            raise NotInitializedError("state machine has not been initialized with a state")

    def _begin(self, event: Event, ctx: Optional[Context]) -> Tuple[ActionFunc, EventContext, FsmContext]:
        """Validate the call and build the contexts handed to the action."""
        self._require_initialized()
        self._logger.debug("Trying to handle [%s] event", event)
        event_ctx = with_event(ensure_context(ctx), event)

        action = self._actions.lookup(self._state)
        if action is None:
            self._logger.warning("Event [%s] for State [%s] processing failed", event, self._state)
            raise ActionNotFoundError(self._state)

        error = first_error(self._ctx, event_ctx)
        if error is not None:
            raise error

        return action, event_ctx, with_state(self._ctx, self._state)

    def _decide(self, result: Any, event_ctx: EventContext, fsm_ctx: FsmContext) -> Tuple[State, FsmContext]:
        """Check what the action returned and pick the context to carry forward."""
        if not isinstance(result, tuple) or len(result) != 2:
            raise TransitionError("action must return a (next_state, fsm_context) pair")
        next_state, next_ctx = result

        if next_ctx is None:
            next_ctx = fsm_ctx
        elif isinstance(next_ctx, Context):
            next_ctx = FsmContext.derive(next_ctx)
        else:
            raise TypeError(f"action returned {type(next_ctx).__name__} instead of a context")

        error = first_error(event_ctx, fsm_ctx, next_ctx)
        if error is not None:
            raise error

        if not self._actions.exists(next_state):
            self._logger.warning("State [%s] not found", next_state)
            raise ActionNotFoundError(next_state)

        return next_state, next_ctx

    def _commit(self, next_state: State, next_ctx: FsmContext) -> None:
        previous, self._state, self._ctx = self._state, next_state, next_ctx
        self._logger.info("Transition [%s] -> [%s] committed", previous, next_state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self._state!r}, states={len(self._actions)}, hooks={len(self._hooks)})"

# actionfsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class FSMError(Exception):
    """
    Base exception class for errors raised by the state machine engine.
    """


class ActionNotFoundError(FSMError):
    """
    Raised when the current state has no action registered, or when an action
    picked a next state that was never registered with ``when``.

    The machine stays usable; the caller may retry with another event.
    """

    def __init__(self, state=None) -> None:
        self.state = state
        super().__init__("action not found")


class InvalidInitialStateError(FSMError):
    """
    Raised by ``init_with_state`` when the given state was never registered.
    """

    def __init__(self, state) -> None:
        self.state = state
        super().__init__(f"invalid initial state [{state}]")


class ContextCancelledError(FSMError):
    """
    Raised when a context (or one of its ancestors) has been cancelled.
    """

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class ContextValueError(FSMError, LookupError):
    """
    Raised when a well-known value cannot be read back from a context, either
    because it was never set or because it has an unexpected type.
    """


class EventNotFoundError(ContextValueError):
    """Raised when no event was stamped into an event context."""

    def __init__(self) -> None:
        super().__init__("can't extract event from context")


class StateNotFoundError(ContextValueError):
    """Raised when no state was stamped into an FSM context."""

    def __init__(self) -> None:
        super().__init__("can't extract state from context")


class TransitionError(FSMError):
    """
    Raised when an action returns something that is not a
    ``(next_state, fsm_context)`` pair.
    """


class NotInitializedError(FSMError):
    """
    Raised when events are processed before ``init_with_state`` succeeded.
    """


class ExecutorStoppedError(FSMError):
    """
    Raised when events are submitted to an executor that is not running.
    """

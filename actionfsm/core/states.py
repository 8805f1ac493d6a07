# actionfsm/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from actionfsm.core.errors import StateNotFoundError
from actionfsm.interfaces.types import State
from actionfsm.runtime.context import Context, FsmContext


class _StateKey:
    """Private context key holding the state a transition starts from."""


def with_state(ctx: Context, state: State) -> FsmContext:
    """Derive an FSM context from ``ctx`` carrying ``state``."""
    return FsmContext.derive(ctx).with_value(_StateKey, state)


def state_from_context(ctx: Context) -> State:
    """
    Read back the state stamped by ``with_state``. Actions use it to learn
    which state they are running for.

    :raises StateNotFoundError: if no state was stamped into ``ctx``.
    """
    try:
        return ctx.typed_value(_StateKey, object)
    except KeyError:
        raise StateNotFoundError() from None

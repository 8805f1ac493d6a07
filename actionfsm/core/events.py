# actionfsm/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from actionfsm.core.errors import EventNotFoundError
from actionfsm.interfaces.types import Event
from actionfsm.runtime.context import Context, EventContext


class _EventKey:
    """Private context key holding the event being processed."""


def with_event(ctx: Context, event: Event) -> EventContext:
    """
    Derive an event context from ``ctx`` with ``event`` stamped into it.
    The caller's context is left unchanged.
    """
    return EventContext.derive(ctx).with_value(_EventKey, event)


def event_from_context(ctx: Context) -> Event:
    """
    Read back the event stamped by ``with_event``.

    :raises EventNotFoundError: if no event was ever stamped into ``ctx``.
    """
    try:
        return ctx.typed_value(_EventKey, object)
    except KeyError:
        raise EventNotFoundError() from None

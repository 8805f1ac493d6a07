# tests/unit/test_async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
import logging
import threading

import pytest
import pytest_asyncio

from actionfsm.core.errors import ActionNotFoundError, ContextCancelledError
from actionfsm.core.events import event_from_context
from actionfsm.core.transitions import ANY
from actionfsm.runtime.async_support import AsyncStateMachine


async def async_goto_moving(event_ctx, fsm_ctx):
    await asyncio.sleep(0)
    if event_from_context(event_ctx) == "go":
        return "moving", fsm_ctx.with_value("speed", 3)
    return "idle", None


def sync_goto_idle(event_ctx, fsm_ctx):
    return ("idle" if event_from_context(event_ctx) == "stop" else "moving"), None


@pytest_asyncio.fixture
async def machine():
    """Async machine with one coroutine action and one plain action."""
    m = AsyncStateMachine().when("idle", async_goto_moving).when("moving", sync_goto_idle).init_with_state("idle")
    yield m
    m.close()


@pytest.mark.asyncio
async def test_async_action_transition(machine):
    await machine.process_event("go")
    assert machine.current_state == "moving"
    assert machine.context.value("speed") == 3


@pytest.mark.asyncio
async def test_sync_action_in_async_machine(machine):
    await machine.process_event("go")
    await machine.process_event("stop")
    assert machine.current_state == "idle"


@pytest.mark.asyncio
async def test_unknown_next_state(machine):
    machine.when("moving", lambda e, f: ("ghost", None))
    await machine.process_event("go")
    with pytest.raises(ActionNotFoundError):
        await machine.process_event("anything")
    assert machine.current_state == "moving"


@pytest.mark.asyncio
async def test_async_action_error_propagates(machine):
    async def failing(event_ctx, fsm_ctx):
        raise LookupError("no route")

    machine.when("idle", failing)
    with pytest.raises(LookupError, match="no route"):
        await machine.process_event("go")
    assert machine.current_state == "idle"


@pytest.mark.asyncio
async def test_mixed_hooks_all_run(machine):
    calls = []
    lock = threading.Lock()

    async def async_hook(source, target, fsm_ctx):
        await asyncio.sleep(0)
        calls.append(("async", source, target))

    def sync_hook(source, target, fsm_ctx):
        with lock:
            calls.append(("sync", source, target))

    machine.register_post_transition("idle", "moving", async_hook)
    machine.register_post_transition(ANY, ANY, sync_hook)
    machine.register_post_transition("moving", "idle", sync_hook)

    await machine.process_event("go")

    assert sorted(calls) == [("async", "idle", "moving"), ("sync", "idle", "moving")]


@pytest.mark.asyncio
async def test_plain_hook_returning_coroutine_is_awaited(machine, caplog):
    calls = []

    async def record(source, target, fsm_ctx):
        await asyncio.sleep(0)
        calls.append((source, target, fsm_ctx.value("speed")))

    async def refuse(source, target, fsm_ctx):
        return ValueError("refused late")

    machine.register_post_transition("idle", "moving", lambda s, t, c: record(s, t, c))
    machine.register_post_transition(ANY, ANY, lambda s, t, c: refuse(s, t, c))

    with caplog.at_level(logging.ERROR):
        await machine.process_event("go")

    assert calls == [("idle", "moving", 3)]
    assert machine.current_state == "moving"
    assert "refused late" in " ".join(r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_async_hooks_run_concurrently(machine):
    started = asyncio.Event()
    release = asyncio.Event()

    async def first(source, target, fsm_ctx):
        started.set()
        await asyncio.wait_for(release.wait(), timeout=5)

    async def second(source, target, fsm_ctx):
        await asyncio.wait_for(started.wait(), timeout=5)
        release.set()

    machine.register_post_transition(ANY, ANY, first).register_post_transition(ANY, ANY, second)
    await asyncio.wait_for(machine.process_event("go"), timeout=5)
    assert machine.current_state == "moving"


@pytest.mark.asyncio
async def test_hook_failures_logged_not_raised(machine, caplog):
    async def broken(source, target, fsm_ctx):
        raise RuntimeError("async hook exploded")

    def declined(source, target, fsm_ctx):
        return ValueError("sync hook declined")

    machine.register_post_transition(ANY, ANY, broken).register_post_transition(ANY, ANY, declined)

    with caplog.at_level(logging.ERROR):
        await machine.process_event("go")

    assert machine.current_state == "moving"
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "async hook exploded" in messages
    assert "sync hook declined" in messages


@pytest.mark.asyncio
async def test_closed_machine_rejects_events(machine):
    machine.close()
    with pytest.raises(ContextCancelledError):
        await machine.process_event("go")


@pytest.mark.asyncio
async def test_reset(machine):
    await machine.process_event("go")
    machine.reset()
    assert machine.current_state == "idle"
    assert machine.context.value("speed") is None

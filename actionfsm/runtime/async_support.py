# actionfsm/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
from typing import Any, List, Optional, Sequence

from actionfsm.core.state_machine import StateMachine
from actionfsm.interfaces.types import Event, State, TransitionHook
from actionfsm.runtime.concurrency import HookFailure, log_hook_failure
from actionfsm.runtime.context import Context, FsmContext


def _is_async(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


class AsyncStateMachine(StateMachine):
    """
    Asynchronous version of the state machine.

    Actions may be plain callables or coroutine functions. Hooks matching a
    transition are gathered on the running loop; plain hooks are pushed to
    worker threads so they cannot block it. Like the synchronous machine, a
    single instance must not process events concurrently.
    """

    async def process_event(self, event: Event, ctx: Optional[Context] = None) -> None:
        action, event_ctx, fsm_ctx = self._begin(event, ctx)

        result = action(event_ctx, fsm_ctx)
        if inspect.isawaitable(result):
            result = await result

        next_state, next_ctx = self._decide(result, event_ctx, fsm_ctx)
        hooks = self._hooks.resolve(self._state, next_state).all()
        await self._dispatch(self._state, next_state, next_ctx, hooks)
        self._commit(next_state, next_ctx)

    async def _dispatch(
        self,
        source: State,
        target: State,
        fsm_ctx: FsmContext,
        hooks: Sequence[TransitionHook],
    ) -> List[HookFailure]:
        """Run every hook concurrently and wait for all of them."""
        if not hooks:
            return []
        outcomes = await asyncio.gather(*(self._run_hook(hook, source, target, fsm_ctx) for hook in hooks))
        return [failure for failure in outcomes if failure is not None]

    async def _run_hook(
        self, hook: TransitionHook, source: State, target: State, fsm_ctx: FsmContext
    ) -> Optional[HookFailure]:
        try:
            if _is_async(hook):
                result = hook(source, target, fsm_ctx)
            else:
                result = await asyncio.to_thread(hook, source, target, fsm_ctx)
            # Plain callables may still hand back a coroutine.
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            error = e
        else:
            error = result if isinstance(result, Exception) else None

        if error is None:
            return None
        log_hook_failure(self._logger, source, target, error)
        return HookFailure(hook, error)

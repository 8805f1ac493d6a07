# actionfsm/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, List, NamedTuple, Optional, Sequence

from actionfsm.interfaces.types import State, TransitionHook
from actionfsm.runtime.context import FsmContext


@contextmanager
def with_lock(lock: threading.Lock):
    """
    A convenience context manager that acquires the given lock upon entry and
    releases it upon exit, ensuring safe access to shared resources.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()


class HookFailure(NamedTuple):
    hook: TransitionHook
    error: Exception


def call_hook(hook: TransitionHook, source: State, target: State, fsm_ctx: FsmContext) -> Optional[Exception]:
    """
    Run one hook and report its failure instead of raising it. A hook fails by
    raising or by returning an exception instance.
    """
    try:
        result = hook(source, target, fsm_ctx)
    except Exception as e:
        return e
    if isinstance(result, Exception):
        return result
    return None


def log_hook_failure(logger: Any, source: State, target: State, error: Exception) -> None:
    logger.error(
        "Transition function from state [%s] to state [%s] call error [%s]",
        source,
        target,
        error,
        exc_info=error if error.__traceback__ is not None else None,
    )


class HookDispatcher:
    """
    Fans post-transition hooks out onto worker threads and waits for all of
    them. Every hook gets its own thread; all threads share one join barrier.
    Hook failures are logged and collected, never raised.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def dispatch(
        self,
        source: State,
        target: State,
        fsm_ctx: FsmContext,
        hooks: Sequence[TransitionHook],
    ) -> List[HookFailure]:
        """
        Run ``hooks`` concurrently for ``source -> target`` and block until each
        one has returned. There is no timeout.

        :return: The hooks that failed, in completion order.
        """
        failures: List[HookFailure] = []
        if not hooks:
            return failures

        failures_lock = threading.Lock()

        def run(hook: TransitionHook) -> None:
            error = call_hook(hook, source, target, fsm_ctx)
            if error is None:
                return
            log_hook_failure(self.logger, source, target, error)
            with with_lock(failures_lock):
                failures.append(HookFailure(hook, error))

        threads = [
            threading.Thread(target=run, args=(hook,), name=f"fsm-hook-{index}", daemon=True)
            for index, hook in enumerate(hooks)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return failures

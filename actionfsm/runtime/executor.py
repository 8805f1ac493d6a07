# actionfsm/runtime/executor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
import logging
import queue
import threading
from concurrent.futures import Future
from typing import NamedTuple, Optional

from actionfsm.core.errors import ExecutorStoppedError
from actionfsm.core.state_machine import StateMachine
from actionfsm.interfaces.types import Event
from actionfsm.runtime.concurrency import with_lock
from actionfsm.runtime.context import Context

logger = logging.getLogger(__name__)


class _Job(NamedTuple):
    event: Event
    ctx: Optional[Context]
    future: Future


class Executor:
    """
    Runs events through one state machine on a single worker thread, so that
    any number of producer threads can submit events without racing on the
    machine's state.
    """

    def __init__(self, machine: StateMachine) -> None:
        """
        :param machine: A synchronous StateMachine. Use the event loop directly
            for an AsyncStateMachine.
        """
        if inspect.iscoroutinefunction(machine.process_event):
            raise TypeError("Executor requires a synchronous StateMachine")
        self.machine = machine
        self._queue: "queue.Queue[Optional[_Job]]" = queue.Queue()
        self._lock = threading.Lock()
        self._running = False
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> "Executor":
        """Start the worker thread. Starting a running executor does nothing."""
        with with_lock(self._lock):
            if self._running:
                return self
            self._running = True
            self._thread = threading.Thread(target=self._run, name="fsm-executor", daemon=True)
            self._thread.start()
        logger.debug("Executor started for %r", self.machine)
        return self

    def submit(self, event: Event, ctx: Optional[Context] = None) -> Future:
        """
        Queue ``event`` for processing.

        :return: A future resolved with None once the event has been processed,
            or with the exception ``process_event`` raised.
        :raises ExecutorStoppedError: if the executor is not running.
        """
        future: Future = Future()
        with with_lock(self._lock):
            if not self._running:
                raise ExecutorStoppedError("executor is not running")
            self._queue.put(_Job(event, ctx, future))
        return future

    def process(self, event: Event, ctx: Optional[Context] = None, timeout: Optional[float] = None) -> None:
        """Submit ``event`` and block until it has been processed."""
        self.submit(event, ctx).result(timeout=timeout)

    def stop(self, wait: bool = True) -> None:
        """
        Stop accepting events. Events already queued are still processed.

        :param wait: Block until the worker thread has drained the queue.
        """
        with with_lock(self._lock):
            if not self._running:
                return
            self._running = False
            self._queue.put(None)
            thread = self._thread
        if wait and thread is not None:
            thread.join()
        logger.debug("Executor stopped for %r", self.machine)

    def _run(self) -> None:
        try:
            while True:
                job = self._queue.get()
                if job is None:
                    break
                if not job.future.set_running_or_notify_cancel():
                    continue
                try:
                    self.machine.process_event(job.event, job.ctx)
                except BaseException as e:
                    # Non-Exception errors (e.g. CancelledError) belong to the job too.
                    job.future.set_exception(e)
                else:
                    job.future.set_result(None)
        finally:
            self._shutdown_worker()

    def _shutdown_worker(self) -> None:
        """Mark the executor stopped and fail whatever is still queued."""
        with with_lock(self._lock):
            if self._thread is not threading.current_thread():
                return
            self._running = False
        while True:
            try:
                job = self._queue.get_nowait()
            except queue.Empty:
                break
            if job is not None and job.future.set_running_or_notify_cancel():
                job.future.set_exception(ExecutorStoppedError("executor worker exited"))

    def __enter__(self) -> "Executor":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

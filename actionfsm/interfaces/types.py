# actionfsm/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple

if TYPE_CHECKING:
    from actionfsm.runtime.context import EventContext, FsmContext

State = str
Event = str

# Callback Types
ActionResult = Tuple[State, Optional["FsmContext"]]
ActionFunc = Callable[["EventContext", "FsmContext"], ActionResult]
TransitionHook = Callable[[State, State, "FsmContext"], Any]

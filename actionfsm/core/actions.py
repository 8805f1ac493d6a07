# actionfsm/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Dict, List, Optional

from actionfsm.interfaces.protocols import Action
from actionfsm.interfaces.types import ActionFunc, State


class ActionRegistry:
    """
    Maps each state to the single action deciding transitions out of it.

    A state is "known" as soon as it has been registered, even with an empty
    (``None``) action. There is no unregister operation.
    """

    def __init__(self) -> None:
        self._actions: Dict[State, Optional[ActionFunc]] = {}

    def register(self, state: State, action: Optional[Action]) -> "ActionRegistry":
        """
        Register ``action`` for ``state``, replacing any earlier one.

        :param state: The state the action belongs to.
        :param action: Callable ``(event_ctx, fsm_ctx) -> (next_state, fsm_ctx)``,
            or None to declare the state without behavior.
        """
        if action is not None and not isinstance(action, Action):
            raise TypeError(f"action for state [{state}] must be callable")
        self._actions[state] = action
        return self

    def exists(self, state: State) -> bool:
        return state in self._actions

    def lookup(self, state: State) -> Optional[ActionFunc]:
        """Return the action for ``state``; None if unknown or registered empty."""
        return self._actions.get(state)

    def states(self) -> List[State]:
        return list(self._actions)

    def __contains__(self, state: object) -> bool:
        return state in self._actions

    def __len__(self) -> int:
        return len(self._actions)

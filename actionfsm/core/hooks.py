# actionfsm/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple

from actionfsm.core.transitions import TransitionKey
from actionfsm.interfaces.protocols import PostTransitionHook
from actionfsm.interfaces.types import State, TransitionHook


class HookBuckets(NamedTuple):
    """Hooks matching one concrete transition, grouped by key granularity."""

    exact_to_exact: List[TransitionHook]
    exact_to_any: List[TransitionHook]
    any_to_exact: List[TransitionHook]
    any_to_any: List[TransitionHook]

    def all(self) -> List[TransitionHook]:
        """Every matched hook, buckets in dispatch order."""
        return [hook for bucket in self for hook in bucket]


class HookRegistry:
    """
    Owns the mapping from transition keys to their ordered post-transition hooks.
    Hooks are appended in registration order and never removed.
    """

    def __init__(self) -> None:
        self._hooks: Dict[TransitionKey, List[TransitionHook]] = {}

    def register(self, source: Any, target: Any, hook: PostTransitionHook) -> "HookRegistry":
        """
        Append ``hook`` to the list for ``(source, target)``.

        :param source: A state or ``ANY``.
        :param target: A state or ``ANY``.
        :param hook: Callable ``(from_state, to_state, fsm_ctx)``.
        """
        if not isinstance(hook, PostTransitionHook):
            raise TypeError("post-transition hook must be callable")
        self._hooks.setdefault(TransitionKey.of(source, target), []).append(hook)
        return self

    def resolve(self, source: State, target: State) -> HookBuckets:
        """Collect the hooks of the four keys matching ``source -> target``."""
        return HookBuckets(*(list(self._hooks.get(key, ())) for key in TransitionKey.buckets(source, target)))

    def __len__(self) -> int:
        return sum(len(hooks) for hooks in self._hooks.values())

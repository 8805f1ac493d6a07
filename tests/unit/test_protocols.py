# tests/unit/test_protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from actionfsm.interfaces.protocols import Action, PostTransitionHook


class CountingAction:
    def __init__(self):
        self.calls = 0

    def __call__(self, event_ctx, fsm_ctx):
        self.calls += 1
        return "idle", None


def test_callables_satisfy_protocols():
    assert isinstance(CountingAction(), Action)
    assert isinstance(lambda source, target, ctx: None, PostTransitionHook)


def test_non_callables_do_not_satisfy_protocols():
    assert not isinstance("idle", Action)
    assert not isinstance(None, PostTransitionHook)


def test_callable_object_as_action():
    from actionfsm.core.state_machine import StateMachine

    action = CountingAction()
    StateMachine().when("idle", action).init_with_state("idle").process_event("go")
    assert action.calls == 1


def test_registries_validate_against_protocols():
    from actionfsm.core.actions import ActionRegistry
    from actionfsm.core.hooks import HookRegistry

    action, hook = CountingAction(), lambda source, target, ctx: None
    assert ActionRegistry().register("idle", action).lookup("idle") is action
    assert HookRegistry().register("idle", "next", hook).resolve("idle", "next").all() == [hook]

    with pytest.raises(TypeError):
        ActionRegistry().register("idle", 42)
    with pytest.raises(TypeError):
        HookRegistry().register("idle", "next", "hook")

# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock

import pytest


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


def stay(next_state):
    """Build an action that always returns ``next_state`` and no new context."""

    def _action(event_ctx, fsm_ctx):
        return next_state, None

    return _action


@pytest.fixture
def goto():
    """Factory for actions that always pick the same next state."""
    return stay


@pytest.fixture
def logger():
    """A dedicated logger so tests can capture engine output with caplog."""
    log = logging.getLogger("actionfsm.test")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def machine_factory(logger):
    """Returns a factory building an idle -> next -> idle machine."""
    from actionfsm.core.state_machine import StateMachine

    def _factory(initial="idle"):
        return StateMachine(logger=logger).when("idle", stay("next")).when("next", stay("idle")).init_with_state(initial)

    return _factory


@pytest.fixture
def mock_hook():
    """A hook mock returning nothing (success)."""
    return MagicMock(return_value=None)


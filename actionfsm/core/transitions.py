# actionfsm/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

from actionfsm.interfaces.types import State


class _AnyState:
    """
    Wildcard endpoint matching every state. There is a single instance, ``ANY``;
    it never compares equal to a real state, including the string ``"*"``.
    """

    _instance = None

    def __new__(cls) -> "_AnyState":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ANY"

    def __reduce__(self):
        return (_AnyState, ())


ANY = _AnyState()


@dataclass(frozen=True)
class Exact:
    """Endpoint naming one concrete state."""

    state: State

    def __repr__(self) -> str:
        return f"Exact({self.state!r})"


Endpoint = Union[Exact, _AnyState]


def endpoint(value: Any) -> Endpoint:
    """Normalize a state or wildcard into an endpoint."""
    if value is ANY or isinstance(value, Exact):
        return value
    return Exact(value)


@dataclass(frozen=True)
class TransitionKey:
    """
    A ``(source, target)`` pair of endpoints used to index post-transition hooks.
    """

    source: Endpoint
    target: Endpoint

    @classmethod
    def of(cls, source: Any, target: Any) -> "TransitionKey":
        return cls(endpoint(source), endpoint(target))

    @classmethod
    def buckets(cls, source: State, target: State) -> Tuple["TransitionKey", ...]:
        """
        The four keys matching a concrete ``source -> target`` transition, in
        dispatch order: exact to exact, exact to any, any to exact, any to any.
        """
        src, dst = Exact(source), Exact(target)
        return (cls(src, dst), cls(src, ANY), cls(ANY, dst), cls(ANY, ANY))

    def __str__(self) -> str:
        return f"{_label(self.source)} -> {_label(self.target)}"


def _label(end: Endpoint) -> str:
    return "*" if end is ANY else str(end.state)

"""
State container shared by the view coordinators.

A coordinator holds the current state of its view and replaces it only
through :meth:`Coordinator._apply`, which runs a transition function
from :mod:`student_directory.app.coordinators.state`.  Front-ends read
the result through :attr:`Coordinator.state`.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar


S = TypeVar("S")


class Coordinator(Generic[S]):
    """Base class holding one immutable view state."""

    def __init__(self, initial: S) -> None:
        self._state = initial

    @property
    def state(self) -> S:
        return self._state

    def _apply(self, transition: Callable[..., S], *args: Any) -> S:
        self._state = transition(self._state, *args)
        return self._state

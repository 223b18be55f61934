"""
Storefront Engine — Store

Holds the state tree and is the only way to change it.

dispatch() is synchronous: when it returns, the tree reflects the action and
every subscriber has seen it. Actions are reduced strictly one at a time in
dispatch order. A dispatch made by a subscriber or action listener while the
store is notifying is queued behind the current action; a dispatch made from
inside a reducer is a programming error and raises ReentrantDispatchError.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any, TypeVar

from storefront.engine.reducer import empty_state, reduce
from storefront.engine.types import Action, AppState

logger = logging.getLogger(__name__)

V = TypeVar("V")

Reducer = Callable[[AppState, Action], AppState]
StateListener = Callable[[AppState], None]
ActionListener = Callable[[Action, AppState], None]


class ReentrantDispatchError(RuntimeError):
    """dispatch() was called while a reducer was running."""


class Store:
    """
    The single owner of one AppState.

    State listeners are called with the new tree after every action that
    changed it. Action listeners (effects) are called with every action and
    the tree it produced, changed or not, after the state listeners.
    """

    def __init__(self, initial: AppState | None = None, reducer: Reducer = reduce) -> None:
        self._state = initial if initial is not None else empty_state()
        self._reducer = reducer
        self._listeners: list[StateListener] = []
        self._action_listeners: list[ActionListener] = []
        self._queue: deque[Action] = deque()
        self._reducing = False
        self._dispatching = False

    @property
    def state(self) -> AppState:
        return self._state

    def select(self, selector: Callable[[AppState], V]) -> V:
        return selector(self._state)

    # -- dispatch --

    def dispatch(self, action: Action) -> None:
        if self._reducing:
            raise ReentrantDispatchError(f"Cannot dispatch {action.type!r} from inside a reducer")

        self._queue.append(action)
        if self._dispatching:
            # Called from a listener: the outer dispatch drains the queue.
            return

        self._dispatching = True
        try:
            while self._queue:
                self._process(self._queue.popleft())
        finally:
            self._dispatching = False

    def _process(self, action: Action) -> None:
        logger.debug("dispatch %s", action.type)

        self._reducing = True
        try:
            next_state = self._reducer(self._state, action)
        finally:
            self._reducing = False

        changed = next_state is not self._state
        self._state = next_state

        if changed:
            for listener in list(self._listeners):
                listener(next_state)
        for action_listener in list(self._action_listeners):
            action_listener(action, next_state)

    # -- subscriptions --

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener. Returns a function that removes it."""
        self._listeners.append(listener)
        return _remover(self._listeners, listener)

    def add_action_listener(self, listener: ActionListener) -> Callable[[], None]:
        """Register an action listener. Returns a function that removes it."""
        self._action_listeners.append(listener)
        return _remover(self._action_listeners, listener)


def _remover(listeners: list[Any], listener: Any) -> Callable[[], None]:
    def remove() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return remove

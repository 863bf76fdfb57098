"""Current-value-plus-subscribe base for client stores."""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

S = TypeVar("S")

logger = logging.getLogger(__name__)

Listener = Callable[[S], None]


class ObservableStore(Generic[S]):
    """Hold an immutable state and notify listeners whenever it changes.

    The state is replaced as a whole by :meth:`_dispatch`, so a listener never
    observes a half-applied update.
    """

    def __init__(self, initial_state: S, reducer: Callable[[S, object], S]) -> None:
        self._state = initial_state
        self._reducer = reducer
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return the callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _dispatch(self, action: object) -> bool:
        """Apply ``action``; return whether the state changed."""

        new_state = self._reducer(self._state, action)
        if new_state is self._state:
            return False
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:  # pragma: no cover - listener bug
                logger.exception("Store listener %r failed", listener)
        return True


__all__ = ["ObservableStore"]

from __future__ import annotations
from typing import Callable, List

Listener = Callable[[object], None]


class Observable:
    """Synchronous publish/subscribe: listeners run in subscription order before the mutation returns."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

"""Explicit event channel between the session and its listeners."""

from __future__ import annotations

from typing import Callable

from sokoban.sim.contracts import Event

EventListener = Callable[[Event], None]


class EventBus:
    """Fan events out to every subscriber in subscription order."""

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, event: Event) -> None:
        for listener in list(self._listeners):
            listener(event)

    def publish_all(self, events: list[Event]) -> None:
        for event in events:
            self.publish(event)

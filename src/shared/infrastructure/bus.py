"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

from shared.domain.bus import Event, IEventBus, IEventHandler


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously, in subscription order, inside
    ``publish``.  Mutable events are therefore fully processed by
    every observer before the publisher reads them back.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[Event], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[Event], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[Event], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            handler.handle(event)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()

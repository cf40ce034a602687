"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Generic, Protocol, Type, TypeVar, Union

from shared.domain.events import DomainEvent, MutableDomainEvent

Event = Union[DomainEvent, MutableDomainEvent]

E = TypeVar("E", bound=Event, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Handler interface for domain events."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Event bus interface."""

    def publish(self, event: Event) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...

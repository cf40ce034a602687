"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    ``aggregate_id`` is the integer primary key of the aggregate root
    that raised the event (e.g. the order id).
    """

    aggregate_id: int
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


@dataclass
class MutableDomainEvent:
    """Base for notifications whose observers may change the payload.

    Publishers read the fields back once ``publish`` returns, so every
    handler sees the changes made by the handlers subscribed before it.
    """

    aggregate_id: int
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.event_name = self.__class__.__name__

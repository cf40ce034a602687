"""Unit tests for the in-memory event bus and domain event base classes."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass

import pytest

from shared.domain.events import DomainEvent, MutableDomainEvent
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@dataclass(frozen=True, kw_only=True)
class SomethingHappened(DomainEvent):
    detail: str = ""


@dataclass(kw_only=True)
class Collecting(MutableDomainEvent):
    seen: str = ""


class Recorder:
    def __init__(self, label: str, log: list) -> None:
        self.label = label
        self.log = log

    def handle(self, event) -> None:
        self.log.append((self.label, event))


def test_domain_event_defaults():
    event = SomethingHappened(aggregate_id=42, detail="x")

    assert event.event_name == "SomethingHappened"
    assert event.event_id is not None
    assert event.occurred_on is not None
    with pytest.raises(FrozenInstanceError):
        event.detail = "y"


def test_routes_events_by_type_in_subscription_order():
    bus = InMemoryEventBus()
    log: list = []
    first, second = Recorder("first", log), Recorder("second", log)
    bus.subscribe(SomethingHappened, first)
    bus.subscribe(SomethingHappened, second)
    bus.subscribe(SomethingHappened, first)

    event = SomethingHappened(aggregate_id=1)
    bus.publish(event)
    bus.publish(Collecting(aggregate_id=1))

    assert log == [("first", event), ("second", event)]


def test_unsubscribe_stops_delivery():
    bus = InMemoryEventBus()
    log: list = []
    recorder = Recorder("r", log)
    bus.subscribe(SomethingHappened, recorder)
    bus.unsubscribe(SomethingHappened, recorder)

    bus.publish(SomethingHappened(aggregate_id=1))

    assert log == []


def test_mutable_event_changes_are_visible_after_publish():
    bus = InMemoryEventBus()

    class Appender:
        def __init__(self, text: str) -> None:
            self.text = text

        def handle(self, event: Collecting) -> None:
            event.seen += self.text

    bus.subscribe(Collecting, Appender("a"))
    bus.subscribe(Collecting, Appender("b"))

    event = Collecting(aggregate_id=1)
    bus.publish(event)

    assert event.seen == "ab"
    assert event.event_name == "Collecting"

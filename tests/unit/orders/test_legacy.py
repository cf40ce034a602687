"""Unit tests for the legacy ``update_orders_history`` adapter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from modules.core.context import RequestContext
from modules.orders.constants import (
    LEGACY_NO_CHANGE,
    LEGACY_ORDER_NOT_FOUND,
    LEGACY_UPDATE_FAILED,
)
from modules.orders.events import OrderHistoryPreEmail, OrderHistoryStatusValues
from modules.orders.handlers import ExtraEmailOverrides
from modules.orders.legacy import LegacyOrderHistoryService
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit

ADMIN = RequestContext.for_admin(1)
STATUS_NAMES = {1: "Pending", 2: "Processing"}


@dataclass
class StubOrder:
    pk: int
    status: int
    customer_name: str = "Jane Doe"
    customer_email: str = "jane@example.com"
    date_purchased: datetime = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def order_repo():
    repo = MagicMock()
    repo.get_by_id.return_value = StubOrder(pk=42, status=1)
    repo.get_status_name.side_effect = lambda status_id, language_id: STATUS_NAMES.get(
        status_id
    )
    return repo


@pytest.fixture()
def updater():
    service = MagicMock()
    service.update_status_history.return_value = 11
    return service


@pytest.fixture()
def bus():
    return InMemoryEventBus()


@pytest.fixture()
def overrides():
    return ExtraEmailOverrides()


@pytest.fixture()
def legacy(updater, order_repo, bus, overrides):
    return LegacyOrderHistoryService(
        updater, order_repo, event_bus=bus, overrides=overrides
    )


def _updater_kwargs(updater) -> dict:
    return updater.update_status_history.call_args.kwargs


class TestGuards:
    def test_missing_order_returns_minus_two(self, legacy, order_repo, updater):
        order_repo.get_by_id.return_value = None

        result = legacy.update_orders_history(
            7, "hello", status=2, notify_customer=1, context=ADMIN
        )

        assert result == LEGACY_ORDER_NOT_FOUND
        updater.update_status_history.assert_not_called()

    def test_no_status_change_and_no_message(self, legacy, updater):
        result = legacy.update_orders_history(
            42, "", status=-1, notify_customer=1, context=ADMIN
        )

        assert result == LEGACY_NO_CHANGE
        updater.update_status_history.assert_not_called()

    def test_same_status_and_no_message(self, legacy, updater):
        result = legacy.update_orders_history(
            42, None, status=1, notify_customer=1, context=ADMIN
        )

        assert result == LEGACY_NO_CHANGE
        updater.update_status_history.assert_not_called()

    def test_outside_admin_area_is_not_attempted(self, legacy, updater):
        result = legacy.update_orders_history(
            42, "hello", status=2, notify_customer=1, context=RequestContext.system()
        )

        assert result == LEGACY_NO_CHANGE
        updater.update_status_history.assert_not_called()

    @pytest.mark.parametrize("notify_customer", [0, -1, 3])
    def test_non_email_notify_is_not_attempted(self, legacy, updater, notify_customer):
        result = legacy.update_orders_history(
            42, "hello", status=2, notify_customer=notify_customer, context=ADMIN
        )

        assert result == LEGACY_NO_CHANGE
        updater.update_status_history.assert_not_called()


class TestDelegation:
    def test_status_change_delegates_with_default_email(self, legacy, updater):
        result = legacy.update_orders_history(
            42, "Shipped today", status=2, notify_customer=1, context=ADMIN
        )

        assert result == 11
        args = updater.update_status_history.call_args.args
        kwargs = _updater_kwargs(updater)
        assert args == (42, "Shipped today")
        assert kwargs["status_id"] == 2
        assert kwargs["notify"] == 1
        assert kwargs["email_subject"] == "Order Update #42"
        assert kwargs["updated_by"] is None
        assert kwargs["context"] is ADMIN

        text = kwargs["email_text"]
        assert text.startswith("Test Store Order Number: 42\n\n")
        assert "Detailed Invoice: https://shop.test/account/orders/42/" in text
        assert "Date Ordered: Monday 19 October, 2026" in text
        assert "The comments for your order are: \n\nShipped today" in text
        assert "<em>" not in text
        assert "Your order's status has been updated:" in text
        assert "Old status: Pending, New status: Processing" in text
        assert text.endswith("Please reply to this email if you have any questions.\n")

        html = kwargs["email_html"]
        assert html["EMAIL_CUSTOMERS_NAME"] == "Jane Doe"
        assert html["EMAIL_TEXT_ORDER_NUMBER"] == "Order Number: 42"
        assert html["EMAIL_TEXT_INVOICE_URL"] == (
            '<a href="https://shop.test/account/orders/42/">Detailed Invoice</a>'
        )
        assert html["EMAIL_TEXT_NEW_STATUS"] == "Processing"
        assert "<br />" in html["EMAIL_TEXT_STATUS_COMMENTS"]
        assert html["EMAIL_PAYPAL_TRANSID"] == ""

    def test_message_only_keeps_current_status(self, legacy, updater):
        legacy.update_orders_history(42, "Note", notify_customer=1, context=ADMIN)

        kwargs = _updater_kwargs(updater)
        assert kwargs["status_id"] == 1
        assert "Your order's status has not changed:" in kwargs["email_text"]
        assert "Current status:  Pending" in kwargs["email_text"]

    def test_unknown_status_name_renders_not_available(self, legacy, updater):
        legacy.update_orders_history(
            42, None, status=9, notify_customer=1, context=ADMIN
        )

        assert "New status: N/A" in _updater_kwargs(updater)["email_text"]

    def test_caller_subject_and_actor_are_passed_through(self, legacy, updater):
        legacy.update_orders_history(
            42,
            "hi",
            updated_by="import-job",
            notify_customer=1,
            email_subject="Custom subject",
            context=ADMIN,
        )

        kwargs = _updater_kwargs(updater)
        assert kwargs["email_subject"] == "Custom subject"
        assert kwargs["updated_by"] == "import-job"

    def test_message_excluded_from_email(self, legacy, updater, bus):
        seen = []

        class Spy:
            def handle(self, event) -> None:
                seen.append(event)

        bus.subscribe(OrderHistoryPreEmail, Spy())

        legacy.update_orders_history(
            42,
            "internal note",
            notify_customer=1,
            include_message_in_email=False,
            context=ADMIN,
        )

        assert seen == []
        kwargs = _updater_kwargs(updater)
        assert "internal note" not in kwargs["email_text"]
        assert kwargs["email_html"]["EMAIL_TEXT_STATUS_COMMENTS"] == ""

    def test_admins_only_code_is_passed_through(self, legacy, updater):
        legacy.update_orders_history(
            42, None, status=2, notify_customer=-2, context=ADMIN
        )

        assert _updater_kwargs(updater)["notify"] == -2

    def test_updater_failure_maps_to_zero(self, legacy, updater):
        updater.update_status_history.return_value = None

        result = legacy.update_orders_history(
            42, None, status=2, notify_customer=1, context=ADMIN
        )

        assert result == LEGACY_UPDATE_FAILED


class TestSideChannels:
    def test_additional_comments_are_appended(self, legacy, updater, bus):
        class Contributor:
            def handle(self, event: OrderHistoryPreEmail) -> None:
                event.append_comment("Tracking: XY123")

        bus.subscribe(OrderHistoryPreEmail, Contributor())

        legacy.update_orders_history(42, "Shipped", notify_customer=1, context=ADMIN)

        assert updater.update_status_history.call_args.args[1] == (
            "Shipped\n\nTracking: XY123"
        )

    def test_additional_comments_alone_trigger_update(self, legacy, updater, bus):
        class Contributor:
            def handle(self, event: OrderHistoryPreEmail) -> None:
                event.append_comment("Auto note")

        bus.subscribe(OrderHistoryPreEmail, Contributor())

        result = legacy.update_orders_history(42, None, notify_customer=1, context=ADMIN)

        assert result == 11
        assert updater.update_status_history.call_args.args[1] == "Auto note"

    def test_status_values_are_broadcast(self, legacy, bus):
        seen = []

        class Spy:
            def handle(self, event: OrderHistoryStatusValues) -> None:
                seen.append(event)

        bus.subscribe(OrderHistoryStatusValues, Spy())

        legacy.update_orders_history(42, None, status=2, context=ADMIN)

        assert len(seen) == 1
        assert (seen[0].aggregate_id, seen[0].old_status_id, seen[0].new_status_id) == (
            42,
            1,
            2,
        )

    def test_extra_email_override_registered_during_update(
        self, legacy, updater, overrides
    ):
        during = []
        updater.update_status_history.side_effect = lambda *a, **kw: (
            during.append(overrides.pop(42)) or 11
        )

        legacy.update_orders_history(
            42,
            None,
            status=2,
            notify_customer=1,
            extra_email_to="boss@example.com",
            context=ADMIN,
        )

        assert during == ["boss@example.com"]
        assert overrides.pop(42) is None

"""Event handlers for the order status history workflow."""

from __future__ import annotations

from typing import Dict, Optional

import structlog

from modules.orders.events import (
    BeforeSendExtraAdminEmails,
    OrderStatusHistoryUpdated,
    OrderStatusUpdated,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusUpdatedHandler(IEventHandler[OrderStatusUpdated]):
    def handle(self, event: OrderStatusUpdated) -> None:
        logger.info(
            "order.event.status_updated",
            order_id=event.aggregate_id,
            previous_status_id=event.previous_status_id,
            new_status_id=event.new_status_id,
            updated_by=event.updated_by,
        )


class OrderStatusHistoryUpdatedHandler(IEventHandler[OrderStatusHistoryUpdated]):
    def handle(self, event: OrderStatusHistoryUpdated) -> None:
        logger.info(
            "order.event.status_history_updated",
            order_id=event.aggregate_id,
            history_id=event.entry.history_id,
            status_id=event.entry.status_id,
            customer_notified=event.entry.customer_notified,
        )


class ExtraEmailOverrides:
    """Per-order destinations that replace the configured extra admin emails.

    Registered by the legacy update before it delegates, consumed once by
    ``ExtraEmailOverrideHandler`` while the extra emails are decided.
    """

    def __init__(self) -> None:
        self._destinations: Dict[int, str] = {}

    def register(self, order_id: int, send_to: str) -> None:
        self._destinations[order_id] = send_to

    def pop(self, order_id: int) -> Optional[str]:
        return self._destinations.pop(order_id, None)


class ExtraEmailOverrideHandler(IEventHandler[BeforeSendExtraAdminEmails]):
    """Forces extra admin emails to the destination registered for the order."""

    def __init__(self, overrides: ExtraEmailOverrides) -> None:
        self._overrides = overrides

    def handle(self, event: BeforeSendExtraAdminEmails) -> None:
        send_to = self._overrides.pop(event.aggregate_id)
        if not send_to:
            return
        event.send_extra = True
        event.send_extra_to = send_to
        logger.info("order.extra_email_overridden", order_id=event.aggregate_id)


extra_email_overrides = ExtraEmailOverrides()

order_status_updated_handler = OrderStatusUpdatedHandler()
order_status_history_updated_handler = OrderStatusHistoryUpdatedHandler()
extra_email_override_handler = ExtraEmailOverrideHandler(extra_email_overrides)

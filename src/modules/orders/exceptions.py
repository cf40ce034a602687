"""Order status history exceptions.

Raised inside the Service Layer while an update is being processed.
``OrderStatusHistoryService`` catches them at its public boundary,
logs them with a stack trace and returns the failure sentinel, so
callers only ever see the return value.
"""

from __future__ import annotations

from typing import Any, Dict


class OrderStatusHistoryError(Exception):
    """Base class for failures while updating the status history."""


class OrderNotFound(OrderStatusHistoryError):
    """The requested order does not exist."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found.")
        self.order_id = order_id


class UnknownStatus(OrderStatusHistoryError):
    """The requested status is not in the catalog for the language."""

    def __init__(self, status_id: int, language_id: int) -> None:
        super().__init__(
            f"Order status {status_id} does not exist for language {language_id}."
        )
        self.status_id = status_id
        self.language_id = language_id


class PersistenceError(OrderStatusHistoryError):
    """The status history record could not be written."""

    def __init__(self, payload: Dict[str, Any]) -> None:
        super().__init__("Order status history was not written.")
        self.payload = payload

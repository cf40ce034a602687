"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern: they return ``None`` instead
of raising, and the Service Layer decides how to translate a missing
entity.

No transaction spans the status write and the history insert: the
order status is authoritative once written.  The insert alone runs in
a savepoint so a failed write does not poison an enclosing transaction.
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.orders.events import StatusHistoryPayload
from modules.orders.models import Order, OrderStatus, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Order.objects.filter(id=id).first()
        except (TypeError, ValueError, ValidationError):
            return None

    def update_status(self, order: Order, status_id: int) -> None:
        order.status = status_id
        order.last_modified = timezone.now()
        order.save(update_fields=["status", "last_modified"])
        logger.info("order.status_written", order_id=order.pk, status_id=status_id)

    # ------------------------------------------------------------------
    # Status catalog
    # ------------------------------------------------------------------

    def status_exists(self, status_id: int, language_id: int) -> bool:
        return OrderStatus.objects.filter(
            status_id=status_id, language_id=language_id
        ).exists()

    def get_status_name(self, status_id: int, language_id: int) -> Optional[str]:
        return (
            OrderStatus.objects.filter(status_id=status_id, language_id=language_id)
            .values_list("name", flat=True)
            .first()
        )

    # ------------------------------------------------------------------
    # Status history
    # ------------------------------------------------------------------

    def get_latest_history_id(self, order_id: int, status_id: int) -> Optional[int]:
        return (
            OrderStatusHistory.objects.filter(order_id=order_id, status_id=status_id)
            .order_by("-created_at", "-id")
            .values_list("id", flat=True)
            .first()
        )

    def add_history(
        self, payload: StatusHistoryPayload
    ) -> Optional[StatusHistoryPayload]:
        try:
            with transaction.atomic():
                history = OrderStatusHistory(
                    order_id=payload.order_id,
                    status_id=payload.status_id,
                    updated_by=payload.updated_by,
                    customer_notified=payload.customer_notified,
                    comments=payload.comments,
                )
                history.save()
        except DatabaseError as exc:
            logger.warning(
                "order_status_history.insert_failed",
                order_id=payload.order_id,
                error=str(exc),
            )
            return None

        logger.info(
            "order_status_history.inserted",
            order_id=payload.order_id,
            history_id=history.pk,
            status_id=payload.status_id,
        )
        return payload.stored_as(history.pk, history.created_at)

    def get_history(self, history_id: int) -> Optional[OrderStatusHistory]:
        return OrderStatusHistory.objects.filter(pk=history_id).first()

    def list_history(self, order_id: int) -> List[OrderStatusHistory]:
        return list(
            OrderStatusHistory.objects.filter(order_id=order_id).order_by(
                "-created_at", "-id"
            )
        )

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def get_admin_name(self, admin_id: int) -> Optional[str]:
        User = get_user_model()
        return (
            User.objects.filter(pk=admin_id, is_staff=True)
            .values_list(User.USERNAME_FIELD, flat=True)
            .first()
        )

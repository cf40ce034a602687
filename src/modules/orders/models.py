"""Order, OrderStatus and OrderStatusHistory models.

Rules implemented here (the workflow itself lives in the service layer):
- An order always carries the id of its current status.
- The status catalog is keyed by ``(status_id, language_id)``; the same
  status id has one localized name per language.
- History records are append-only: they are created by
  ``OrderStatusHistoryService`` and never updated or deleted by it.
- ``comments`` is nullable: ``NULL`` means "no comment supplied" and is
  kept distinct from an empty string.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import UPDATED_BY_MAX_LENGTH, CustomerNotified


class Order(BaseModel):
    """Order aggregate root, as seen by the status workflow.

    ``last_modified`` is refreshed on every status write, even when the
    status does not change.
    """

    customer_name: models.CharField = models.CharField(max_length=255)
    customer_email: models.EmailField = models.EmailField(max_length=254)
    status: models.PositiveIntegerField = models.PositiveIntegerField(default=1)
    date_purchased: models.DateTimeField = models.DateTimeField(default=timezone.now)
    last_modified: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-date_purchased"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk} (status {self.status})"


class OrderStatus(models.Model):
    """Localized catalog entry for an order status."""

    status_id: models.PositiveIntegerField = models.PositiveIntegerField()
    language_id: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        default=1
    )
    name: models.CharField = models.CharField(max_length=32)

    class Meta:
        db_table = "orders_status"
        ordering = ["status_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["status_id", "language_id"],
                name="orders_status_id_language_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} [{self.status_id}/{self.language_id}]"


class OrderStatusHistory(BaseModel):
    """One recorded event in an order's status history.

    ``customer_notified`` controls what the customer sees:
    ``-1`` hidden, ``0`` visible without email, ``1`` visible and emailed.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    status_id: models.PositiveIntegerField = models.PositiveIntegerField()
    updated_by: models.CharField = models.CharField(
        max_length=UPDATED_BY_MAX_LENGTH, blank=True, default=""
    )
    customer_notified: models.SmallIntegerField = models.SmallIntegerField(
        choices=CustomerNotified.choices,
        default=CustomerNotified.HIDDEN,
    )
    comments: models.TextField = models.TextField(null=True, blank=True)  # noqa: DJ01

    class Meta:
        db_table = "orders_status_history"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["order", "status_id", "-created_at"],
                name="osh_order_status_created_idx",
            ),
        ]

    @property
    def is_visible_to_customer(self) -> bool:
        return self.customer_notified != CustomerNotified.HIDDEN

    def __str__(self) -> str:
        return f"Order #{self.order_id} -> {self.status_id} by {self.updated_by or '?'}"

"""Order status history URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import OrderStatusHistoryViewSet

status_history = OrderStatusHistoryViewSet.as_view({"get": "list", "post": "create"})

urlpatterns = [
    path(
        "orders/<int:order_id>/status-history/",
        status_history,
        name="order-status-history",
    ),
]

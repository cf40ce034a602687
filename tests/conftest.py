from __future__ import annotations

from datetime import datetime, timezone

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.orders.models import Order, OrderStatus

User = get_user_model()

DEFAULT_STATUSES = {1: "Pending", 2: "Processing", 3: "Delivered", 4: "Update"}


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def order_statuses():
    """Default status catalog for language 1."""
    return [
        OrderStatus.objects.create(status_id=status_id, language_id=1, name=name)
        for status_id, name in DEFAULT_STATUSES.items()
    ]


@pytest.fixture()
def order(order_statuses):
    return Order.objects.create(
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        status=1,
        date_purchased=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="admin", password="adminpass123", is_staff=True
    )


@pytest.fixture()
def customer_user():
    return User.objects.create_user(username="shopper", password="shopperpass123")

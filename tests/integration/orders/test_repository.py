"""Integration tests for OrderDjangoRepository.

Covers:
- Status catalog look-ups per language.
- add_history returns the stored payload (id and timestamp).
- Latest history look-up scoped to (order, status).
- Admin name resolution limited to staff users.
"""

from __future__ import annotations

import pytest

from modules.orders.constants import CustomerNotified
from modules.orders.events import StatusHistoryPayload
from modules.orders.models import OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


def _payload(order_id: int, status_id: int, comments=None) -> StatusHistoryPayload:
    return StatusHistoryPayload(
        order_id=order_id,
        status_id=status_id,
        updated_by="--",
        customer_notified=CustomerNotified.HIDDEN,
        comments=comments,
    )


class TestOrders:
    def test_get_by_id_missing(self, repo):
        assert repo.get_by_id(12345) is None

    def test_update_status_touches_last_modified(self, repo, order):
        repo.update_status(order, 1)

        order.refresh_from_db()
        assert order.status == 1
        assert order.last_modified is not None


class TestStatusCatalog:
    def test_status_exists_per_language(self, repo, order_statuses):
        assert repo.status_exists(2, 1) is True
        assert repo.status_exists(2, 2) is False
        assert repo.status_exists(99, 1) is False

    def test_get_status_name(self, repo, order_statuses):
        assert repo.get_status_name(3, 1) == "Delivered"
        assert repo.get_status_name(3, 2) is None


class TestHistory:
    def test_add_history_returns_stored_payload(self, repo, order):
        stored = repo.add_history(_payload(order.pk, 2, comments="hi"))

        row = OrderStatusHistory.objects.get(pk=stored.history_id)
        assert stored.created_at == row.created_at
        assert stored.comments == row.comments == "hi"

    def test_latest_history_id_is_scoped_to_status(self, repo, order):
        first = repo.add_history(_payload(order.pk, 1)).history_id
        second = repo.add_history(_payload(order.pk, 1)).history_id
        other = repo.add_history(_payload(order.pk, 2)).history_id

        assert repo.get_latest_history_id(order.pk, 1) == second
        assert repo.get_latest_history_id(order.pk, 2) == other
        assert repo.get_latest_history_id(order.pk, 3) is None
        assert [h.pk for h in repo.list_history(order.pk)] == [other, second, first]

    def test_get_history_missing(self, repo):
        assert repo.get_history(12345) is None


class TestIdentity:
    def test_admin_name(self, repo, admin_user):
        assert repo.get_admin_name(admin_user.pk) == "admin"

    def test_non_staff_user_is_not_an_admin(self, repo, customer_user):
        assert repo.get_admin_name(customer_user.pk) is None

from __future__ import annotations

import random
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.core.context import RequestContext
from modules.orders.models import Order, OrderStatus
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderStatusHistoryService

DEFAULT_STATUSES = [
    (1, "Pending"),
    (2, "Processing"),
    (3, "Delivered"),
    (4, "Update"),
]

SEED_CUSTOMERS = [
    ("Ana Souza", "ana@example.com"),
    ("Bruno Lima", "bruno@example.com"),
    ("Carla Mendes", "carla@example.com"),
]


class Command(BaseCommand):
    help = "Seed database with the order status catalog and sample orders."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        admin = self._seed_admin()
        statuses_created = self._seed_statuses()
        orders_created = self._seed_orders(admin.pk)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"statuses={statuses_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_admin(self):
        User = get_user_model()
        admin = User.objects.filter(username="admin").first()
        if admin is None:
            admin = User.objects.create_superuser("admin", password="admin123")
        return admin

    def _seed_statuses(self) -> int:
        self.stdout.write("Creating order statuses...")
        created = 0
        for status_id, name in DEFAULT_STATUSES:
            _, was_created = OrderStatus.objects.get_or_create(
                status_id=status_id,
                language_id=settings.DEFAULT_LANGUAGE_ID,
                defaults={"name": name},
            )
            created += int(was_created)
        return created

    def _seed_orders(self, admin_id: int) -> int:
        if Order.objects.exists():
            return 0
        self.stdout.write("Creating orders...")
        service = OrderStatusHistoryService(
            order_repository=OrderDjangoRepository(),
            mail_sender=_NullMailSender(),
        )
        context = RequestContext.for_admin(admin_id)
        now = timezone.now()
        created = 0
        for name, email in SEED_CUSTOMERS:
            order = Order.objects.create(
                customer_name=name,
                customer_email=email,
                status=1,
                date_purchased=now - timedelta(days=random.randint(1, 30)),
            )
            service.update_status_history(
                order.pk, "Order received.", context=RequestContext.system()
            )
            for status_id in range(2, random.randint(2, 3) + 1):
                service.update_status_history(
                    order.pk, None, status_id=status_id, notify=0, context=context
                )
            created += 1
        return created


class _NullMailSender:
    def send(self, *args, **kwargs) -> bool:
        return False

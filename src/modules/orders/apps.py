from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            BeforeSendExtraAdminEmails,
            OrderStatusHistoryUpdated,
            OrderStatusUpdated,
        )
        from modules.orders.handlers import (
            extra_email_override_handler,
            order_status_history_updated_handler,
            order_status_updated_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderStatusUpdated, order_status_updated_handler)
        event_bus.subscribe(
            OrderStatusHistoryUpdated, order_status_history_updated_handler
        )
        event_bus.subscribe(BeforeSendExtraAdminEmails, extra_email_override_handler)

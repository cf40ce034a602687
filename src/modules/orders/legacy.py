"""Legacy ``update_orders_history`` call convention.

Older integrations record status changes through a call with different
notification codes (``-2`` = email admins only) and result codes, and
expect the order update email to be composed for them.  This module
translates that convention and delegates every decision about the
history itself to ``OrderStatusHistoryService``.

Result codes:
- ``> 0``: id of the status history record.
- ``-1``: nothing to record, or the update was not attempted.
- ``-2``: the order does not exist.
- ``0``: the status history service failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Tuple

import structlog
from django.conf import settings
from django.utils import timezone
from django.utils.html import escape, format_html, strip_tags

from modules.core.context import RequestContext
from modules.orders import constants as c
from modules.orders.events import OrderHistoryPreEmail, OrderHistoryStatusValues
from modules.orders.handlers import ExtraEmailOverrides, extra_email_overrides
from modules.orders.services import has_text
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.services import OrderStatusHistoryService
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def _nl2br(text: str) -> str:
    return text.replace("\n", "<br />\n")


class LegacyOrderHistoryService:
    """Adapter from the legacy call convention to ``OrderStatusHistoryService``."""

    def __init__(
        self,
        status_history_service: OrderStatusHistoryService,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
        overrides: Optional[ExtraEmailOverrides] = None,
    ) -> None:
        self._status_history = status_history_service
        self._order_repo = order_repository
        self._bus = event_bus if event_bus is not None else default_event_bus
        self._overrides = overrides if overrides is not None else extra_email_overrides

    def update_orders_history(
        self,
        order_id: int,
        message: Optional[str] = None,
        updated_by: Optional[str] = None,
        status: int = c.STATUS_UNCHANGED,
        notify_customer: int = c.LegacyNotify.HIDDEN,
        include_message_in_email: bool = True,
        email_subject: str = "",
        extra_email_to: str = "",
        context: Optional[RequestContext] = None,
    ) -> int:
        """Record a status change or message using the legacy rules.

        The history is only updated from the administrative area and when
        an email is requested (``notify_customer`` of ``1`` or ``-2``);
        every other call returns ``-1`` even if the status or message
        changed.

        ``extra_email_to`` replaces the configured extra admin email
        destination for this update only.
        """
        context = context or RequestContext.system()
        log = logger.bind(order_id=order_id, requested_status_id=status)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            log.warning("legacy_order_history.order_not_found")
            return c.LEGACY_ORDER_NOT_FOUND

        if include_message_in_email:
            message = self._with_additional_comments(order.pk, message)

        status_changed = status != c.STATUS_UNCHANGED and status != order.status
        if not (status_changed or has_text(message)):
            log.info("legacy_order_history.no_change")
            return c.LEGACY_NO_CHANGE

        if status == c.STATUS_UNCHANGED:
            status = order.status
        self._bus.publish(
            OrderHistoryStatusValues(
                aggregate_id=order.pk, new_status_id=status, old_status_id=order.status
            )
        )

        if notify_customer not in c.LEGACY_ALLOWED_NOTIFY_CODES:
            notify_customer = c.LegacyNotify.VISIBLE

        if not (context.is_admin and notify_customer in c.LEGACY_EMAIL_NOTIFY_CODES):
            log.info(
                "legacy_order_history.not_attempted",
                is_admin=context.is_admin,
                notify_customer=notify_customer,
            )
            return c.LEGACY_NO_CHANGE

        email_text, email_html = self._compose_email(
            order, status, message, include_message_in_email, context.language_id
        )

        if has_text(extra_email_to):
            self._overrides.register(order.pk, extra_email_to)

        history_id = self._status_history.update_status_history(
            order.pk,
            message,
            status_id=status,
            notify=notify_customer,
            email_subject=(
                email_subject
                if has_text(email_subject)
                else f"{c.EMAIL_TEXT_SUBJECT} #{order.pk}"
            ),
            email_text=email_text,
            email_html=email_html,
            updated_by=updated_by,
            context=context,
        )
        # Unused when the update short-circuits or fails.
        self._overrides.pop(order.pk)

        if history_id is None:
            return c.LEGACY_UPDATE_FAILED
        return history_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _with_additional_comments(
        self, order_id: int, message: Optional[str]
    ) -> Optional[str]:
        """Append the comments contributed by ``OrderHistoryPreEmail`` observers."""
        notification = OrderHistoryPreEmail(aggregate_id=order_id, message=message)
        self._bus.publish(notification)
        additional = notification.additional_comments
        if not additional:
            return message
        if has_text(message):
            return f"{message}\n\n{additional}"
        return f"{message or ''}{additional}"

    def _status_name(self, status_id: int, language_id: int) -> str:
        name = self._order_repo.get_status_name(status_id, language_id)
        return name if name is not None else c.STATUS_NAME_NOT_AVAILABLE

    def _compose_email(
        self,
        order: Order,
        status_id: int,
        message: Optional[str],
        include_message: bool,
        language_id: int,
    ) -> Tuple[str, Dict[str, str]]:
        """Default order update email: plain text and HTML replacement fields."""
        new_name = self._status_name(status_id, language_id)
        if status_id != order.status:
            old_name = self._status_name(order.status, language_id)
            status_text = c.EMAIL_TEXT_STATUS_UPDATED
            status_value = c.EMAIL_TEXT_STATUS_CHANGE.format(old=old_name, new=new_name)
            status_value_html = c.EMAIL_TEXT_STATUS_CHANGE.format(
                old=escape(old_name), new=escape(new_name)
            )
        else:
            status_text = c.EMAIL_TEXT_STATUS_NO_CHANGE
            status_value = c.EMAIL_TEXT_STATUS_LABEL.format(status=new_name)
            status_value_html = c.EMAIL_TEXT_STATUS_LABEL.format(
                status=escape(new_name)
            )

        comments = ""
        comments_html = ""
        if include_message and has_text(message):
            comments = f"{c.EMAIL_TEXT_COMMENTS_UPDATE}{message}\n\n"
            comments_html = _nl2br(
                f"{c.EMAIL_TEXT_COMMENTS_UPDATE}{escape(message)}\n\n"
            )

        invoice_url = settings.ORDER_INVOICE_URL.format(order_id=order.pk)
        date_ordered = timezone.localtime(order.date_purchased).strftime(
            c.EMAIL_DATE_FORMAT
        )
        order_number = f"{c.EMAIL_TEXT_ORDER_NUMBER} {order.pk}"

        text = (
            f"{settings.STORE_NAME} {order_number}\n\n"
            f"{c.EMAIL_TEXT_INVOICE_URL} {invoice_url}\n\n"
            f"{c.EMAIL_TEXT_DATE_ORDERED} {date_ordered}\n\n"
            f"{strip_tags(comments)}"
            f"{status_text}{strip_tags(status_value)}"
            f"{c.EMAIL_TEXT_STATUS_PLEASE_REPLY}"
        )

        html = {
            "EMAIL_CUSTOMERS_NAME": order.customer_name,
            "EMAIL_TEXT_ORDER_NUMBER": order_number,
            "EMAIL_TEXT_INVOICE_URL": format_html(
                '<a href="{}">{}</a>',
                invoice_url,
                c.EMAIL_TEXT_INVOICE_URL.replace(":", ""),
            ),
            "EMAIL_TEXT_DATE_ORDERED": f"{c.EMAIL_TEXT_DATE_ORDERED} {date_ordered}",
            "EMAIL_TEXT_STATUS_COMMENTS": comments_html,
            "EMAIL_TEXT_STATUS_UPDATED": status_text.strip(),
            "EMAIL_TEXT_STATUS_LABEL": status_value_html.strip(),
            "EMAIL_TEXT_NEW_STATUS": new_name,
            "EMAIL_TEXT_STATUS_PLEASE_REPLY": c.EMAIL_TEXT_STATUS_PLEASE_REPLY.strip(),
            "EMAIL_PAYPAL_TRANSID": "",
        }
        return text, html

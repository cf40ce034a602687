"""Order status history service layer (Use Cases).

Orchestrates the status-update-and-notify workflow: validates the order
and the requested status, writes the order status, decides whether a new
history record is warranted, persists it and fans out notifications
(customer email, bus observers, extra admin emails).

Failures never propagate: they are logged with a stack trace and the
caller receives ``None``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.conf import settings

from modules.core.context import RequestContext
from modules.orders.constants import (
    STATUS_UNCHANGED,
    TEMPLATE_ORDER_STATUS,
    TEMPLATE_ORDER_STATUS_EXTRA,
    UNKNOWN_ACTOR,
    UPDATED_BY_MAX_LENGTH,
    CustomerNotified,
)
from modules.orders.events import (
    BeforeSendExtraAdminEmails,
    OrderStatusHistoryUpdated,
    OrderStatusUpdated,
    StatusHistoryPayload,
)
from modules.orders.exceptions import (
    OrderNotFound,
    OrderStatusHistoryError,
    PersistenceError,
    UnknownStatus,
)
from modules.orders.mail import DjangoMailSender, EmailHtml, IMailSender
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def has_text(value: Optional[str]) -> bool:
    """``True`` for strings holding something other than whitespace."""
    return bool(value and value.strip())


def normalize_notify(
    notify: int, email_subject: Optional[str], email_text: Optional[str]
) -> int:
    """Map a requested notification flag onto a ``CustomerNotified`` value.

    ``1`` is kept only when there is an email to send (subject and text),
    otherwise the record is downgraded to visible-without-email.  Values
    other than ``0`` and ``1`` hide the record from the customer.
    """
    if notify == CustomerNotified.EMAILED:
        if has_text(email_subject) and has_text(email_text):
            return CustomerNotified.EMAILED
        return CustomerNotified.VISIBLE
    if notify == CustomerNotified.VISIBLE:
        return CustomerNotified.VISIBLE
    return CustomerNotified.HIDDEN


class OrderStatusHistoryService:
    """Application service for order status history updates.

    Receives the repository, the event bus and the mail sender via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        event_bus: Optional[IEventBus] = None,
        mail_sender: Optional[IMailSender] = None,
    ) -> None:
        self._order_repo = order_repository
        self._bus = event_bus if event_bus is not None else default_event_bus
        self._mail = mail_sender if mail_sender is not None else DjangoMailSender()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def update_status_history(
        self,
        order_id: int,
        comment: Optional[str],
        status_id: Optional[int] = None,
        notify: int = CustomerNotified.HIDDEN,
        email_subject: Optional[str] = None,
        email_text: Optional[str] = None,
        email_html: EmailHtml = None,
        updated_by: Optional[str] = None,
        context: Optional[RequestContext] = None,
    ) -> Optional[int]:
        """Update an order's status and record it in the status history.

        Steps:
        1. Load the order.
        2. Resolve the status: ``None`` or ``-1`` keeps the current one,
           anything else must exist in the catalog for the context language.
        3. Write the status and refresh ``last_modified`` (always).
        4. Publish ``OrderStatusUpdated`` when the status changed.
        5. When the status did not change and there is no comment, return
           the most recent history record for this status, if one exists.
        6. Insert the history record (``notify`` normalized, actor label
           resolved from the context unless ``updated_by`` is given, and
           cut to the ``updated_by`` column length).
        7. Publish ``OrderStatusHistoryUpdated``, email the customer when
           ``notify`` is ``1`` and send the extra admin emails.

        Returns:
            The id of the history record matching the update, or ``None``
            if the order or status does not exist or the record could not
            be written.
        """
        context = context or RequestContext.system()
        log = logger.bind(
            order_id=order_id,
            requested_status_id=status_id,
            language_id=context.language_id,
        )
        try:
            return self._update(
                order_id,
                comment,
                status_id,
                notify,
                email_subject,
                email_text,
                email_html,
                updated_by,
                context,
            )
        except OrderNotFound:
            log.exception("order_status_history.order_not_found")
        except UnknownStatus as exc:
            log.exception(
                "order_status_history.unknown_status", status_id=exc.status_id
            )
        except PersistenceError as exc:
            log.exception("order_status_history.not_written", payload=exc.payload)
        except OrderStatusHistoryError:
            log.exception("order_status_history.update_failed")
        return None

    # ------------------------------------------------------------------
    # Workflow steps
    # ------------------------------------------------------------------

    def _update(
        self,
        order_id: int,
        comment: Optional[str],
        status_id: Optional[int],
        notify: int,
        email_subject: Optional[str],
        email_text: Optional[str],
        email_html: EmailHtml,
        updated_by: Optional[str],
        context: RequestContext,
    ) -> int:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)

        previous_status_id = order.status
        new_status_id = self._resolve_status(order, status_id, context)

        self._order_repo.update_status(order, new_status_id)

        if updated_by is None:
            updated_by = self._resolve_actor(context)
        updated_by = updated_by[:UPDATED_BY_MAX_LENGTH]

        log = logger.bind(order_id=order.pk, status_id=new_status_id)

        if new_status_id != previous_status_id:
            self._bus.publish(
                OrderStatusUpdated(
                    aggregate_id=order.pk,
                    previous_status_id=previous_status_id,
                    new_status_id=new_status_id,
                    updated_by=updated_by,
                )
            )
        elif not has_text(comment):
            existing_id = self._order_repo.get_latest_history_id(
                order.pk, new_status_id
            )
            if existing_id is not None:
                log.info("order_status_history.unchanged", history_id=existing_id)
                return existing_id

        customer_notified = normalize_notify(notify, email_subject, email_text)
        entry = self._persist(
            StatusHistoryPayload(
                order_id=order.pk,
                status_id=new_status_id,
                updated_by=updated_by,
                customer_notified=customer_notified,
                comments=comment,
            )
        )
        log.info(
            "order_status_history.created",
            history_id=entry.history_id,
            customer_notified=customer_notified,
        )

        self._bus.publish(OrderStatusHistoryUpdated(aggregate_id=order.pk, entry=entry))

        if customer_notified == CustomerNotified.EMAILED:
            self._send_customer_email(order, email_subject, email_text, email_html)

        self._send_extra_admin_emails(entry, email_subject, email_text, email_html)
        return entry.history_id

    def _resolve_status(
        self, order: Order, status_id: Optional[int], context: RequestContext
    ) -> int:
        if status_id is None or status_id == STATUS_UNCHANGED:
            return order.status
        if not self._order_repo.status_exists(status_id, context.language_id):
            raise UnknownStatus(status_id, context.language_id)
        return status_id

    def _resolve_actor(self, context: RequestContext) -> str:
        """Label recorded in ``updated_by`` when the caller gives none.

        ``"name [id]"`` for an administrator, ``""`` for a customer and
        ``"--"`` when nobody is logged in.
        """
        if context.admin_id is not None:
            name = self._order_repo.get_admin_name(context.admin_id)
            if not name:
                return ""
            # Shorten the name, not the id, to fit the column.
            suffix = f" [{context.admin_id}]"
            return f"{name[: UPDATED_BY_MAX_LENGTH - len(suffix)]}{suffix}"
        if context.customer_id is None:
            return UNKNOWN_ACTOR
        return ""

    def _persist(self, payload: StatusHistoryPayload) -> StatusHistoryPayload:
        entry = self._order_repo.add_history(payload)
        if entry is None or not entry.history_id:
            raise PersistenceError(payload.as_dict())
        return entry

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _send_customer_email(
        self,
        order: Order,
        email_subject: Optional[str],
        email_text: Optional[str],
        email_html: EmailHtml,
    ) -> None:
        self._mail.send(
            order.customer_name,
            order.customer_email,
            email_subject or "",
            email_text or "",
            settings.STORE_NAME,
            settings.EMAIL_FROM,
            html=email_html,
            template=TEMPLATE_ORDER_STATUS,
        )

    def _send_extra_admin_emails(
        self,
        entry: StatusHistoryPayload,
        email_subject: Optional[str],
        email_text: Optional[str],
        email_html: EmailHtml,
    ) -> None:
        # Settings are read on every call so configuration changes apply
        # without a restart.
        notification = BeforeSendExtraAdminEmails(
            aggregate_id=entry.order_id,
            entry=entry,
            email_subject=email_subject,
            email_text=email_text,
            email_html=email_html,
            send_extra=str(settings.SEND_EXTRA_ORDERS_STATUS_ADMIN_EMAILS_TO_STATUS)
            == "1",
            send_extra_to=settings.SEND_EXTRA_ORDERS_STATUS_ADMIN_EMAILS_TO or "",
        )
        self._bus.publish(notification)

        if not (notification.send_extra and has_text(notification.send_extra_to)):
            return
        logger.info("order_status_history.extra_emails", order_id=entry.order_id)
        self._mail.send(
            "",
            notification.send_extra_to,
            notification.email_subject or "",
            notification.email_text or "",
            settings.STORE_NAME,
            settings.EMAIL_FROM,
            html=notification.email_html,
            template=TEMPLATE_ORDER_STATUS_EXTRA,
        )

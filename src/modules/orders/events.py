"""Domain events for the order status history workflow.

Fire-and-forget notifications are frozen dataclasses.  The two
notifications whose observers are allowed to change the outcome
(``BeforeSendExtraAdminEmails`` and ``OrderHistoryPreEmail``) are
mutable: the publisher reads them back after ``publish`` returns.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from modules.orders.mail import EmailHtml
from shared.domain.events import DomainEvent, MutableDomainEvent


@dataclass(frozen=True)
class StatusHistoryPayload:
    """Column values of an order status history record."""

    order_id: int
    status_id: int
    updated_by: str
    customer_notified: int
    comments: Optional[str]
    created_at: Optional[datetime] = None
    history_id: Optional[int] = None

    def stored_as(self, history_id: int, created_at: datetime) -> StatusHistoryPayload:
        return replace(self, history_id=history_id, created_at=created_at)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, kw_only=True)
class OrderStatusUpdated(DomainEvent):
    """Raised when an order moves to a different status."""

    previous_status_id: int
    new_status_id: int
    updated_by: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class OrderStatusHistoryUpdated(DomainEvent):
    """Raised once a new status history record exists in the database."""

    entry: StatusHistoryPayload


@dataclass(kw_only=True)
class BeforeSendExtraAdminEmails(MutableDomainEvent):
    """Published before deciding whether extra admin emails are sent.

    Observers may rewrite the subject, text, html, ``send_extra`` and
    ``send_extra_to``; the values left on the event are used.
    """

    entry: StatusHistoryPayload
    email_subject: Optional[str] = None
    email_text: Optional[str] = None
    email_html: EmailHtml = None
    send_extra: bool = False
    send_extra_to: str = ""


@dataclass(kw_only=True)
class OrderHistoryPreEmail(MutableDomainEvent):
    """Published by the legacy update before the email is composed.

    Observers contribute text through ``append_comment``; it is added
    to the history message after every observer has run.
    """

    message: Optional[str] = None
    additional_comments: str = ""

    def append_comment(self, text: str) -> None:
        self.additional_comments += text


@dataclass(frozen=True, kw_only=True)
class OrderHistoryStatusValues(DomainEvent):
    """Broadcast of the old/new status ids handled by a legacy update."""

    new_status_id: int
    old_status_id: int

"""Outgoing email for order status notifications.

``IMailSender`` is the contract the status workflow depends on.
``DjangoMailSender`` delivers through Django's email backend, sending
a plain-text body plus an HTML alternative.  The HTML part is either a
ready-made string or a mapping of replacement fields rendered with the
``emails/<template>.html`` template.

Delivery is best-effort: transport errors are logged here and never
reach the caller.
"""

from __future__ import annotations

from smtplib import SMTPException
from typing import Mapping, Optional, Protocol, Union

import structlog
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = structlog.get_logger(__name__)

EmailHtml = Union[str, Mapping[str, str], None]


class IMailSender(Protocol):
    """Mail delivery collaborator."""

    def send(
        self,
        to_name: str,
        to_address: str,
        subject: str,
        text: str,
        from_name: str,
        from_address: str,
        html: EmailHtml = None,
        template: str = "",
    ) -> bool: ...


def format_address(name: str, address: str) -> str:
    """``"Name <address>"``, or the bare address when there is no name."""
    return f"{name} <{address}>" if name else address


class DjangoMailSender:
    """``IMailSender`` backed by ``django.core.mail``."""

    def send(
        self,
        to_name: str,
        to_address: str,
        subject: str,
        text: str,
        from_name: str,
        from_address: str,
        html: EmailHtml = None,
        template: str = "",
    ) -> bool:
        recipients = [
            format_address(to_name, address.strip())
            for address in to_address.split(",")
            if address.strip()
        ]
        log = logger.bind(template=template, recipients=len(recipients))
        if not recipients:
            log.warning("mail.no_recipients")
            return False

        message = EmailMultiAlternatives(
            subject=subject,
            body=text,
            from_email=format_address(from_name, from_address),
            to=recipients,
        )
        html_body = self._render_html(html, template, subject)
        if html_body:
            message.attach_alternative(html_body, "text/html")

        # Headers are validated when the message is serialized, so a
        # newline in the subject or an address surfaces here (BadHeaderError
        # is a ValueError).
        try:
            message.send(fail_silently=False)
        except (SMTPException, OSError, ValueError) as exc:
            log.error("mail.send_failed", error=str(exc))
            return False

        log.info("mail.sent")
        return True

    @staticmethod
    def _render_html(html: EmailHtml, template: str, subject: str) -> Optional[str]:
        if not html:
            return None
        if isinstance(html, str):
            return html
        context = {"EMAIL_SUBJECT": subject, **html}
        return render_to_string(f"emails/{template or 'order_status'}.html", context)

"""Order status history constants.

Customer visibility flags, sentinel values shared by the status
workflow, and the wording used when composing order update emails.
"""

from django.db import models


class CustomerNotified(models.IntegerChoices):
    """Customer visibility of an order status history record."""

    HIDDEN = -1, "Hidden from customer"
    VISIBLE = 0, "Visible, no email"
    EMAILED = 1, "Visible, email sent"


class LegacyNotify(models.IntegerChoices):
    """Notification codes of the legacy ``update_orders_history`` call."""

    VISIBLE = 0, "No email, visible to customer"
    EMAIL_CUSTOMER = 1, "Email sent, visible to customer"
    HIDDEN = -1, "No email, hidden from customer"
    EMAIL_ADMINS_ONLY = -2, "Email to admins only, hidden from customer"


# Status id meaning "keep the order's current status".
STATUS_UNCHANGED = -1

# ``updated_by`` label used when neither an admin nor a customer is present.
UNKNOWN_ACTOR = "--"

UPDATED_BY_MAX_LENGTH = 45

# Email template tags understood by the mail sender.
TEMPLATE_ORDER_STATUS = "order_status"
TEMPLATE_ORDER_STATUS_EXTRA = "order_status_extra"

# Legacy result codes.
LEGACY_NO_CHANGE = -1
LEGACY_ORDER_NOT_FOUND = -2
LEGACY_UPDATE_FAILED = 0

LEGACY_EMAIL_NOTIFY_CODES = frozenset(
    {LegacyNotify.EMAIL_CUSTOMER, LegacyNotify.EMAIL_ADMINS_ONLY}
)
LEGACY_ALLOWED_NOTIFY_CODES = frozenset(
    {
        LegacyNotify.EMAIL_CUSTOMER,
        LegacyNotify.HIDDEN,
        LegacyNotify.EMAIL_ADMINS_ONLY,
    }
)

# ---------------------------------------------------------------------------
# Email wording
# ---------------------------------------------------------------------------

EMAIL_TEXT_SUBJECT = "Order Update"
EMAIL_TEXT_ORDER_NUMBER = "Order Number:"
EMAIL_TEXT_INVOICE_URL = "Detailed Invoice:"
EMAIL_TEXT_DATE_ORDERED = "Date Ordered:"
EMAIL_TEXT_COMMENTS_UPDATE = "<em>The comments for your order are: </em>\n\n"
EMAIL_TEXT_STATUS_UPDATED = "Your order's status has been updated:\n"
EMAIL_TEXT_STATUS_NO_CHANGE = "Your order's status has not changed:\n"
EMAIL_TEXT_STATUS_LABEL = "<strong>Current status: </strong> {status}\n\n"
EMAIL_TEXT_STATUS_CHANGE = (
    "<strong>Old status:</strong> {old}, <strong>New status:</strong> {new}\n\n"
)
EMAIL_TEXT_STATUS_PLEASE_REPLY = (
    "Please reply to this email if you have any questions.\n"
)
STATUS_NAME_NOT_AVAILABLE = "N/A"

# Long date format used in order emails, e.g. "Monday 19 October, 2026".
EMAIL_DATE_FORMAT = "%A %d %B, %Y"

"""Request/identity context passed explicitly through the service layer.

Services never read the HTTP request or the session directly; the
interface layer (views, management commands, tests) builds a
``RequestContext`` and hands it over at the call boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings


@dataclass(frozen=True)
class RequestContext:
    """Facts about the current actor.

    - ``admin_id``: id of the authenticated administrator, if any.
    - ``customer_id``: id of the logged-in storefront customer, if any.
    - ``language_id``: language used to resolve status names.
    - ``is_admin``: ``True`` when running inside the administrative area.
    """

    admin_id: Optional[int] = None
    customer_id: Optional[int] = None
    language_id: int = 1
    is_admin: bool = False

    @classmethod
    def system(cls) -> RequestContext:
        """Context for background jobs: no admin and no customer session."""
        return cls(language_id=settings.DEFAULT_LANGUAGE_ID)

    @classmethod
    def for_admin(cls, admin_id: int, language_id: Optional[int] = None) -> RequestContext:
        return cls(
            admin_id=admin_id,
            language_id=language_id or settings.DEFAULT_LANGUAGE_ID,
            is_admin=True,
        )

    @classmethod
    def for_customer(
        cls, customer_id: int, language_id: Optional[int] = None
    ) -> RequestContext:
        return cls(
            customer_id=customer_id,
            language_id=language_id or settings.DEFAULT_LANGUAGE_ID,
        )

    @classmethod
    def from_request(cls, request: Any) -> RequestContext:
        """Build the context from an authenticated Django/DRF request.

        Staff users are treated as administrators; any other authenticated
        user is a customer.  Anonymous requests get the system context.
        """
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return cls.system()
        if user.is_staff:
            return cls.for_admin(user.pk)
        return cls.for_customer(user.pk)

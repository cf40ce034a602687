"""Order repository interface.

Extends ``IRepository[Order]`` with the queries the status history
workflow needs: status catalog look-ups, the unconditional status
write, history look-up/insert and the admin name used for the
``updated_by`` label.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.events import StatusHistoryPayload
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate and its status history."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order, or ``None`` when it does not exist."""

    @abstractmethod
    def status_exists(self, status_id: int, language_id: int) -> bool:
        """Return ``True`` if the status is in the catalog for the language."""

    @abstractmethod
    def get_status_name(self, status_id: int, language_id: int) -> Optional[str]:
        """Localized status name, or ``None`` when not in the catalog."""

    @abstractmethod
    def update_status(self, order: Order, status_id: int) -> None:
        """Write the order status and refresh ``last_modified``."""

    @abstractmethod
    def get_latest_history_id(self, order_id: int, status_id: int) -> Optional[int]:
        """Id of the most recent history record for the order and status."""

    @abstractmethod
    def add_history(
        self, payload: StatusHistoryPayload
    ) -> Optional[StatusHistoryPayload]:
        """Insert a history record.

        Returns the payload completed with the new id and creation
        timestamp, or ``None`` when nothing was written.
        """

    @abstractmethod
    def get_history(self, history_id: int) -> Optional[OrderStatusHistory]:
        """Retrieve a single history record."""

    @abstractmethod
    def list_history(self, order_id: int) -> List[OrderStatusHistory]:
        """History records of an order, newest first."""

    @abstractmethod
    def get_admin_name(self, admin_id: int) -> Optional[str]:
        """Name of the administrator with the given id, if any."""

"""Order status history API views.

Exposes ``OrderStatusHistoryService`` via HTTP using a DRF ViewSet.
The service reports failures through its return value; the view maps
a missing order to 404 and any other failure to 400.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import BasePermission, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.context import RequestContext
from modules.orders.dtos import UpdateStatusHistoryDTO
from modules.orders.models import OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    StatusHistorySerializer,
    UpdateStatusHistorySerializer,
)
from modules.orders.services import OrderStatusHistoryService


class OrderStatusHistoryViewSet(GenericViewSet):
    """ViewSet for the status history of a single order.

    All ORM access goes through the repository/service layer.
    """

    queryset = OrderStatusHistory.objects.all()
    serializer_class = StatusHistorySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = OrderDjangoRepository()
        self._service = OrderStatusHistoryService(order_repository=self._repo)

    def get_permissions(self) -> list[BasePermission]:
        if self.action == "create":
            return [IsAdminUser()]
        return [IsAuthenticated()]

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list(self, request: Request, order_id: int) -> Response:
        """GET /api/v1/orders/{order_id}/status-history/"""
        if self._repo.get_by_id(order_id) is None:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        history = self._repo.list_history(order_id)
        return Response(StatusHistorySerializer(history, many=True).data)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request, order_id: int) -> Response:
        """POST /api/v1/orders/{order_id}/status-history/

        Returns the history record matching the update: 201 for a new
        record, 200 when the status did not change, no comment was given
        and the existing record for the current status is returned.
        """
        serializer = UpdateStatusHistorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateStatusHistoryDTO(**serializer.validated_data)

        if self._repo.get_by_id(order_id) is None:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        started = timezone.now()
        history_id = self._service.update_status_history(
            order_id,
            context=RequestContext.from_request(request),
            **dto.as_service_kwargs(),
        )
        if history_id is None:
            return Response(
                {"detail": "Order status history could not be updated."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        entry = self._repo.get_history(history_id)
        created = entry.created_at >= started
        return Response(
            StatusHistorySerializer(entry).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

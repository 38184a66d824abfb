"""Order API views.

- ``PlaceOrderView``: the public order intake endpoint.  Anonymous, any
  origin, and every outcome uses the storefront's ``{"ok": ...}`` envelope.
- ``OrderViewSet``: seller read / status change of a single order.
- ``DeliveryViewSet``: driver list of delivery orders and the
  deliver / undeliver actions.

Domain exceptions are caught and translated into HTTP responses here;
the services never know about HTTP.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog
from django.db import DatabaseError
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import APIException
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.http import validation_error_response
from modules.events.repositories.django_repository import EventDjangoRepository
from modules.orders.dtos import MarkDeliveredDTO, UpdateStatusDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderIntakeError, OrderNotFound
from modules.orders.filters import DeliveryFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    DeliverySerializer,
    OrderSerializer,
    PlaceOrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = structlog.get_logger(__name__)

_NOT_FOUND = {"detail": "Order not found."}


def _order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        event_repository=EventDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _rejected(message: str, http_status: int = status.HTTP_400_BAD_REQUEST) -> Response:
    return Response({"ok": False, "error": message}, status=http_status)


def _first_message(exc: ValueError) -> str:
    if isinstance(exc, PydanticValidationError) and exc.errors():
        return exc.errors()[0]["msg"]
    return str(exc)


# ---------------------------------------------------------------------------
# Public intake
# ---------------------------------------------------------------------------


class PlaceOrderView(APIView):
    """POST /api/v1/public/orders/

    Success: ``{"ok": true, "orderId": ..., "updatedStocks": {...}}``.
    Any rejection (input, business rule or storage): HTTP 400
    ``{"ok": false, "error": <message>}``.  Other methods: HTTP 405.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "order_intake"

    def post(self, request: Request) -> Response:
        payload = request.data if isinstance(request.data, Mapping) else {}
        serializer = PlaceOrderSerializer(data=payload)
        if not serializer.is_valid():
            logger.info("order.intake_invalid", error=serializer.first_error)
            return _rejected(serializer.first_error)

        try:
            dto = serializer.to_dto()
        except ValueError as exc:
            logger.info("order.intake_invalid", error=str(exc))
            return _rejected(_first_message(exc))

        try:
            placed = _order_service().place_order(dto)
        except OrderIntakeError as exc:
            return _rejected(str(exc))
        except DatabaseError as exc:
            logger.exception("order.intake_storage_error")
            return _rejected(str(exc) or "Unknown error")

        return Response(
            {
                "ok": True,
                "orderId": str(placed.order_id),
                "updatedStocks": placed.updated_stocks,
            }
        )

    def http_method_not_allowed(self, request: Request, *args, **kwargs) -> Response:
        return _rejected("Method not allowed", status.HTTP_405_METHOD_NOT_ALLOWED)

    def handle_exception(self, exc: Exception) -> Response:
        """Keep the storefront envelope for throttling and parse errors."""
        response = super().handle_exception(exc)
        if isinstance(exc, APIException):
            detail = exc.detail if isinstance(exc.detail, str) else str(exc)
            response.data = {"ok": False, "error": str(detail)}
        return response


# ---------------------------------------------------------------------------
# Seller: single order
# ---------------------------------------------------------------------------


class OrderViewSet(GenericViewSet):
    """Retrieve an order and change its status.

    Listing happens per event (``GET /events/{id}/orders/``) or per driver
    (``GET /deliveries/``).
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _order_service()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/  body: ``{"status": ...}``"""
        data = request.data if isinstance(request.data, Mapping) else {}
        if "status" not in data:
            return Response(
                {"detail": "Field 'status' is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            dto = UpdateStatusDTO(status=data.get("status"))
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            order = self._service.update_status(pk, dto.status)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(OrderSerializer(order).data)


# ---------------------------------------------------------------------------
# Driver: deliveries
# ---------------------------------------------------------------------------


class DeliveryViewSet(ListModelMixin, GenericViewSet):
    """Delivery-mode orders across events, newest first."""

    filterset_class = DeliveryFilter
    search_fields = ["customer_name", "event__title", "event__region"]
    ordering_fields = ["created_at", "delivery_date", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Order.objects.all()
    serializer_class = DeliverySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _order_service()

    def get_queryset(self):
        return self._service.list_deliveries()

    @action(detail=True, methods=["post"])
    def deliver(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/deliveries/{pk}/deliver/  body: ``{"driver_name": ...}``"""
        data = request.data if isinstance(request.data, Mapping) else {}
        driver_name = data.get("driver_name")
        if not isinstance(driver_name, str) or not driver_name.strip():
            return Response(
                {"detail": "Field 'driver_name' is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            dto = MarkDeliveredDTO(driver_name=driver_name)
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            order = self._service.mark_delivered(pk, dto)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(DeliverySerializer(order).data)

    @action(detail=True, methods=["post"])
    def undeliver(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/deliveries/{pk}/undeliver/"""
        try:
            order = self._service.unmark_delivered(pk)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(DeliverySerializer(order).data)

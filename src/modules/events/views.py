"""Event API views.

``EventViewSet`` is the seller dashboard surface; ``PublicEventView`` is
the anonymous storefront read that customers open from a shared link.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.core.http import request_payload, validation_error_response
from modules.events.dtos import CreateEventDTO, UpdateEventDTO
from modules.events.exceptions import (
    EventNotEditable,
    EventNotFound,
    InvalidEventStatus,
    UnknownProducts,
)
from modules.events.filters import EventFilter
from modules.events.models import Event
from modules.events.repositories.django_repository import EventDjangoRepository
from modules.events.serializers import EventSerializer, PublicEventSerializer
from modules.events.services import EventService
from modules.orders.filters import OrderFilter
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

_NOT_FOUND = {"detail": "Event not found."}


def _event_service() -> EventService:
    return EventService(
        event_repository=EventDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class EventViewSet(ListModelMixin, GenericViewSet):
    """Seller CRUD and lifecycle actions for events."""

    filterset_class = EventFilter
    search_fields = ["title", "region"]
    ordering_fields = ["created_at", "title", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Event.objects.all()
    serializer_class = EventSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _event_service()

    def get_queryset(self):
        return self._service.list_events()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/events/{pk}/"""
        try:
            event = self._service.get_event(pk)
        except EventNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(EventSerializer(event).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/events/"""
        try:
            dto = CreateEventDTO.model_validate(request_payload(request))
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            event = self._service.create_event(dto)
        except UnknownProducts as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/events/{pk}/

        ``status`` is ignored; lifecycle changes go through the
        ``cancel``/``close``/``reopen`` actions.
        """
        try:
            data = request_payload(request)
            data.pop("status", None)
            dto = UpdateEventDTO.model_validate(data)
        except (ValueError, TypeError) as exc:
            return validation_error_response(exc)

        try:
            event = self._service.update_event(pk, dto)
        except EventNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except EventNotEditable as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except UnknownProducts as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(EventSerializer(event).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/events/{pk}/ — same partial semantics as PATCH."""
        return self.partial_update(request, pk)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/events/{pk}/cancel/"""
        return self._transition(self._service.cancel_event, pk)

    @action(detail=True, methods=["post"])
    def close(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/events/{pk}/close/"""
        return self._transition(self._service.close_event, pk)

    @action(detail=True, methods=["post"])
    def reopen(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/events/{pk}/reopen/"""
        return self._transition(self._service.reopen_event, pk)

    def _transition(self, operation, pk: str | None) -> Response:
        try:
            event = operation(pk)
        except EventNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidEventStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(EventSerializer(event).data)

    # ------------------------------------------------------------------
    # Orders of an event
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get"])
    def orders(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/events/{pk}/orders/

        Newest first; filterable by ``status``, ``delivery_mode``,
        ``channel`` and ``delivery_date``.
        """
        try:
            event = self._service.get_event(pk)
        except EventNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

        order_service = OrderService(
            order_repository=OrderDjangoRepository(),
            event_repository=EventDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        queryset = OrderFilter(
            request.query_params,
            queryset=order_service.list_event_orders(event.id),
            request=request,
        ).qs

        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)


class PublicEventView(APIView):
    """GET /api/v1/public/events/{pk}/ — anonymous storefront read."""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "public_catalog"

    def get(self, request: Request, pk: str) -> Response:
        try:
            event, catalog = _event_service().get_public_event(pk)
        except EventNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(PublicEventSerializer({"event": event, "products": catalog}).data)

"""Django ORM implementation of the Order repository.

Concurrency control on status changes uses ``select_for_update()``; the
order intake transaction never re-reads an order, it only inserts one.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.core.models import OutboxEvent
from modules.orders.constants import DeliveryMode
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def build(self, data: Dict[str, Any]) -> Order:
        return Order(**data)

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = self.build(data)
        order.save()
        logger.info(
            "order.created",
            order_id=str(order.id),
            event_id=str(order.event_id),
            total_items=order.total_items,
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or malformed ids."""
        try:
            return Order.objects.select_related("event").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Order.objects.select_related("event")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_event(
        self, event_id: str, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        return self.list(filters).filter(event_id=event_id).order_by("-created_at", "-id")

    def list_deliveries(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return (
            self.list(filters)
            .filter(delivery_mode=DeliveryMode.DELIVERY)
            .order_by("-created_at", "-id")
        )

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order, update_fields: Optional[list[str]] = None) -> Order:
        """Persist the order and flush its domain events to the outbox."""
        entity.save(update_fields=update_fields)

        events = entity.pull_domain_events()
        OutboxEvent.objects.bulk_create(
            OutboxEvent(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=event.topic,
            )
            for event in events
        )

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

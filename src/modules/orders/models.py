"""Order model: one customer order inside an event.

Rules implemented:
- Created once by the order intake transaction; afterwards only status and
  the delivery annotation change.
- ``quantities`` maps product display name -> positive quantity and is
  never empty; ``total_items`` is always its sum.
- ``location_link`` is only kept for ``delivery`` orders.
- Leaving ``delivered`` clears the driver annotation (``clear_delivery``).
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    DeliveryMode,
    OrderChannel,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root, stored under its event."""

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=80, blank=True, default="")
    note = models.TextField(blank=True, default="")
    quantities = models.JSONField(default=dict)
    total_items = models.PositiveIntegerField()
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    channel = models.CharField(max_length=20, choices=OrderChannel.choices)
    delivery_mode = models.CharField(
        max_length=20,
        choices=DeliveryMode.choices,
        default=DeliveryMode.PICKUP,
    )
    delivery_date = models.CharField(max_length=40)
    delivery_time_slot = models.CharField(max_length=20)
    location_link = models.CharField(max_length=300, blank=True, default="")
    delivery_driver_name = models.CharField(max_length=80, blank=True, default="")
    delivered_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["event", "-created_at"], name="orders_event_created_idx"),
            models.Index(fields=["delivery_mode"], name="orders_delivery_mode_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                check=models.Q(total_items__gte=1),
                name="orders_total_items_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def clear_delivery(self) -> None:
        self.delivery_driver_name = ""
        self.delivered_at = None

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status}, {self.total_items} items)"

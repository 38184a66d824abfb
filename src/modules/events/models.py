"""Event model: one delivery/sales run of a seller.

Rules implemented:
- Orders can only be placed while ``status`` is ``active`` (checked by the
  order intake transaction under a row lock).
- ``product_names`` is the ordered list of catalog display names offered
  in this event; it references products by name, like orders do.
- Events are never deleted; sellers close or cancel them.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.events.constants import (
    DELIVERY_DATES_SEPARATOR,
    VALID_TRANSITIONS,
    EventStatus,
)


class Event(BaseModel):
    title = models.CharField(max_length=120)
    region = models.CharField(max_length=120)
    seller_name = models.CharField(max_length=80, blank=True, default="")
    delivery_dates = models.JSONField(default=list)
    product_names = models.JSONField(default=list)
    whatsapp = models.CharField(max_length=30)
    messenger_id = models.CharField(max_length=120, blank=True, default="")
    pickup_url = models.CharField(max_length=300, blank=True, default="")
    pickup_note = models.CharField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.ACTIVE,
    )

    class Meta:
        db_table = "events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="events_status_idx"),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == EventStatus.ACTIVE

    @property
    def delivery_date_label(self) -> str:
        return DELIVERY_DATES_SEPARATOR.join(self.delivery_dates)

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __str__(self) -> str:
        return f"{self.title} - {self.region} ({self.status})"

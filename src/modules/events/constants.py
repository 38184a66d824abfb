"""Event lifecycle constants."""

from django.db import models


class EventStatus(models.TextChoices):
    ACTIVE = "active", "Ativo"
    CLOSED = "closed", "Encerrado"
    CANCELLED = "cancelled", "Cancelado"


VALID_TRANSITIONS: dict[str, set[str]] = {
    EventStatus.ACTIVE: {EventStatus.CLOSED, EventStatus.CANCELLED},
    EventStatus.CLOSED: {EventStatus.ACTIVE},
    EventStatus.CANCELLED: set(),
}

DELIVERY_DATES_SEPARATOR = " • "

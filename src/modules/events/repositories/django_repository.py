"""Django ORM implementation of the Event repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.events.models import Event
from modules.events.repositories.interfaces import IEventRepository

logger = structlog.get_logger(__name__)


class EventDjangoRepository(IEventRepository):
    """Concrete Event repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Event]:
        try:
            return Event.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Event]:
        try:
            return Event.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Event.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Event) -> Event:
        entity.save()
        logger.info("event.saved", event_id=str(entity.id), status=entity.status)
        return entity

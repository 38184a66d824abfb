"""Asynchronous tasks of the core module."""

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = 100) -> dict:
    """Relay pending outbox events in creation order.

    Delivery is currently the structured log stream; each event is marked
    ``PUBLISHED`` once emitted, or ``FAILED`` with the error otherwise.
    """
    published = failed = 0
    with transaction.atomic():
        pending = list(
            OutboxEvent.objects.select_for_update()
            .filter(status=EventStatus.PENDING)
            .order_by("created_at")[:batch_size]
        )
        for event in pending:
            try:
                logger.info(
                    "outbox.event_relayed",
                    event_type=event.event_type,
                    topic=event.topic,
                    aggregate_id=event.aggregate_id,
                    payload=event.payload,
                )
                event.mark_as_published()
                published += 1
            except Exception as exc:
                event.mark_as_failed(str(exc))
                failed += 1
                logger.exception("outbox.relay_failed", event_id=str(event.id))
    return {"published": published, "failed": failed}

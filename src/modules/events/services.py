"""Event service layer (Use Cases).

Seller-side management of delivery events and the public read used by
the storefront page.

Rules enforced:
- Every product name offered by an event must exist in the catalog when
  the event is saved (orders would fail on it otherwise).
- Only active events are editable.
- Lifecycle transitions follow ``VALID_TRANSITIONS``; each one locks the
  event row so it serializes with in-flight order placements.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import structlog
from django.db import models, transaction

from modules.events.constants import EventStatus
from modules.events.exceptions import (
    EventNotEditable,
    EventNotFound,
    InvalidEventStatus,
    UnknownProducts,
)
from modules.events.models import Event

if TYPE_CHECKING:
    from modules.events.dtos import CreateEventDTO, UpdateEventDTO
    from modules.events.repositories.interfaces import IEventRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class EventService:
    """Application service for Event use-cases."""

    def __init__(
        self,
        event_repository: IEventRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._event_repo = event_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_event(self, dto: CreateEventDTO) -> Event:
        """Create an active event.

        Raises:
            UnknownProducts: a listed product name is not in the catalog.
        """
        self._ensure_products_exist(dto.product_names)

        event = Event(
            title=dto.title,
            region=dto.region,
            seller_name=dto.seller_name,
            delivery_dates=list(dto.delivery_dates),
            product_names=list(dto.product_names),
            whatsapp=dto.whatsapp,
            messenger_id=dto.messenger_id,
            pickup_url=dto.pickup_url,
            pickup_note=dto.pickup_note,
            status=EventStatus.ACTIVE,
        )
        event = self._event_repo.save(event)
        logger.info("event.created", event_id=str(event.id), title=event.title)
        return event

    @transaction.atomic
    def update_event(self, id: str, dto: UpdateEventDTO) -> Event:
        """Apply the supplied fields to an active event.

        Raises:
            EventNotFound: the event does not exist.
            EventNotEditable: the event is closed or cancelled.
            UnknownProducts: a listed product name is not in the catalog.
        """
        event = self._event_repo.get_for_update(id)
        if not event:
            raise EventNotFound(f"Event {id} not found.")
        if not event.is_active:
            raise EventNotEditable(f"Event {id} is {event.status}.")

        changed = dto.model_dump(exclude_none=True)
        if "product_names" in changed:
            self._ensure_products_exist(changed["product_names"])
        for field, value in changed.items():
            setattr(event, field, value)

        event = self._event_repo.save(event)
        logger.info("event.updated", event_id=str(id), fields=sorted(changed))
        return event

    def cancel_event(self, id: str) -> Event:
        return self._transition(id, EventStatus.CANCELLED)

    def close_event(self, id: str) -> Event:
        return self._transition(id, EventStatus.CLOSED)

    def reopen_event(self, id: str) -> Event:
        return self._transition(id, EventStatus.ACTIVE)

    @transaction.atomic
    def _transition(self, id: str, new_status: str) -> Event:
        event = self._event_repo.get_for_update(id)
        if not event:
            raise EventNotFound(f"Event {id} not found.")

        log = logger.bind(event_id=str(id), current_status=event.status)
        if not event.can_transition_to(new_status):
            log.warning("event.invalid_transition", new_status=new_status)
            raise InvalidEventStatus(
                f"Cannot move event from {event.status} to {new_status}."
            )

        event.status = new_status
        event = self._event_repo.save(event)
        log.info("event.status_changed", new_status=new_status)
        return event

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_event(self, id: str) -> Event:
        event = self._event_repo.get_by_id(id)
        if not event:
            raise EventNotFound(f"Event {id} not found.")
        return event

    def list_events(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self._event_repo.list(filters)

    def get_public_event(self, id: str) -> Tuple[Event, List[Product]]:
        """Event plus its catalog, in the order the event lists products.

        Names no longer in the catalog are left out rather than failing the
        page; ordering them would fail with "Product not found".
        """
        event = self.get_event(id)
        by_name = {p.name: p for p in self._product_repo.list_by_names(event.product_names)}
        catalog = [by_name[name] for name in event.product_names if name in by_name]
        return event, catalog

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_products_exist(self, names: List[str]) -> None:
        found = {p.name for p in self._product_repo.list_by_names(names)}
        missing = [name for name in names if name not in found]
        if missing:
            raise UnknownProducts(missing)

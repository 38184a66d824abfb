"""Order repository interface.

Extends ``IRepository[Order]`` with creation from validated intake data
and the two list views used by sellers (per event) and drivers
(deliveries).  ``save`` also persists the aggregate's pending domain
events into the outbox, inside the caller's transaction.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def build(self, data: Dict[str, Any]) -> Order:
        """Unsaved order with its primary key already assigned.

        Domain events can be attached before the single ``save`` that
        inserts the row and its outbox entries.
        """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Build and persist an order from cleaned field values.

        Domain events added to the returned instance are only written by a
        later ``save``.
        """

    @abstractmethod
    def list_for_event(
        self, event_id: str, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        """Orders of one event, newest first."""

    @abstractmethod
    def list_deliveries(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Orders with delivery mode ``delivery`` across events, newest first."""

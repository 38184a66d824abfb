"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when a customer order is committed."""

    topic: ClassVar[str] = "orders"

    sales_event_id: str = ""
    channel: str = ""
    total_items: int = 0
    quantities: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when a seller or driver changes an order's status."""

    topic: ClassVar[str] = "orders"

    old_status: str = ""
    new_status: str = ""
    driver_name: Optional[str] = None

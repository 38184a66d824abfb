"""Order DTOs for the Service Layer.

Pydantic v2, immutable (``frozen=True``).  ``PlaceOrderDTO`` is built from
already-cleaned serializer output; its validators re-assert the order
invariants so the service never sees an empty or non-positive cart.

- ``PlaceOrderDTO``: a validated customer order.
- ``PlacedOrderDTO``: outcome of a committed order.
- ``UpdateStatusDTO`` / ``MarkDeliveredDTO``: seller and driver commands.
"""

from __future__ import annotations

from typing import Dict
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import (
    CUSTOMER_NAME_MAX_LENGTH,
    DELIVERY_DATE_MAX_LENGTH,
    DELIVERY_TIME_SLOT_MAX_LENGTH,
    DRIVER_NAME_MAX_LENGTH,
    EVENT_ID_MAX_LENGTH,
    LOCATION_LINK_MAX_LENGTH,
    MAX_QTY_PER_ITEM,
    NOTE_MAX_LENGTH,
    DeliveryMode,
    OrderChannel,
    OrderStatus,
)

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PlaceOrderDTO(BaseModel):
    """A customer's cart, cleaned and ready for the placement transaction."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(min_length=1, max_length=EVENT_ID_MAX_LENGTH)
    channel: OrderChannel
    quantities: Dict[str, int]
    customer_name: str = Field(default="", max_length=CUSTOMER_NAME_MAX_LENGTH)
    note: str = Field(default="", max_length=NOTE_MAX_LENGTH)
    delivery_mode: DeliveryMode = DeliveryMode.PICKUP
    delivery_date: str = Field(default="", max_length=DELIVERY_DATE_MAX_LENGTH)
    delivery_time_slot: str = Field(default="", max_length=DELIVERY_TIME_SLOT_MAX_LENGTH)
    location_link: str = Field(default="", max_length=LOCATION_LINK_MAX_LENGTH)

    @field_validator("quantities")
    @classmethod
    def quantities_must_be_positive(cls, v: Dict[str, int]) -> Dict[str, int]:
        if not v:
            raise ValueError("Select at least 1 item")
        for name, qty in v.items():
            if not name:
                raise ValueError("Product name must not be empty.")
            if not 1 <= qty <= MAX_QTY_PER_ITEM:
                raise ValueError(
                    f"Quantity for {name!r} must be between 1 and {MAX_QTY_PER_ITEM}."
                )
        return v

    @property
    def total_items(self) -> int:
        return sum(self.quantities.values())


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OrderStatus


class MarkDeliveredDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    driver_name: str = Field(min_length=1)

    @field_validator("driver_name")
    @classmethod
    def cap_driver_name(cls, v: str) -> str:
        return v[:DRIVER_NAME_MAX_LENGTH].strip()


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class PlacedOrderDTO(BaseModel):
    """Result of a committed order.

    ``updated_stocks`` holds the new stock of every tracked product the
    order decremented, keyed by display name.
    """

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    updated_stocks: Dict[str, int]

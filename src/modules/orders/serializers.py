"""Order DRF serializers.

``PlaceOrderSerializer`` is the customer-facing input contract of the
public intake endpoint.  It never rejects free text: strings are trimmed
and capped, anything else becomes ``""``.  Only ``eventId``, ``channel``
and ``quantities`` can fail, and the first failing field (in declaration
order) is the one reported to the client.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Dict

from rest_framework import serializers
from rest_framework.fields import empty

from modules.orders.constants import (
    CUSTOMER_NAME_MAX_LENGTH,
    DELIVERY_DATE_MAX_LENGTH,
    DELIVERY_TIME_SLOT_MAX_LENGTH,
    EVENT_ID_MAX_LENGTH,
    LOCATION_LINK_MAX_LENGTH,
    MAX_QTY_PER_ITEM,
    NOTE_MAX_LENGTH,
    PRODUCT_NAME_MAX_LENGTH,
    DeliveryMode,
    OrderChannel,
)
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.models import Order

_SURROGATES = re.compile(r"[\ud800-\udfff]")

# ---------------------------------------------------------------------------
# Cleaning helpers
# ---------------------------------------------------------------------------


def clean_text(value: Any, max_length: int) -> str:
    """Trim then cap a string; non-strings become ``""``.

    Lone UTF-16 surrogates (valid in JSON escapes, not encodable as UTF-8)
    are dropped.
    """
    if not isinstance(value, str):
        return ""
    return _SURROGATES.sub("", value).strip()[:max_length]


def clamp_quantity(value: Any) -> int:
    """Coerce a raw quantity to an integer in ``[0, MAX_QTY_PER_ITEM]``.

    Numeric strings are accepted, fractions are floored and anything that
    is not a finite number counts as 0.
    """
    if isinstance(value, int):
        return min(MAX_QTY_PER_ITEM, max(0, int(value)))
    if isinstance(value, float):
        number = value
    elif value is None:
        number = 0.0
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = float(text) if text else 0.0
        except ValueError:
            return 0
    else:
        return 0

    if not math.isfinite(number):
        return 0
    return min(MAX_QTY_PER_ITEM, max(0, math.floor(number)))


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class CleanTextField(serializers.Field):
    """Lenient text input: trimmed, capped, ``""`` for non-strings."""

    def __init__(self, max_length: int, **kwargs: Any) -> None:
        self.max_length = max_length
        kwargs.setdefault("required", False)
        kwargs.setdefault("default", "")
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data: Any):
        if data is None:
            return (True, "")
        return super().validate_empty_values(data)

    def to_internal_value(self, data: Any) -> str:
        return clean_text(data, self.max_length)

    def to_representation(self, value: Any) -> str:
        return value


class EventIdField(serializers.Field):
    """Required event reference; every empty form reads as a missing id."""

    default_error_messages = {
        "blank": "Missing eventId",
        "required": "Missing eventId",
        "null": "Missing eventId",
    }

    def validate_empty_values(self, data: Any):
        if data is empty or data is None:
            self.fail("blank")
        return (False, data)

    def to_internal_value(self, data: Any) -> str:
        event_id = clean_text(data, EVENT_ID_MAX_LENGTH)
        if not event_id:
            self.fail("blank")
        return event_id

    def to_representation(self, value: Any) -> str:
        return value


class QuantitiesField(serializers.Field):
    """Product name -> quantity mapping, cleaned.

    A missing or falsy value is an empty cart; an array or any other
    non-mapping value is rejected.  Keys are trimmed and capped, values
    clamped; entries left with an empty name or a zero quantity are
    dropped.
    """

    default_error_messages = {"invalid": "Invalid quantities"}

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("required", False)
        kwargs.setdefault("default", dict)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data: Any):
        if data is None:
            return (True, {})
        return super().validate_empty_values(data)

    def to_internal_value(self, data: Any) -> Dict[str, int]:
        if isinstance(data, list) or (not isinstance(data, Mapping) and data):
            self.fail("invalid")
        if not data:
            return {}

        quantities: Dict[str, int] = {}
        for raw_name, raw_qty in data.items():
            name = clean_text(raw_name, PRODUCT_NAME_MAX_LENGTH)
            qty = clamp_quantity(raw_qty)
            if name and qty > 0:
                quantities[name] = qty
        return quantities

    def to_representation(self, value: Any) -> Dict[str, int]:
        return dict(value)


class DeliveryModeField(serializers.Field):
    """Unknown or missing delivery modes fall back to ``pickup``."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("required", False)
        kwargs.setdefault("default", DeliveryMode.PICKUP.value)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data: Any):
        if data is None:
            return (True, DeliveryMode.PICKUP.value)
        return super().validate_empty_values(data)

    def to_internal_value(self, data: Any) -> str:
        if isinstance(data, str) and data in DeliveryMode.values:
            return data
        return DeliveryMode.PICKUP.value

    def to_representation(self, value: Any) -> str:
        return value


class ChannelField(serializers.Field):
    default_error_messages = {"invalid": "Invalid channel"}

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault(
            "error_messages",
            {"required": "Invalid channel", "null": "Invalid channel"},
        )
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> str:
        if isinstance(data, str) and data in OrderChannel.values:
            return data
        self.fail("invalid")

    def to_representation(self, value: Any) -> str:
        return value


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the public order body (camelCase, as the storefront sends it)."""

    default_error_messages = {"empty_cart": "Select at least 1 item"}

    eventId = EventIdField(source="event_id")
    channel = ChannelField()
    quantities = QuantitiesField()
    customerName = CleanTextField(CUSTOMER_NAME_MAX_LENGTH, source="customer_name")
    note = CleanTextField(NOTE_MAX_LENGTH)
    deliveryMode = DeliveryModeField(source="delivery_mode")
    deliveryDate = CleanTextField(DELIVERY_DATE_MAX_LENGTH, source="delivery_date")
    deliveryTimeSlot = CleanTextField(
        DELIVERY_TIME_SLOT_MAX_LENGTH, source="delivery_time_slot"
    )
    locationLink = CleanTextField(LOCATION_LINK_MAX_LENGTH, source="location_link")

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        if sum(attrs.get("quantities", {}).values()) <= 0:
            raise serializers.ValidationError(
                self.error_messages["empty_cart"], code="empty_cart"
            )
        return attrs

    @property
    def first_error(self) -> str:
        """The message of the first failing field, in declaration order."""
        for messages in self.errors.values():
            while isinstance(messages, (list, dict)):
                if isinstance(messages, dict):
                    messages = next(iter(messages.values()), "")
                else:
                    messages = messages[0] if messages else ""
            return str(messages)
        return ""

    def to_dto(self) -> PlaceOrderDTO:
        return PlaceOrderDTO(**self.validated_data)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderSerializer(serializers.ModelSerializer):
    """Seller/driver view of an order."""

    event_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "event_id",
            "customer_name",
            "note",
            "quantities",
            "total_items",
            "status",
            "channel",
            "delivery_mode",
            "delivery_date",
            "delivery_time_slot",
            "location_link",
            "delivery_driver_name",
            "delivered_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DeliverySerializer(OrderSerializer):
    """Driver list entry: the order plus where it belongs."""

    event_title = serializers.CharField(source="event.title", read_only=True)
    event_region = serializers.CharField(source="event.region", read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["event_title", "event_region"]
        read_only_fields = fields

"""Event DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.events.models import Event
from modules.products.serializers import CatalogProductSerializer


class EventSerializer(serializers.ModelSerializer):
    delivery_date_label = serializers.CharField(read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "region",
            "seller_name",
            "delivery_dates",
            "delivery_date_label",
            "product_names",
            "whatsapp",
            "messenger_id",
            "pickup_url",
            "pickup_note",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PublicEventSerializer(serializers.Serializer):
    """Storefront page payload: the event header plus its catalog.

    Built from the ``(event, products)`` pair returned by
    ``EventService.get_public_event``.
    """

    id = serializers.UUIDField(source="event.id", read_only=True)
    title = serializers.CharField(source="event.title", read_only=True)
    region = serializers.CharField(source="event.region", read_only=True)
    seller_name = serializers.CharField(source="event.seller_name", read_only=True)
    delivery_dates = serializers.ListField(
        source="event.delivery_dates", child=serializers.CharField(), read_only=True
    )
    delivery_date_label = serializers.CharField(
        source="event.delivery_date_label", read_only=True
    )
    whatsapp = serializers.CharField(source="event.whatsapp", read_only=True)
    messenger_id = serializers.CharField(source="event.messenger_id", read_only=True)
    pickup_url = serializers.CharField(source="event.pickup_url", read_only=True)
    pickup_note = serializers.CharField(source="event.pickup_note", read_only=True)
    status = serializers.CharField(source="event.status", read_only=True)
    products = CatalogProductSerializer(many=True, read_only=True)

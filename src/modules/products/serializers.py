"""Product DRF serializers for API output.

Input is validated by the Pydantic DTOs in ``dtos.py``; these serializers
only shape responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Seller view of a catalog entry, derived stock state included."""

    effective_status = serializers.CharField(read_only=True)
    is_out_of_stock = serializers.BooleanField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "category",
            "image_url",
            "extra_image_urls",
            "stock_qty",
            "low_stock_threshold",
            "status",
            "effective_status",
            "is_out_of_stock",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CatalogProductSerializer(serializers.ModelSerializer):
    """Customer-facing catalog entry shown on a public event page."""

    status = serializers.CharField(source="effective_status", read_only=True)
    image_urls = serializers.ListField(child=serializers.CharField(), read_only=True)
    low_stock_threshold = serializers.IntegerField(
        source="low_stock_limit", read_only=True
    )
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "name",
            "price",
            "category",
            "image_urls",
            "stock_qty",
            "low_stock_threshold",
            "is_low_stock",
            "status",
        ]
        read_only_fields = fields

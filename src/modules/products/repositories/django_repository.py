"""Django ORM implementation of the Product repository.

Look-ups return ``None`` instead of raising for missing or malformed ids;
the Service Layer decides how a missing product surfaces to the caller.
Only live (not soft-deleted) products are visible.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Product]:
        """Lock the product row; concurrent stock writers queue behind it."""
        try:
            return Product.objects.select_for_update().alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[Product]:
        return (
            Product.objects.alive()
            .filter(name=name)
            .order_by("created_at", "id")
            .first()
        )

    def list_by_names(self, names: Iterable[str]) -> List[Product]:
        wanted = set(names)
        found: Dict[str, Product] = {}
        queryset = (
            Product.objects.alive().filter(name__in=wanted).order_by("created_at", "id")
        )
        for product in queryset:
            found.setdefault(product.name, product)
        return list(found.values())

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "active"}
            {"name__icontains": "coxinha"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

"""Product model: the catalog shared by every event.

Rules implemented:
- Orders and events reference products by display ``name``, not by id.
  Names are indexed but uniqueness is *assumed*, not enforced; look-ups
  take the oldest live match.
- ``stock_qty`` is nullable.  ``NULL`` means the product is not
  stock-tracked and can be ordered without limit.
- A tracked product with no stock left is out of stock whatever its
  stored ``status`` says (``effective_status``).
- Price is an integer amount of currency units.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.products.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    PRODUCT_NAME_MAX_LENGTH,
    ProductCategory,
    ProductStatus,
)

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    name = models.CharField(max_length=PRODUCT_NAME_MAX_LENGTH, db_index=True)
    price = models.PositiveIntegerField(default=0)
    category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        default=ProductCategory.COMIDA,
    )
    image_url = models.CharField(max_length=500, blank=True, default="")
    extra_image_urls = models.JSONField(default=list, blank=True)
    stock_qty = models.PositiveIntegerField(null=True, blank=True, default=None)
    low_stock_threshold = models.PositiveIntegerField(
        null=True, blank=True, default=None
    )
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )

    class Meta:
        db_table = "products"
        ordering = ["name", "created_at"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
        ]

    # ------------------------------------------------------------------
    # Stock state
    # ------------------------------------------------------------------

    @property
    def is_stock_tracked(self) -> bool:
        return self.stock_qty is not None

    @property
    def is_out_of_stock(self) -> bool:
        return self.is_stock_tracked and self.stock_qty <= 0

    @property
    def low_stock_limit(self) -> int:
        if self.low_stock_threshold is None:
            return DEFAULT_LOW_STOCK_THRESHOLD
        return self.low_stock_threshold

    @property
    def is_low_stock(self) -> bool:
        """``True`` when only a few tracked units are left (but not zero)."""
        return self.is_stock_tracked and 0 < self.stock_qty <= self.low_stock_limit

    @property
    def effective_status(self) -> str:
        if self.is_out_of_stock:
            return ProductStatus.INACTIVE
        return self.status

    @property
    def image_urls(self) -> list[str]:
        """Main image followed by the extra gallery images, blanks dropped."""
        return [url for url in [self.image_url, *self.extra_image_urls] if url]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.name:
            self.name = self.name.strip()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                stock_qty=self.stock_qty,
            )

    def __str__(self) -> str:
        return f"{self.name} (¥{self.price})"

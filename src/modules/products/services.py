"""Product service layer (Use Cases).

Orchestrates catalog management for sellers, delegating persistence to
the injected ``IProductRepository``.

Rules enforced here:
- Stock edits lock the product row, so a seller changing stock while a
  customer order is being placed waits for the order (or vice versa)
  instead of overwriting its decrement.
- Duplicate display names are allowed but logged: orders resolve names to
  the oldest live product.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO, UpdateStockDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases."""

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        log = logger.bind(name=dto.name)

        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")

        product = Product(
            name=dto.name,
            price=dto.price,
            category=dto.category,
            image_url=dto.image_url,
            extra_image_urls=list(dto.extra_image_urls),
            stock_qty=dto.stock_qty,
            low_stock_threshold=dto.low_stock_threshold,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied catalog fields.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changed = dto.model_dump(exclude_none=True)
        if "name" in changed and changed["name"] != product.name:
            if self._repo.get_by_name(changed["name"]):
                logger.warning(
                    "product.duplicate_name", product_id=str(id), name=changed["name"]
                )
        for field, value in changed.items():
            setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id), fields=sorted(changed))
        return product

    @transaction.atomic
    def update_stock(self, id: str, dto: UpdateStockDTO) -> Product:
        """Set the stock counter under a row lock.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        previous = product.stock_qty
        product.stock_qty = dto.stock_qty
        product.save(update_fields=["stock_qty"])

        logger.info(
            "product.stock_set",
            product_id=str(id),
            previous=previous,
            stock_qty=dto.stock_qty,
        )
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

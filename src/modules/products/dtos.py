"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial catalog edits (stock excluded).
- ``UpdateStockDTO``: input for a manual stock edit.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.products.constants import (
    PRODUCT_NAME_MAX_LENGTH,
    ProductCategory,
    ProductStatus,
)


def _clean_urls(urls: List[str]) -> List[str]:
    return [url.strip() for url in urls if url and url.strip()]


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    ``stock_qty=None`` creates an untracked (unlimited) product.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=PRODUCT_NAME_MAX_LENGTH)
    price: int = Field(ge=0)
    category: ProductCategory = ProductCategory.COMIDA
    image_url: str = ""
    extra_image_urls: List[str] = Field(default_factory=list)
    stock_qty: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product name must not be empty.")
        return v.strip()

    @field_validator("image_url")
    @classmethod
    def strip_image_url(cls, v: str) -> str:
        return v.strip()

    @field_validator("extra_image_urls")
    @classmethod
    def drop_blank_urls(cls, v: List[str]) -> List[str]:
        return _clean_urls(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for partial product edits.

    Only supplied (non-``None``) fields are applied.  Stock is edited through
    ``UpdateStockDTO`` so it always goes through the row lock.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, max_length=PRODUCT_NAME_MAX_LENGTH)
    price: Optional[int] = Field(default=None, ge=0)
    category: Optional[ProductCategory] = None
    image_url: Optional[str] = None
    extra_image_urls: Optional[List[str]] = None
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Product name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("extra_image_urls")
    @classmethod
    def drop_blank_urls(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_urls(v) if v is not None else v


class UpdateStockDTO(BaseModel):
    """Manual stock edit.  ``stock_qty=None`` stops tracking stock."""

    model_config = ConfigDict(frozen=True)

    stock_qty: Optional[int] = Field(ge=0)

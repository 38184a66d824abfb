"""Event DTOs for the Service Layer.

Pydantic v2, immutable.  List fields are cleaned the way the seller
dashboard submits them: entries trimmed, blanks dropped, product names
de-duplicated keeping their first position.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_dates(v: List[str]) -> List[str]:
    dates = [d.strip() for d in v if d and d.strip()]
    if not dates:
        raise ValueError("Add at least one delivery date.")
    return dates


def _clean_product_names(v: List[str]) -> List[str]:
    names: List[str] = []
    for name in v:
        name = (name or "").strip()
        if name and name not in names:
            names.append(name)
    if not names:
        raise ValueError("Select at least one product for this event.")
    return names


def _required_text(v: str, label: str) -> str:
    if not v or not v.strip():
        raise ValueError(f"{label} must not be empty.")
    return v.strip()


class CreateEventDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(max_length=120)
    region: str = Field(max_length=120)
    seller_name: str = Field(default="", max_length=80)
    delivery_dates: List[str]
    product_names: List[str]
    whatsapp: str = Field(max_length=30)
    messenger_id: str = Field(default="", max_length=120)
    pickup_url: str = Field(default="", max_length=300)
    pickup_note: str = Field(default="", max_length=500)

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        return _required_text(v, "Title")

    @field_validator("region")
    @classmethod
    def region_required(cls, v: str) -> str:
        return _required_text(v, "Region")

    @field_validator("whatsapp")
    @classmethod
    def whatsapp_required(cls, v: str) -> str:
        return _required_text(v, "WhatsApp number")

    @field_validator("delivery_dates")
    @classmethod
    def at_least_one_date(cls, v: List[str]) -> List[str]:
        return _clean_dates(v)

    @field_validator("product_names")
    @classmethod
    def at_least_one_product(cls, v: List[str]) -> List[str]:
        return _clean_product_names(v)


class UpdateEventDTO(BaseModel):
    """Partial edit; only supplied (non-``None``) fields are applied."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=120)
    region: Optional[str] = Field(default=None, max_length=120)
    seller_name: Optional[str] = Field(default=None, max_length=80)
    delivery_dates: Optional[List[str]] = None
    product_names: Optional[List[str]] = None
    whatsapp: Optional[str] = Field(default=None, max_length=30)
    messenger_id: Optional[str] = Field(default=None, max_length=120)
    pickup_url: Optional[str] = Field(default=None, max_length=300)
    pickup_note: Optional[str] = Field(default=None, max_length=500)

    @field_validator("title", "region", "whatsapp")
    @classmethod
    def not_blank_when_given(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Field must not be empty.")
        return v

    @field_validator("delivery_dates")
    @classmethod
    def at_least_one_date(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_dates(v) if v is not None else v

    @field_validator("product_names")
    @classmethod
    def at_least_one_product(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_product_names(v) if v is not None else v

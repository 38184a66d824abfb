"""Unit tests for Event DTOs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.events.dtos import CreateEventDTO, UpdateEventDTO

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "title": "Salgados de sábado",
        "region": "Nagoya",
        "delivery_dates": ["10/05 (sáb)"],
        "product_names": ["Coxinha", "Kibe"],
        "whatsapp": "+81 90-1234-5678",
    }
    data.update(overrides)
    return data


class TestCreateEventDTO:
    def test_valid(self):
        dto = CreateEventDTO(**_payload())
        assert dto.seller_name == ""
        assert dto.pickup_url == ""

    def test_lists_are_cleaned(self):
        dto = CreateEventDTO(
            **_payload(
                delivery_dates=[" 10/05 ", "", "11/05"],
                product_names=["Kibe", " Coxinha ", "Kibe", "  "],
            )
        )
        assert dto.delivery_dates == ["10/05", "11/05"]
        assert dto.product_names == ["Kibe", "Coxinha"]

    @pytest.mark.parametrize("field", ["title", "region", "whatsapp"])
    def test_required_text(self, field):
        with pytest.raises(ValidationError):
            CreateEventDTO(**_payload(**{field: "   "}))

    def test_needs_a_delivery_date(self):
        with pytest.raises(ValidationError, match="delivery date"):
            CreateEventDTO(**_payload(delivery_dates=["  "]))

    def test_needs_a_product(self):
        with pytest.raises(ValidationError, match="at least one product"):
            CreateEventDTO(**_payload(product_names=[]))

    def test_title_too_long(self):
        with pytest.raises(ValidationError):
            CreateEventDTO(**_payload(title="x" * 121))


class TestUpdateEventDTO:
    def test_only_given_fields_are_dumped(self):
        dto = UpdateEventDTO(region=" Toyota ")
        assert dto.model_dump(exclude_none=True) == {"region": "Toyota"}

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            UpdateEventDTO(title="  ")

    def test_empty_product_list_rejected(self):
        with pytest.raises(ValidationError):
            UpdateEventDTO(product_names=[])

"""Unit tests for BaseModel bookkeeping and soft delete.

Exercised through the concrete models that use them: ``Event`` for
``BaseModel`` and ``Product`` for ``SoftDeleteModel``.
"""

from __future__ import annotations

import uuid

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.core.models import SoftDeleteManager, SoftDeleteQuerySet
from modules.events.models import Event
from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestBaseModel:
    def test_id_is_uuid7(self, make_event):
        event = make_event()
        assert isinstance(event.id, uuid.UUID)
        assert event.id.version == 7

    def test_ids_are_time_ordered(self, make_event):
        first = make_event(title="first")
        second = make_event(title="second")
        assert str(first.id) < str(second.id)

    def test_id_is_not_editable(self):
        assert Event._meta.get_field("id").editable is False

    def test_created_at_is_stable(self, make_event):
        event = make_event()
        created = event.created_at
        event.title = "Festa junina"
        event.save()
        event.refresh_from_db()
        assert event.created_at == created

    def test_update_fields_also_bumps_updated_at(self, make_event):
        with freeze_time("2025-05-01 10:00:00"):
            event = make_event()
        with freeze_time("2025-05-01 11:00:00"):
            event.region = "Toyota"
            event.save(update_fields=["region"])

        event.refresh_from_db()
        assert event.updated_at > event.created_at


class TestSoftDelete:
    def test_delete_tombstones_the_row(self, make_product):
        product = make_product("Coxinha")

        assert product.delete() == (1, {"products.Product": 1})

        product.refresh_from_db()
        assert product.is_deleted
        assert Product.objects.filter(pk=product.pk).exists()
        assert not Product.objects.alive().filter(pk=product.pk).exists()

    def test_second_delete_is_noop(self, make_product):
        product = make_product("Coxinha")
        product.delete()
        assert product.delete() == (0, {})

    @freeze_time("2025-06-15 12:00:00")
    def test_delete_records_timestamp(self, make_product):
        product = make_product("Coxinha")
        product.delete()
        product.refresh_from_db()
        assert product.deleted_at == timezone.now()

    def test_bulk_delete_skips_tombstoned_rows(self, make_product):
        a = make_product("Coxinha")
        b = make_product("Kibe")
        a.delete()

        count, _ = Product.objects.filter(pk__in=[a.pk, b.pk]).delete()

        assert count == 1
        b.refresh_from_db()
        assert b.is_deleted

    def test_manager_types(self):
        assert isinstance(Product.objects, SoftDeleteManager)
        assert isinstance(Product.objects.all(), SoftDeleteQuerySet)

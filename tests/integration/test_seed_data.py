"""Integration test for the ``seed_data`` management command."""

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.events.models import Event
from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.integration


def _seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


def test_seeds_catalog_events_and_orders():
    output = _seed()

    assert "Seed completed" in output
    assert get_user_model().objects.filter(username="seller", is_superuser=True).exists()
    assert Product.objects.count() == 10
    assert Event.objects.count() == 2
    assert Order.objects.exists()


def test_orders_move_tracked_stock():
    _seed()

    pudim = Product.objects.get(name="Pudim")
    sold = sum(order.quantities.get("Pudim", 0) for order in Order.objects.all())
    assert pudim.stock_qty == 4 - sold
    assert Product.objects.get(name="Marmita do dia").stock_qty is None


def test_is_idempotent():
    _seed()
    orders = Order.objects.count()

    _seed()

    assert Product.objects.count() == 10
    assert Event.objects.count() == 2
    assert Order.objects.count() == orders

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.events.models import Event
from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    """Throttle history lives in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated seller."""
    client = APIClient()
    user = get_user_model().objects.create_user(username="seller", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def make_product():
    """Factory for persisted catalog products."""

    def _make(name: str = "Coxinha", stock_qty=10, **kwargs) -> Product:
        kwargs.setdefault("price", 250)
        return Product.objects.create(name=name, stock_qty=stock_qty, **kwargs)

    return _make


@pytest.fixture()
def make_event():
    """Factory for persisted events (active unless told otherwise)."""

    def _make(product_names=("Coxinha", "Kibe"), **kwargs) -> Event:
        kwargs.setdefault("title", "Salgados de sábado")
        kwargs.setdefault("region", "Nagoya")
        kwargs.setdefault("delivery_dates", ["10/05 (sáb)", "11/05 (dom)"])
        kwargs.setdefault("whatsapp", "+81 90-1234-5678")
        return Event.objects.create(product_names=list(product_names), **kwargs)

    return _make


@pytest.fixture()
def coxinha(make_product):
    return make_product("Coxinha", stock_qty=10)


@pytest.fixture()
def kibe(make_product):
    return make_product("Kibe", stock_qty=5)


@pytest.fixture()
def event(make_event, coxinha, kibe):
    return make_event()

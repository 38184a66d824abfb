"""Unit tests for OrderService.place_order.

Covers:
- Stock decrement and the ``updated_stocks`` result.
- Untracked (unlimited) products.
- Rejections: unknown/closed event, unknown/vanished product, short stock.
- All-or-nothing behaviour on rejection.
- Stored order fields (fallback labels, location link rule).
- OrderPlaced outbox record and post-commit low-stock alerts.
"""

from __future__ import annotations

from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.events.constants import EventStatus
from modules.events.repositories.django_repository import EventDjangoRepository
from modules.orders.constants import NO_PREFERENCE, OrderStatus
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.exceptions import (
    EventNotActive,
    EventNotFound,
    InsufficientStock,
    OrderIntakeError,
    ProductMissing,
    ProductNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        event_repository=EventDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _dto(event, quantities, **kwargs) -> PlaceOrderDTO:
    kwargs.setdefault("channel", "whatsapp")
    return PlaceOrderDTO(event_id=str(event.id), quantities=quantities, **kwargs)


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------


class TestPlaceOrder:
    def test_decrements_stock_and_reports_it(self, service, event, coxinha):
        result = service.place_order(_dto(event, {"Coxinha": 3}))

        coxinha.refresh_from_db()
        assert coxinha.stock_qty == 7
        assert result.updated_stocks == {"Coxinha": 7}
        assert Order.objects.filter(id=result.order_id).exists()

    def test_multiple_products(self, service, event, coxinha, kibe):
        result = service.place_order(_dto(event, {"Coxinha": 2, "Kibe": 5}))

        coxinha.refresh_from_db()
        kibe.refresh_from_db()
        assert coxinha.stock_qty == 8
        assert kibe.stock_qty == 0
        assert result.updated_stocks == {"Coxinha": 8, "Kibe": 0}

    def test_exact_stock_is_accepted(self, service, event, kibe):
        result = service.place_order(_dto(event, {"Kibe": 5}))
        assert result.updated_stocks == {"Kibe": 0}

    def test_untracked_product_is_not_touched(self, service, make_product, make_event):
        pao = make_product("Pão de queijo", stock_qty=None)
        event = make_event(product_names=["Pão de queijo"])

        result = service.place_order(_dto(event, {"Pão de queijo": 999}))

        pao.refresh_from_db()
        assert pao.stock_qty is None
        assert result.updated_stocks == {}

    def test_stored_order_fields(self, service, event):
        result = service.place_order(
            _dto(
                event,
                {"Coxinha": 3, "Kibe": 1},
                channel="messenger",
                customer_name="Ana",
                note="Sem pimenta",
                delivery_mode="pickup",
            )
        )

        order = Order.objects.get(id=result.order_id)
        assert order.event_id == event.id
        assert order.customer_name == "Ana"
        assert order.note == "Sem pimenta"
        assert order.quantities == {"Coxinha": 3, "Kibe": 1}
        assert order.total_items == 4
        assert order.status == OrderStatus.PENDING
        assert order.channel == "messenger"
        assert order.delivery_mode == "pickup"
        assert order.delivery_driver_name == ""
        assert order.delivered_at is None

    def test_blank_date_and_slot_fall_back_to_no_preference(self, service, event):
        result = service.place_order(_dto(event, {"Coxinha": 1}))

        order = Order.objects.get(id=result.order_id)
        assert order.delivery_date == NO_PREFERENCE
        assert order.delivery_time_slot == NO_PREFERENCE

    def test_given_date_and_slot_are_kept(self, service, event):
        result = service.place_order(
            _dto(
                event,
                {"Coxinha": 1},
                delivery_date="10/05 (sáb)",
                delivery_time_slot="18h-20h",
            )
        )

        order = Order.objects.get(id=result.order_id)
        assert order.delivery_date == "10/05 (sáb)"
        assert order.delivery_time_slot == "18h-20h"

    def test_location_link_dropped_unless_delivery(self, service, event):
        result = service.place_order(
            _dto(
                event,
                {"Coxinha": 1},
                delivery_mode="pickup",
                location_link="https://maps.example/x",
            )
        )
        assert Order.objects.get(id=result.order_id).location_link == ""

    def test_location_link_kept_for_delivery(self, service, event):
        result = service.place_order(
            _dto(
                event,
                {"Coxinha": 1},
                delivery_mode="delivery",
                location_link="https://maps.example/x",
            )
        )
        assert (
            Order.objects.get(id=result.order_id).location_link
            == "https://maps.example/x"
        )

    def test_duplicate_names_resolve_to_oldest_product(
        self, service, event, coxinha, make_product
    ):
        newer = make_product("Coxinha", stock_qty=50)

        service.place_order(_dto(event, {"Coxinha": 1}))

        coxinha.refresh_from_db()
        newer.refresh_from_db()
        assert coxinha.stock_qty == 9
        assert newer.stock_qty == 50

    def test_records_order_placed_outbox_event(self, service, event):
        result = service.place_order(_dto(event, {"Coxinha": 2}))

        outbox = OutboxEvent.objects.get(aggregate_id=str(result.order_id))
        assert outbox.event_type == "OrderPlaced"
        assert outbox.topic == "orders"
        assert outbox.payload["quantities"] == {"Coxinha": 2}
        assert outbox.payload["total_items"] == 2
        assert outbox.payload["sales_event_id"] == str(event.id)

    def test_order_row_is_written_once(
        self, service, event, coxinha, django_assert_max_num_queries
    ):
        with django_assert_max_num_queries(20) as captured:
            service.place_order(_dto(event, {"Coxinha": 1}))

        statements = [query["sql"] for query in captured.captured_queries]
        assert sum(sql.startswith('INSERT INTO "orders"') for sql in statements) == 1
        assert not any(sql.startswith('UPDATE "orders"') for sql in statements)


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------


class TestPlaceOrderRejections:
    def test_unknown_event(self, service, coxinha):
        dto = PlaceOrderDTO(
            event_id=str(uuid4()), channel="whatsapp", quantities={"Coxinha": 1}
        )
        with pytest.raises(EventNotFound, match="^Event not found$"):
            service.place_order(dto)

    def test_malformed_event_id_is_not_found(self, service):
        dto = PlaceOrderDTO(event_id="abc", channel="whatsapp", quantities={"A": 1})
        with pytest.raises(EventNotFound):
            service.place_order(dto)

    @pytest.mark.parametrize("status", [EventStatus.CLOSED, EventStatus.CANCELLED])
    def test_inactive_event(self, service, make_event, coxinha, status):
        event = make_event(status=status)
        with pytest.raises(EventNotActive, match="^Event is not active$"):
            service.place_order(_dto(event, {"Coxinha": 1}))

        coxinha.refresh_from_db()
        assert coxinha.stock_qty == 10

    def test_unknown_product(self, service, event):
        with pytest.raises(ProductNotFound, match="^Product not found: Pastel$"):
            service.place_order(_dto(event, {"Pastel": 1}))

    def test_soft_deleted_product_is_not_found(self, service, event, coxinha):
        coxinha.delete()
        with pytest.raises(ProductNotFound):
            service.place_order(_dto(event, {"Coxinha": 1}))

    def test_product_vanished_before_lock(self, event, coxinha):
        class VanishingProducts(ProductDjangoRepository):
            def get_for_update(self, id):
                return None

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            event_repository=EventDjangoRepository(),
            product_repository=VanishingProducts(),
        )
        with pytest.raises(ProductMissing, match="^Product missing: Coxinha$"):
            service.place_order(_dto(event, {"Coxinha": 1}))

    def test_insufficient_stock_message(self, service, event, coxinha):
        with pytest.raises(InsufficientStock) as exc_info:
            service.place_order(_dto(event, {"Coxinha": 11}))

        assert str(exc_info.value) == 'Insufficient stock for "Coxinha". Left: 10'
        coxinha.refresh_from_db()
        assert coxinha.stock_qty == 10
        assert Order.objects.count() == 0

    def test_rejection_rolls_back_earlier_decrements(self, service, event, coxinha, kibe):
        with pytest.raises(InsufficientStock):
            service.place_order(_dto(event, {"Coxinha": 3, "Kibe": 6}))

        coxinha.refresh_from_db()
        kibe.refresh_from_db()
        assert coxinha.stock_qty == 10
        assert kibe.stock_qty == 5
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0

    def test_all_rejections_share_a_base_class(self):
        for exc in (
            EventNotFound(),
            EventNotActive(),
            ProductNotFound("x"),
            ProductMissing("x"),
            InsufficientStock("x", 0),
        ):
            assert isinstance(exc, OrderIntakeError)


# ---------------------------------------------------------------------------
# Low-stock alerts
# ---------------------------------------------------------------------------


class TestLowStockAlerts:
    def test_alert_queued_after_commit(
        self, service, event, kibe, django_capture_on_commit_callbacks
    ):
        with patch("modules.products.tasks.notify_low_stock.delay") as delay:
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                service.place_order(_dto(event, {"Kibe": 3}))

            delay.assert_not_called()
            for callback in callbacks:
                callback()

        delay.assert_called_once_with(str(kibe.id))

    def test_no_alert_above_threshold(
        self, service, event, coxinha, django_capture_on_commit_callbacks
    ):
        with patch("modules.products.tasks.notify_low_stock.delay") as delay:
            with django_capture_on_commit_callbacks(execute=True):
                service.place_order(_dto(event, {"Coxinha": 1}))

        delay.assert_not_called()

    def test_custom_threshold(
        self, service, make_product, make_event, django_capture_on_commit_callbacks
    ):
        pudim = make_product("Pudim", stock_qty=20, low_stock_threshold=10)
        event = make_event(product_names=["Pudim"])

        with patch("modules.products.tasks.notify_low_stock.delay") as delay:
            with django_capture_on_commit_callbacks(execute=True):
                service.place_order(_dto(event, {"Pudim": 10}))

        delay.assert_called_once_with(str(pudim.id))

    def test_no_alert_when_order_rejected(
        self, service, event, kibe, django_capture_on_commit_callbacks
    ):
        with patch("modules.products.tasks.notify_low_stock.delay") as delay:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                with pytest.raises(InsufficientStock):
                    service.place_order(_dto(event, {"Kibe": 6}))

        assert callbacks == []
        delay.assert_not_called()

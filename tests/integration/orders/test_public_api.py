"""Integration tests for the public order intake endpoint.

``POST /api/v1/public/orders/`` is anonymous, callable from any origin and
answers every outcome with the ``{"ok": ...}`` envelope.
"""

from __future__ import annotations

import json
import uuid
from unittest.mock import patch

import pytest

from modules.core.models import OutboxEvent
from modules.events.constants import EventStatus
from modules.events.models import Event
from modules.orders.constants import NO_PREFERENCE, OrderStatus
from modules.orders.models import Order
from modules.orders.serializers import PlaceOrderSerializer
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/public/orders/"


def _payload(event, **overrides) -> dict:
    data = {
        "eventId": str(event.id),
        "channel": "whatsapp",
        "quantities": {"Coxinha": 3, "Kibe": 0},
        "customerName": "Ana",
    }
    data.update(overrides)
    return data


def _stock(product: Product):
    product.refresh_from_db()
    return product.stock_qty


# ===========================================================================
# Accepted orders
# ===========================================================================


class TestPlaceOrder:
    def test_places_order_and_decrements_stock(self, api_client, event, coxinha, kibe):
        response = api_client.post(URL, _payload(event), format="json")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["updatedStocks"] == {"Coxinha": 7}
        assert _stock(coxinha) == 7
        assert _stock(kibe) == 5

        order = Order.objects.get(id=body["orderId"])
        assert order.quantities == {"Coxinha": 3}
        assert order.total_items == 3
        assert order.status == OrderStatus.PENDING
        assert order.customer_name == "Ana"
        assert order.delivery_date == NO_PREFERENCE
        assert order.delivery_time_slot == NO_PREFERENCE

    def test_no_authentication_required(self, api_client, event):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-real-token")
        response = api_client.post(URL, _payload(event), format="json")
        assert response.status_code == 200

    def test_records_order_placed_in_outbox(self, api_client, event):
        body = api_client.post(URL, _payload(event), format="json").json()

        outbox = OutboxEvent.objects.get(aggregate_id=body["orderId"])
        assert outbox.event_type == "OrderPlaced"
        assert outbox.topic == "orders"
        assert outbox.payload["quantities"] == {"Coxinha": 3}

    def test_quantity_is_clamped_to_max(self, api_client, make_event, make_product):
        make_product("Pão", stock_qty=None)
        event = make_event(product_names=["Pão"])

        body = api_client.post(
            URL, _payload(event, quantities={"Pão": 1500}), format="json"
        ).json()

        assert body["ok"] is True
        assert Order.objects.get(id=body["orderId"]).quantities == {"Pão": 999}

    def test_untracked_product_is_not_decremented(self, api_client, make_event, make_product):
        bread = make_product("Pão", stock_qty=None)
        event = make_event(product_names=["Pão"])

        body = api_client.post(URL, _payload(event, quantities={"Pão": 5}), format="json").json()

        assert body == {"ok": True, "orderId": body["orderId"], "updatedStocks": {}}
        assert _stock(bread) is None

    def test_selling_the_last_unit(self, api_client, event, kibe):
        body = api_client.post(URL, _payload(event, quantities={"Kibe": 5}), format="json").json()

        assert body["updatedStocks"] == {"Kibe": 0}
        kibe.refresh_from_db()
        assert kibe.is_out_of_stock

    def test_text_fields_are_trimmed_and_capped(self, api_client, event):
        body = api_client.post(
            URL,
            _payload(
                event,
                customerName="  " + "A" * 100,
                note=12345,
                deliveryDate=" 10/05 (sáb) ",
            ),
            format="json",
        ).json()

        order = Order.objects.get(id=body["orderId"])
        assert order.customer_name == "A" * 80
        assert order.note == ""
        assert order.delivery_date == "10/05 (sáb)"

    def test_lone_surrogates_are_dropped_from_text(self, api_client, event):
        body = json.dumps(_payload(event, customerName="Ana \ud800", note="\udfffsem cebola"))

        response = api_client.post(URL, body, content_type="application/json")

        assert response.status_code == 200
        order = Order.objects.get(id=response.json()["orderId"])
        assert order.customer_name == "Ana"
        assert order.note == "sem cebola"

    @pytest.mark.parametrize(
        "mode, expected_link",
        [("delivery", "https://maps.app.goo.gl/x"), ("pickup", ""), ("none", "")],
    )
    def test_location_link_only_kept_for_delivery(self, api_client, event, mode, expected_link):
        body = api_client.post(
            URL,
            _payload(event, deliveryMode=mode, locationLink="https://maps.app.goo.gl/x"),
            format="json",
        ).json()

        order = Order.objects.get(id=body["orderId"])
        assert order.delivery_mode == mode
        assert order.location_link == expected_link

    def test_unknown_delivery_mode_falls_back_to_pickup(self, api_client, event):
        body = api_client.post(URL, _payload(event, deliveryMode="drone"), format="json").json()
        assert Order.objects.get(id=body["orderId"]).delivery_mode == "pickup"

    def test_public_path_allows_any_origin(self, api_client, event):
        response = api_client.post(
            URL,
            _payload(event),
            format="json",
            HTTP_ORIGIN="https://customer.example.jp",
        )
        assert response["Access-Control-Allow-Origin"] in (
            "*",
            "https://customer.example.jp",
        )


# ===========================================================================
# Rejections
# ===========================================================================


class TestRejections:
    def _assert_rejected(self, response, error: str) -> None:
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": error}

    def test_insufficient_stock(self, api_client, event, coxinha):
        response = api_client.post(URL, _payload(event, quantities={"Coxinha": 11}), format="json")

        self._assert_rejected(response, 'Insufficient stock for "Coxinha". Left: 10')
        assert _stock(coxinha) == 10
        assert not Order.objects.exists()

    def test_dto_errors_keep_envelope(self, api_client, event):
        with patch.object(
            PlaceOrderSerializer, "to_dto", side_effect=ValueError("Select at least 1 item")
        ):
            response = api_client.post(URL, _payload(event), format="json")

        self._assert_rejected(response, "Select at least 1 item")
        assert not Order.objects.exists()

    def test_invalid_channel(self, api_client, event):
        response = api_client.post(URL, _payload(event, channel="sms"), format="json")
        self._assert_rejected(response, "Invalid channel")

    def test_missing_channel(self, api_client, event):
        payload = _payload(event)
        del payload["channel"]
        self._assert_rejected(api_client.post(URL, payload, format="json"), "Invalid channel")

    @pytest.mark.parametrize("event_id", ["", "   ", None])
    def test_missing_event_id(self, api_client, event, event_id):
        response = api_client.post(URL, _payload(event, eventId=event_id), format="json")
        self._assert_rejected(response, "Missing eventId")

    def test_event_id_checked_before_channel(self, api_client, event):
        response = api_client.post(
            URL, _payload(event, eventId="", channel="sms"), format="json"
        )
        self._assert_rejected(response, "Missing eventId")

    def test_non_object_body(self, api_client):
        response = api_client.post(URL, ["not", "an", "object"], format="json")
        self._assert_rejected(response, "Missing eventId")

    def test_quantities_as_list(self, api_client, event):
        response = api_client.post(URL, _payload(event, quantities=[1, 2]), format="json")
        self._assert_rejected(response, "Invalid quantities")

    @pytest.mark.parametrize(
        "quantities",
        [{}, {"Coxinha": 0}, {"Coxinha": "abc"}, {"  ": 3}, {"Coxinha": -4}],
    )
    def test_empty_cart(self, api_client, event, coxinha, quantities):
        response = api_client.post(URL, _payload(event, quantities=quantities), format="json")

        self._assert_rejected(response, "Select at least 1 item")
        assert _stock(coxinha) == 10
        assert not Order.objects.exists()

    def test_unknown_event(self, api_client, event):
        response = api_client.post(URL, _payload(event, eventId=str(uuid.uuid4())), format="json")
        self._assert_rejected(response, "Event not found")

    def test_malformed_event_id(self, api_client, event):
        response = api_client.post(URL, _payload(event, eventId="abc"), format="json")
        self._assert_rejected(response, "Event not found")

    @pytest.mark.parametrize("status", [EventStatus.CLOSED, EventStatus.CANCELLED])
    def test_inactive_event(self, api_client, event, coxinha, status):
        Event.objects.filter(id=event.id).update(status=status)

        response = api_client.post(URL, _payload(event), format="json")

        self._assert_rejected(response, "Event is not active")
        assert _stock(coxinha) == 10

    def test_unknown_product(self, api_client, event):
        response = api_client.post(
            URL, _payload(event, quantities={"Coxinha": 1, "Esfiha": 2}), format="json"
        )
        self._assert_rejected(response, "Product not found: Esfiha")

    def test_product_names_are_case_sensitive(self, api_client, event):
        response = api_client.post(URL, _payload(event, quantities={"coxinha": 1}), format="json")
        self._assert_rejected(response, "Product not found: coxinha")

    def test_deleted_product(self, api_client, event, kibe):
        kibe.delete()
        response = api_client.post(URL, _payload(event, quantities={"Kibe": 1}), format="json")
        self._assert_rejected(response, "Product not found: Kibe")


# ===========================================================================
# Method handling
# ===========================================================================


class TestMethods:
    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete"])
    def test_other_methods_are_405(self, api_client, method):
        response = getattr(api_client, method)(URL)

        assert response.status_code == 405
        assert response.json() == {"ok": False, "error": "Method not allowed"}

    def test_malformed_json_keeps_envelope(self, api_client):
        response = api_client.post(URL, "{not json", content_type="application/json")

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["error"]

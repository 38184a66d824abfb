"""Integration tests for rate limiting of the public endpoints."""

from __future__ import annotations

import pytest
from rest_framework.throttling import ScopedRateThrottle

pytestmark = pytest.mark.integration

ORDER_URL = "/api/v1/public/orders/"


@pytest.fixture()
def tight_rates(monkeypatch):
    monkeypatch.setattr(
        ScopedRateThrottle,
        "THROTTLE_RATES",
        {"order_intake": "3/minute", "public_catalog": "2/minute"},
    )


def _order(event) -> dict:
    return {"eventId": str(event.id), "channel": "whatsapp", "quantities": {"Coxinha": 1}}


def test_order_intake_is_throttled_with_envelope(api_client, event, tight_rates):
    for _ in range(3):
        assert api_client.post(ORDER_URL, _order(event), format="json").status_code == 200

    response = api_client.post(ORDER_URL, _order(event), format="json")

    assert response.status_code == 429
    body = response.json()
    assert body["ok"] is False
    assert body["error"]
    assert "Retry-After" in response


def test_rejected_requests_count_too(api_client, event, tight_rates):
    for _ in range(3):
        api_client.post(ORDER_URL, {"channel": "sms"}, format="json")

    assert api_client.post(ORDER_URL, _order(event), format="json").status_code == 429


def test_limit_is_per_client_address(api_client, event, tight_rates):
    for _ in range(3):
        api_client.post(ORDER_URL, _order(event), format="json", HTTP_X_FORWARDED_FOR="203.0.113.1")

    blocked = api_client.post(
        ORDER_URL, _order(event), format="json", HTTP_X_FORWARDED_FOR="203.0.113.1"
    )
    other = api_client.post(
        ORDER_URL, _order(event), format="json", HTTP_X_FORWARDED_FOR="203.0.113.2"
    )

    assert blocked.status_code == 429
    assert other.status_code == 200


def test_public_event_has_its_own_budget(api_client, event, tight_rates):
    for _ in range(3):
        api_client.post(ORDER_URL, _order(event), format="json")

    url = f"/api/v1/public/events/{event.id}/"
    assert api_client.get(url).status_code == 200
    assert api_client.get(url).status_code == 200
    assert api_client.get(url).status_code == 429

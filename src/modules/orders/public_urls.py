"""Public storefront routes for orders."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import PlaceOrderView

urlpatterns = [
    path("orders/", PlaceOrderView.as_view(), name="public-order-create"),
]

"""Order URL configuration (seller and driver API)."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import DeliveryViewSet, OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")
router.register("deliveries", DeliveryViewSet, basename="delivery")

urlpatterns = router.urls

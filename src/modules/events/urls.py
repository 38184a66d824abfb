"""Event URL configuration (seller API)."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.events.views import EventViewSet

router = DefaultRouter(trailing_slash=True)
router.register("events", EventViewSet, basename="event")

urlpatterns = router.urls

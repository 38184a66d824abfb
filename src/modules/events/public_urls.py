"""Public storefront routes for events."""

from __future__ import annotations

from django.urls import path

from modules.events.views import PublicEventView

urlpatterns = [
    path("events/<str:pk>/", PublicEventView.as_view(), name="public-event"),
]

"""URL routing for bookings and events of one club."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import BookingViewSet, EventViewSet

router = SimpleRouter()
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"events", EventViewSet, basename="event")

urlpatterns = [
    path("", include(router.urls)),
]

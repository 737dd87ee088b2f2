"""URL routing for the facility registry."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import FacilityViewSet

router = SimpleRouter()
router.register(r"", FacilityViewSet, basename="facility")

urlpatterns = [
    path("", include(router.urls)),
]

"""URL routing for clubs and their members/teams."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter, SimpleRouter  # type: ignore

from .views import ClubViewSet, MemberViewSet, TeamViewSet

router = DefaultRouter()
router.register(r"", ClubViewSet, basename="club")

member_router = SimpleRouter()
member_router.register(r"", MemberViewSet, basename="member")

team_router = SimpleRouter()
team_router.register(r"", TeamViewSet, basename="team")

urlpatterns = [
    path("<int:club_id>/members/", include(member_router.urls)),
    path("<int:club_id>/teams/", include(team_router.urls)),
    path("", include(router.urls)),
]

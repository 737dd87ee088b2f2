"""API views for clubs, members and teams."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import viewsets  # type: ignore

from .models import Club, Member, Team
from .serializers import ClubSerializer, MemberSerializer, TeamSerializer


class ClubScopedMixin:
    """Resolves the club from the URL and scopes querysets to it."""

    club_lookup_url_kwarg = "club_id"

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        self.club_object = get_object_or_404(Club, pk=kwargs.get(self.club_lookup_url_kwarg))

    def get_club(self) -> Club | None:
        # Schema generation builds views without running initial()
        return getattr(self, "club_object", None)

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["club"] = getattr(self, "club_object", None)
        return context


class ClubViewSet(viewsets.ModelViewSet):
    """CRUD for clubs."""

    queryset = Club.objects.all()
    serializer_class = ClubSerializer


class MemberViewSet(ClubScopedMixin, viewsets.ModelViewSet):
    """CRUD for the members of one club."""

    serializer_class = MemberSerializer

    def get_queryset(self):  # type: ignore
        return Member.objects.filter(club=self.get_club())

    def perform_create(self, serializer):  # type: ignore
        serializer.save(club=self.get_club())


class TeamViewSet(ClubScopedMixin, viewsets.ModelViewSet):
    """CRUD for the teams of one club."""

    serializer_class = TeamSerializer

    def get_queryset(self):  # type: ignore
        return Team.objects.filter(club=self.get_club())

    def perform_create(self, serializer):  # type: ignore
        serializer.save(club=self.get_club())

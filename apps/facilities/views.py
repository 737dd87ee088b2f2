"""API views for the facility registry."""

from __future__ import annotations

import logging

from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.clubs.views import ClubScopedMixin

from .models import Facility
from .serializers import FacilitySerializer

logger = logging.getLogger(__name__)


class FacilityViewSet(ClubScopedMixin, viewsets.ModelViewSet):
    """CRUD for the facilities of one club."""

    serializer_class = FacilitySerializer

    def get_queryset(self):  # type: ignore
        return Facility.objects.filter(club=self.get_club())

    def perform_create(self, serializer):  # type: ignore
        facility = serializer.save(club=self.get_club())
        logger.info(f"Facility {facility.id} created for club {facility.club_id}")

    def destroy(self, request, *args, **kwargs):  # type: ignore
        facility: Facility = self.get_object()
        if facility.bookings.exists():
            return Response(
                {"detail": "Facility still has bookings. Delete or move them first."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().destroy(request, *args, **kwargs)

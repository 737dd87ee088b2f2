"""URL routing for the club calendar."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import CalendarItemsView, CalendarLayoutView, CalendarRescheduleView, CalendarResizeView

urlpatterns = [
    path("", CalendarItemsView.as_view(), name="calendar-items"),
    path("layout/", CalendarLayoutView.as_view(), name="calendar-layout"),
    path("reschedule/", CalendarRescheduleView.as_view(), name="calendar-reschedule"),
    path("resize/", CalendarResizeView.as_view(), name="calendar-resize"),
]

"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)

STATUS_SUBJECTS = {
    Booking.Status.CONFIRMED: "Booking confirmed: {title}",
    Booking.Status.CANCELLED: "Booking cancelled: {title}",
}


@shared_task(name="bookings.notify_booking_status_change")
def notify_booking_status_change(booking_id: int) -> bool:
    """Email the booking contact about a confirmation or cancellation."""
    try:
        booking = Booking.objects.select_related("club", "facility").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for status notification")
        return False

    subject_template = STATUS_SUBJECTS.get(booking.status)
    if subject_template is None:
        logger.info(f"[NOTIFICATION] No notification for booking {booking_id} in status {booking.status}")
        return False
    if not booking.contact_email:
        logger.info(f"[NOTIFICATION] Booking {booking_id} has no contact email, skipping")
        return False

    local_start = timezone.localtime(booking.start_time, booking.club.tzinfo)
    place = booking.facility.name if booking.facility_id else (booking.location or booking.club.name)
    greeting = f"Hello {booking.contact_person}," if booking.contact_person else "Hello,"
    message = (
        f"{greeting}\n\n"
        f"the booking \"{booking.title}\" at {place} on "
        f"{local_start:%d.%m.%Y %H:%M} is now {booking.get_status_display()}.\n\n"
        f"{booking.club.name}"
    )
    send_mail(
        subject_template.format(title=booking.title),
        message,
        settings.DEFAULT_FROM_EMAIL,
        [booking.contact_email],
        fail_silently=False,
    )
    logger.info(f"[NOTIFICATION] Status mail for booking {booking_id} sent to {booking.contact_email}")
    return True

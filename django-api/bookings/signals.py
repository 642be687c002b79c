"""Django signals for cache invalidation.

Any change to the records a fulfillment snapshot is built from drops the
lead's cached status, so the next read re-classifies from fresh facts.
"""

import logging

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from bookings.cache import fulfillment_cache_key
from bookings.models import Booking, BookingForm, BookingFormCourse

logger = logging.getLogger(__name__)


def _invalidate(lead_id) -> None:
    cache.delete(fulfillment_cache_key(lead_id))
    logger.debug("Fulfillment cache invalidated for lead %s", lead_id)


@receiver([post_save, post_delete], sender=BookingForm)
def invalidate_booking_form_cache(sender, instance, **kwargs):
    """Invalidate caches when a booking form is saved or deleted."""
    _invalidate(instance.lead_id)


@receiver([post_save, post_delete], sender=BookingFormCourse)
def invalidate_course_cache(sender, instance, **kwargs):
    """Invalidate caches when a roster course is saved or deleted."""
    lead_id = (
        BookingForm.objects.filter(id=instance.booking_form_id)
        .values_list("lead_id", flat=True)
        .first()
    )
    if lead_id is not None:
        _invalidate(lead_id)


@receiver([post_save, post_delete], sender=Booking)
def invalidate_booking_cache(sender, instance, **kwargs):
    """Invalidate caches when a booking is saved or deleted."""
    _invalidate(instance.lead_id)

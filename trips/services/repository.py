"""
Persistence for trip records.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F, QuerySet

from ..models import Trip, TripNumberSequence
from .filtering import TripFilterCriteria
from .validation import NormalizedTrip

logger = logging.getLogger(__name__)


class TripRepository:
    """
    Stores and retrieves Trip records.

    Trip numbers are drawn from a counter row that is locked and incremented
    in the same transaction as the insert, so concurrent creations never
    share a number.
    """

    def __init__(self, sequence_name: Optional[str] = None):
        self.sequence_name = sequence_name or settings.TRIP_NUMBER_SEQUENCE

    def _next_trip_number(self) -> int:
        sequence, created = TripNumberSequence.objects.select_for_update().get_or_create(
            name=self.sequence_name,
            defaults={'value': Trip.objects.count()},
        )
        if created:
            logger.warning(f"Trip number sequence '{self.sequence_name}' was missing, seeded at {sequence.value}")
        TripNumberSequence.objects.filter(pk=sequence.pk).update(value=F('value') + 1)
        sequence.refresh_from_db(fields=['value'])
        return sequence.value

    def create(self, normalized: NormalizedTrip) -> Trip:
        """
        Persist a validated trip.

        Args:
            normalized: Output of a successful validation

        Returns:
            The stored Trip with its id and trip_number assigned
        """
        with transaction.atomic():
            trip_number = self._next_trip_number()
            trip = Trip.objects.create(
                trip_number=trip_number,
                **normalized.as_model_fields()
            )
        logger.info(f"Created trip {trip.id} with number {trip.trip_number}")
        return trip

    def list(self, criteria: Optional[TripFilterCriteria] = None) -> QuerySet:
        """Trips matching ``criteria``, newest start time first."""
        queryset = Trip.objects.all()
        if criteria is not None and not criteria.is_empty:
            queryset = queryset.filter(criteria.as_q())
        return queryset.order_by('-start_time', '-trip_number')

    def get(self, trip_id) -> Trip:
        return Trip.objects.get(pk=trip_id)

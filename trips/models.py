"""
Trip models for the trip diary.
"""

import uuid

from django.db import models
from django.core.validators import MinValueValidator

from .choices import TravelMode, TripPurpose, TripFrequency


class Trip(models.Model):
    """
    A single recorded journey.

    Trips are created once through a validated submission and never
    updated afterwards. ``trip_number`` comes from ``TripNumberSequence``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip_number = models.PositiveIntegerField(
        unique=True,
        editable=False,
        help_text="Sequential trip number"
    )
    origin_lat = models.FloatField(help_text="Origin latitude")
    origin_lon = models.FloatField(help_text="Origin longitude")
    destination_lat = models.FloatField(help_text="Destination latitude")
    destination_lon = models.FloatField(help_text="Destination longitude")
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()
    mode = models.CharField(max_length=20, choices=TravelMode.choices)
    distance = models.FloatField(
        validators=[MinValueValidator(0)],
        help_text="Distance travelled in kilometers"
    )
    purpose = models.CharField(max_length=20, choices=TripPurpose.choices)
    companions = models.PositiveIntegerField(default=0)
    frequency = models.CharField(max_length=20, choices=TripFrequency.choices)
    cost = models.FloatField(
        validators=[MinValueValidator(0)],
        help_text="Trip cost in currency units"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-start_time', '-trip_number']
        verbose_name = 'Trip'
        verbose_name_plural = 'Trips'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='trip_ends_after_start',
            ),
            models.CheckConstraint(
                condition=models.Q(distance__gte=0) & models.Q(cost__gte=0),
                name='trip_non_negative_amounts',
            ),
        ]

    def __str__(self):
        return f"Trip #{self.trip_number}: {self.mode} for {self.purpose} at {self.start_time:%Y-%m-%d %H:%M}"


class TripNumberSequence(models.Model):
    """Named counter row, incremented under a row lock to number trips."""

    name = models.CharField(max_length=50, unique=True)
    value = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.name}={self.value}"

"""Services module for trip validation, filtering and persistence."""

from .filtering import InvalidFilterDate, TripFilterCriteria, filter_trips
from .repository import TripRepository
from .validation import MalformedTripPayload, ValidationResult, describe_rules, validate_trip

__all__ = [
    'InvalidFilterDate',
    'TripFilterCriteria',
    'filter_trips',
    'TripRepository',
    'MalformedTripPayload',
    'ValidationResult',
    'describe_rules',
    'validate_trip',
]

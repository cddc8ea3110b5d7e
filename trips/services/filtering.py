"""
Trip filtering by mode, purpose and start-date window.

``TripFilterCriteria.matches`` is the in-memory predicate used on an
already-fetched collection; ``TripFilterCriteria.as_q`` is the same
predicate expressed as a database query.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, List, Optional

from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from .validation import fits_storage, parse_timestamp


END_OF_DAY = time(23, 59, 59, 999000)

# Trips serialized by the API use camelCase keys.
_JSON_KEYS = {'start_time': 'startTime'}


def start_of_day(day: date) -> datetime:
    """Local midnight at the start of ``day``."""
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day: date) -> datetime:
    """The last millisecond of ``day`` in local time."""
    return timezone.make_aware(datetime.combine(day, END_OF_DAY))


class InvalidFilterDate(ValueError):
    """Raised when a date parameter is malformed or outside the storable range."""

    def __init__(self, param: str, message: str):
        super().__init__(message)
        self.param = param


def parse_filter_day(value: Any, param: str) -> Optional[date]:
    """
    Read a calendar-day filter parameter.

    Args:
        value: ``YYYY-MM-DD`` string, a date, or blank/None for no bound
        param: Parameter name reported in errors (e.g. ``startDate``)

    Returns:
        The date, or None when no bound was given

    Raises:
        InvalidFilterDate: If the value is not a date or its day window
            cannot be stored
    """
    if value is None or value == '':
        return None
    if isinstance(value, str):
        try:
            day = parse_date(value.strip())
        except ValueError:
            day = None
        if day is None:
            raise InvalidFilterDate(param, "Date must be in YYYY-MM-DD format.")
    else:
        day = value
    if not (fits_storage(start_of_day(day)) and fits_storage(end_of_day(day))):
        raise InvalidFilterDate(param, "Date is out of range.")
    return day


def _trip_value(trip: Any, name: str) -> Any:
    if isinstance(trip, Mapping):
        return trip.get(_JSON_KEYS.get(name, name))
    return getattr(trip, name, None)


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return timezone.make_aware(value) if timezone.is_naive(value) else value
    return parse_timestamp(value)


@dataclass(frozen=True)
class TripFilterCriteria:
    """
    Optional filter criteria. Unset (None or empty) criteria match anything.

    ``start_date`` and ``end_date`` are inclusive calendar-day bounds on the
    trip's start time.
    """
    mode: Optional[str] = None
    purpose: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        for name in ('mode', 'purpose', 'start_date', 'end_date'):
            if getattr(self, name) == '':
                object.__setattr__(self, name, None)

    @classmethod
    def from_params(cls, mode=None, purpose=None, start_date=None, end_date=None) -> 'TripFilterCriteria':
        """
        Build criteria from request-style parameters.

        Blank values are wildcards. Dates may be ``YYYY-MM-DD`` strings or
        date objects; invalid ones raise ``InvalidFilterDate``.
        """
        return cls(
            mode=mode or None,
            purpose=purpose or None,
            start_date=parse_filter_day(start_date, 'startDate'),
            end_date=parse_filter_day(end_date, 'endDate'),
        )

    @property
    def is_empty(self) -> bool:
        return not any([self.mode, self.purpose, self.start_date, self.end_date])

    @property
    def window_start(self) -> Optional[datetime]:
        return start_of_day(self.start_date) if self.start_date else None

    @property
    def window_end(self) -> Optional[datetime]:
        return end_of_day(self.end_date) if self.end_date else None

    def matches(self, trip: Any) -> bool:
        """Check whether a trip (model instance or API mapping) satisfies every set criterion."""
        if self.mode and _trip_value(trip, 'mode') != self.mode:
            return False
        if self.purpose and _trip_value(trip, 'purpose') != self.purpose:
            return False

        if self.start_date or self.end_date:
            started = _as_datetime(_trip_value(trip, 'start_time'))
            if started is None:
                return False
            if self.start_date and started < self.window_start:
                return False
            if self.end_date and started > self.window_end:
                return False

        return True

    def as_q(self) -> Q:
        """Build the equivalent Django query for the Trip model."""
        query = Q()
        if self.mode:
            query &= Q(mode=self.mode)
        if self.purpose:
            query &= Q(purpose=self.purpose)
        if self.start_date:
            query &= Q(start_time__gte=self.window_start)
        if self.end_date:
            query &= Q(start_time__lte=self.window_end)
        return query


def filter_trips(trips: Iterable[Any], criteria: Optional[TripFilterCriteria] = None) -> List[Any]:
    """
    Return the trips matching ``criteria``, keeping the input order.

    With no criteria the whole collection is returned unchanged.
    """
    if criteria is None or criteria.is_empty:
        return list(trips)
    return [trip for trip in trips if criteria.matches(trip)]

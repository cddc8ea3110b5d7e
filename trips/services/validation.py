"""
Trip payload validation.

The rules are kept in a single declarative table (``TRIP_RULES``) that is
used both by the API and, through the form-schema endpoint, by the
interactive form. Every rule runs in one pass; for each field the first
failing rule supplies the message.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Dict, List, Optional, Union

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..choices import TravelMode, TripFrequency, TripPurpose


FIELD_NAMES = (
    'origin',
    'destination',
    'startTime',
    'endTime',
    'mode',
    'distance',
    'purpose',
    'companions',
    'frequency',
    'cost',
)

# Initial state of the trip form. Companions starts at 0 while distance and
# cost start empty and must be entered.
FORM_DEFAULTS = {
    'origin': {'lat': '', 'lon': ''},
    'destination': {'lat': '', 'lon': ''},
    'startTime': '',
    'endTime': '',
    'mode': TravelMode.CAR.value,
    'distance': '',
    'purpose': TripPurpose.WORK.value,
    'companions': 0,
    'frequency': TripFrequency.DAILY.value,
    'cost': '',
}

# Upper bound of the PositiveIntegerField that stores companions.
MAX_COMPANIONS = 2147483647


class MalformedTripPayload(ValueError):
    """Raised when a payload cannot be read as a trip at all."""


class Empty:
    """A numeric input with no usable value (missing, blank or unparseable)."""

    __slots__ = ()

    def __repr__(self):
        return 'EMPTY'


EMPTY = Empty()


@dataclass(frozen=True)
class Parsed:
    """A numeric input that parsed to a finite number."""
    value: float


NumericInput = Union[Empty, Parsed]


def parse_number(raw: Any) -> NumericInput:
    """
    Parse a loosely-typed form value into ``Parsed`` or ``EMPTY``.

    Booleans, blank strings, non-numeric strings and non-finite values are
    all treated as empty.
    """
    if raw is None or isinstance(raw, bool):
        return EMPTY
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return EMPTY
        try:
            value = float(text)
        except ValueError:
            return EMPTY
    else:
        return EMPTY
    if not math.isfinite(value):
        return EMPTY
    return Parsed(value)


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp.

    Naive values are read in the current (local) time zone. The result is
    truncated to millisecond precision. Returns None when unparseable or
    when the instant cannot be expressed in UTC for storage.
    """
    if not isinstance(raw, str):
        return None
    try:
        value = parse_datetime(raw.strip())
    except ValueError:
        return None
    if value is None:
        return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    if not fits_storage(value):
        return None
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def fits_storage(value: datetime) -> bool:
    """Whether an aware datetime converts to UTC without leaving the datetime range."""
    try:
        value.astimezone(dt_timezone.utc)
    except OverflowError:
        return False
    return True


@dataclass(frozen=True)
class CoordinateInput:
    lat: NumericInput
    lon: NumericInput

    @classmethod
    def from_raw(cls, raw: Any) -> 'CoordinateInput':
        if not isinstance(raw, Mapping):
            return cls(lat=EMPTY, lon=EMPTY)
        return cls(lat=parse_number(raw.get('lat')), lon=parse_number(raw.get('lon')))

    @property
    def is_complete(self) -> bool:
        return isinstance(self.lat, Parsed) and isinstance(self.lon, Parsed)

    @property
    def in_range(self) -> bool:
        return -90 <= self.lat.value <= 90 and -180 <= self.lon.value <= 180


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(frozen=True)
class NormalizedTrip:
    """A validated trip with strict types, ready for persistence."""
    origin: Coordinate
    destination: Coordinate
    start_time: datetime
    end_time: datetime
    mode: str
    distance: float
    purpose: str
    companions: int
    frequency: str
    cost: float

    def as_model_fields(self) -> Dict[str, Any]:
        return {
            'origin_lat': self.origin.lat,
            'origin_lon': self.origin.lon,
            'destination_lat': self.destination.lat,
            'destination_lon': self.destination.lon,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'mode': self.mode,
            'distance': self.distance,
            'purpose': self.purpose,
            'companions': self.companions,
            'frequency': self.frequency,
            'cost': self.cost,
        }


@dataclass(frozen=True)
class TripDraft:
    """A payload parsed just far enough for the rules to inspect it."""
    start_raw: Any
    end_raw: Any
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    origin: CoordinateInput
    destination: CoordinateInput
    distance: NumericInput
    companions: NumericInput
    cost: NumericInput
    mode: Any
    purpose: Any
    frequency: Any

    @classmethod
    def from_payload(cls, payload: Mapping) -> 'TripDraft':
        start_raw = payload.get('startTime')
        end_raw = payload.get('endTime')
        return cls(
            start_raw=start_raw,
            end_raw=end_raw,
            start_time=parse_timestamp(start_raw),
            end_time=parse_timestamp(end_raw),
            origin=CoordinateInput.from_raw(payload.get('origin')),
            destination=CoordinateInput.from_raw(payload.get('destination')),
            distance=parse_number(payload.get('distance')),
            companions=parse_number(payload.get('companions')),
            cost=parse_number(payload.get('cost')),
            mode=payload.get('mode'),
            purpose=payload.get('purpose'),
            frequency=payload.get('frequency'),
        )

    def normalize(self) -> NormalizedTrip:
        return NormalizedTrip(
            origin=Coordinate(self.origin.lat.value, self.origin.lon.value),
            destination=Coordinate(self.destination.lat.value, self.destination.lon.value),
            start_time=self.start_time,
            end_time=self.end_time,
            mode=self.mode or '',
            distance=self.distance.value,
            purpose=self.purpose or '',
            companions=int(self.companions.value),
            frequency=self.frequency or '',
            cost=self.cost.value,
        )


@dataclass(frozen=True)
class FieldRule:
    """
    One validation rule.

    ``check`` returns True when the draft satisfies the rule. Rules marked
    ``authoritative_only`` are skipped by the form profile, whose widgets
    already constrain those fields.
    """
    field: str
    code: str
    message: str
    check: Callable[[TripDraft], bool]
    authoritative_only: bool = False

    def describe(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'message': self.message,
            'authoritativeOnly': self.authoritative_only,
        }


@dataclass
class ValidationResult:
    trip: Optional[NormalizedTrip] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _non_negative(value: NumericInput) -> bool:
    return isinstance(value, Parsed) and value.value >= 0


def _ends_after_start(draft: TripDraft) -> bool:
    if draft.start_time is None or draft.end_time is None:
        return True
    return draft.end_time > draft.start_time


def _choice_rules(name: str, label: str, attr: str, choices) -> List[FieldRule]:
    allowed = list(choices.values)
    return [
        FieldRule(
            name, 'required', f'{label} is required.',
            lambda d: bool(getattr(d, attr)),
            authoritative_only=True,
        ),
        FieldRule(
            name, 'choice', f"{label} must be one of: {', '.join(allowed)}.",
            lambda d: getattr(d, attr) in allowed,
            authoritative_only=True,
        ),
    ]


TRIP_RULES: List[FieldRule] = [
    FieldRule('startTime', 'required', 'Start time is required.',
              lambda d: bool(d.start_raw)),
    FieldRule('startTime', 'invalid', 'Start time must be a valid date and time.',
              lambda d: d.start_time is not None),
    FieldRule('endTime', 'required', 'End time is required.',
              lambda d: bool(d.end_raw)),
    FieldRule('endTime', 'invalid', 'End time must be a valid date and time.',
              lambda d: d.end_time is not None),
    FieldRule('endTime', 'after_start', 'End time must be after start time.',
              _ends_after_start),
    FieldRule('distance', 'non_negative', 'Distance must be a non-negative number.',
              lambda d: _non_negative(d.distance)),
    FieldRule('companions', 'non_negative', 'Companions must be a non-negative number.',
              lambda d: _non_negative(d.companions)),
    FieldRule('companions', 'integer', 'Companions must be a whole number.',
              lambda d: d.companions.value.is_integer()),
    FieldRule('companions', 'max', f'Companions must be at most {MAX_COMPANIONS}.',
              lambda d: d.companions.value <= MAX_COMPANIONS),
    FieldRule('cost', 'non_negative', 'Cost must be a non-negative number.',
              lambda d: _non_negative(d.cost)),
    FieldRule('origin', 'required', 'Origin latitude and longitude are required.',
              lambda d: d.origin.is_complete),
    FieldRule('origin', 'range', 'Origin coordinates are out of range.',
              lambda d: d.origin.in_range),
    FieldRule('destination', 'required', 'Destination latitude and longitude are required.',
              lambda d: d.destination.is_complete),
    FieldRule('destination', 'range', 'Destination coordinates are out of range.',
              lambda d: d.destination.in_range),
    *_choice_rules('mode', 'Mode', 'mode', TravelMode),
    *_choice_rules('purpose', 'Purpose', 'purpose', TripPurpose),
    *_choice_rules('frequency', 'Frequency', 'frequency', TripFrequency),
]


def validate_trip(payload: Any, *, authoritative: bool = True) -> ValidationResult:
    """
    Validate a raw trip payload.

    Args:
        payload: JSON-decoded trip (camelCase keys, loosely-typed values)
        authoritative: Enforce every rule (server). Pass False for the
            interactive form profile.

    Returns:
        ValidationResult with either ``trip`` or ``errors`` populated

    Raises:
        MalformedTripPayload: If the payload is not a mapping
    """
    if not isinstance(payload, Mapping):
        raise MalformedTripPayload(
            f"Trip payload must be an object, got {type(payload).__name__}"
        )

    draft = TripDraft.from_payload(payload)
    errors: Dict[str, str] = {}
    for rule in TRIP_RULES:
        if rule.authoritative_only and not authoritative:
            continue
        if rule.field in errors:
            continue
        if not rule.check(draft):
            errors[rule.field] = rule.message

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(trip=draft.normalize())


def describe_rules() -> Dict[str, Any]:
    """Serialize the rule table, choices and form defaults for clients."""
    rules: Dict[str, List[Dict[str, Any]]] = {name: [] for name in FIELD_NAMES}
    for rule in TRIP_RULES:
        rules[rule.field].append(rule.describe())
    return {
        'fields': list(FIELD_NAMES),
        'rules': rules,
        'choices': {
            'mode': list(TravelMode.values),
            'purpose': list(TripPurpose.values),
            'frequency': list(TripFrequency.values),
        },
        'defaults': FORM_DEFAULTS,
    }

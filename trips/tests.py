"""
Tests for the trips application.

Covers:
- Trip validation (rule table, form and authoritative profiles)
- Trip filtering (in-memory and database query)
- Trip repository (numbering, ordering)
- Trip API endpoints
- filter_trips management command
"""

import json
import os
import tempfile
import uuid
from datetime import date, datetime
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from .models import Trip, TripNumberSequence
from .services.filtering import (
    InvalidFilterDate,
    TripFilterCriteria,
    filter_trips,
    start_of_day,
    end_of_day,
)
from .services.repository import TripRepository
from .services.validation import (
    EMPTY,
    MAX_COMPANIONS,
    Parsed,
    MalformedTripPayload,
    describe_rules,
    parse_number,
    validate_trip,
)


VALID_PAYLOAD = {
    'origin': {'lat': 12.97, 'lon': 77.59},
    'destination': {'lat': 12.98, 'lon': 77.64},
    'startTime': '2023-10-27T09:00',
    'endTime': '2023-10-27T09:45',
    'mode': 'Car',
    'distance': 8,
    'purpose': 'Work',
    'companions': 1,
    'frequency': 'Daily',
    'cost': 150,
}


def make_payload(**overrides):
    payload = json.loads(json.dumps(VALID_PAYLOAD))
    payload.update(overrides)
    return payload


def local(*args):
    return timezone.make_aware(datetime(*args))


def create_trip(**overrides):
    """Store a trip through the repository so it gets a trip number."""
    result = validate_trip(make_payload(**overrides))
    assert result.is_valid, result.errors
    return TripRepository().create(result.trip)


class ParseNumberTests(TestCase):
    """Tests for numeric input parsing."""

    def test_numbers_and_numeric_strings(self):
        self.assertEqual(parse_number(8), Parsed(8.0))
        self.assertEqual(parse_number(' 3.5 '), Parsed(3.5))
        self.assertEqual(parse_number('0'), Parsed(0.0))

    def test_unusable_values_are_empty(self):
        for raw in [None, '', '   ', 'abc', 'nan', 'inf', True, False, [], {}]:
            with self.subTest(raw=raw):
                self.assertIs(parse_number(raw), EMPTY)


class TripValidatorTests(TestCase):
    """Tests for trip payload validation."""

    def test_valid_submission(self):
        """A complete payload is accepted with numeric fields normalized."""
        result = validate_trip(VALID_PAYLOAD)

        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, {})
        trip = result.trip
        self.assertEqual(trip.origin.lat, 12.97)
        self.assertEqual(trip.destination.lon, 77.64)
        self.assertIsInstance(trip.distance, float)
        self.assertEqual(trip.distance, 8.0)
        self.assertIsInstance(trip.companions, int)
        self.assertEqual(trip.companions, 1)
        self.assertEqual(trip.cost, 150.0)
        self.assertEqual(trip.start_time, local(2023, 10, 27, 9, 0))
        self.assertEqual(trip.end_time, local(2023, 10, 27, 9, 45))
        self.assertEqual(trip.mode, 'Car')

    def test_end_before_start(self):
        """Only the end time error is reported."""
        result = validate_trip(make_payload(endTime='2023-10-27T08:00'))

        self.assertFalse(result.is_valid)
        self.assertIsNone(result.trip)
        self.assertEqual(result.errors, {'endTime': 'End time must be after start time.'})

    def test_end_equal_to_start_is_rejected(self):
        result = validate_trip(make_payload(endTime='2023-10-27T09:00'))
        self.assertEqual(result.errors, {'endTime': 'End time must be after start time.'})

    def test_missing_times(self):
        result = validate_trip(make_payload(startTime='', endTime=None))

        self.assertEqual(result.errors, {
            'startTime': 'Start time is required.',
            'endTime': 'End time is required.',
        })

    def test_missing_start_does_not_compare_times(self):
        result = validate_trip(make_payload(startTime=''))
        self.assertEqual(result.errors, {'startTime': 'Start time is required.'})

    def test_unparseable_time(self):
        result = validate_trip(make_payload(startTime='yesterday morning'))
        self.assertEqual(result.errors, {'startTime': 'Start time must be a valid date and time.'})

    def test_negative_amounts(self):
        cases = {
            'distance': 'Distance must be a non-negative number.',
            'companions': 'Companions must be a non-negative number.',
            'cost': 'Cost must be a non-negative number.',
        }
        for name, message in cases.items():
            with self.subTest(field=name):
                result = validate_trip(make_payload(**{name: -1}))
                self.assertEqual(result.errors, {name: message})

    def test_zero_amounts_are_accepted(self):
        result = validate_trip(make_payload(distance=0, companions=0, cost=0))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.trip.distance, 0.0)
        self.assertEqual(result.trip.companions, 0)
        self.assertEqual(result.trip.cost, 0.0)

    def test_empty_amounts(self):
        result = validate_trip(make_payload(distance='', cost=''))

        self.assertEqual(set(result.errors), {'distance', 'cost'})

    def test_numeric_strings_are_normalized(self):
        result = validate_trip(make_payload(
            distance='8.5',
            companions='2',
            cost='99.5',
            origin={'lat': '12.97', 'lon': '77.59'},
        ))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.trip.distance, 8.5)
        self.assertEqual(result.trip.companions, 2)
        self.assertEqual(result.trip.cost, 99.5)
        self.assertEqual(result.trip.origin.lat, 12.97)

    def test_fractional_companions(self):
        result = validate_trip(make_payload(companions=1.5))
        self.assertEqual(result.errors, {'companions': 'Companions must be a whole number.'})

    def test_companions_at_storage_limit(self):
        result = validate_trip(make_payload(companions=MAX_COMPANIONS))
        self.assertTrue(result.is_valid)
        self.assertEqual(result.trip.companions, MAX_COMPANIONS)

        result = validate_trip(make_payload(companions=1e20))
        self.assertEqual(
            result.errors,
            {'companions': f'Companions must be at most {MAX_COMPANIONS}.'}
        )

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_timestamps_outside_storage_range(self):
        """Local times that fall before year 1 in UTC cannot be stored."""
        result = validate_trip(make_payload(startTime='0001-01-01T00:00', endTime='0001-01-01T01:00'))

        self.assertEqual(result.errors, {
            'startTime': 'Start time must be a valid date and time.',
            'endTime': 'End time must be a valid date and time.',
        })

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_late_timestamps_within_storage_range(self):
        result = validate_trip(make_payload(startTime='9999-12-31T22:00', endTime='9999-12-31T23:00'))
        self.assertTrue(result.is_valid)

    def test_partial_origin(self):
        for origin in [{'lat': 12.97, 'lon': ''}, {'lat': None, 'lon': 77.59}, {}, None, 'here']:
            with self.subTest(origin=origin):
                result = validate_trip(make_payload(origin=origin))
                self.assertEqual(
                    result.errors,
                    {'origin': 'Origin latitude and longitude are required.'}
                )

    def test_zero_coordinates_are_accepted(self):
        result = validate_trip(make_payload(origin={'lat': 0, 'lon': 0}))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.trip.origin.lat, 0.0)

    def test_partial_destination(self):
        result = validate_trip(make_payload(destination={'lat': 12.98}))
        self.assertEqual(
            result.errors,
            {'destination': 'Destination latitude and longitude are required.'}
        )

    def test_out_of_range_coordinates(self):
        result = validate_trip(make_payload(destination={'lat': 95, 'lon': 77.64}))
        self.assertEqual(result.errors, {'destination': 'Destination coordinates are out of range.'})

    def test_missing_choices(self):
        result = validate_trip(make_payload(mode='', purpose=None, frequency=''))

        self.assertEqual(result.errors, {
            'mode': 'Mode is required.',
            'purpose': 'Purpose is required.',
            'frequency': 'Frequency is required.',
        })

    def test_unknown_choice(self):
        result = validate_trip(make_payload(mode='Spaceship'))

        self.assertEqual(list(result.errors), ['mode'])
        self.assertTrue(result.errors['mode'].startswith('Mode must be one of: Walk, Cycle'))

    def test_form_profile_skips_choice_rules(self):
        result = validate_trip(make_payload(mode=''), authoritative=False)
        self.assertTrue(result.is_valid)

        result = validate_trip(make_payload(mode='', cost=-5), authoritative=False)
        self.assertEqual(result.errors, {'cost': 'Cost must be a non-negative number.'})

    def test_all_errors_collected_in_one_pass(self):
        result = validate_trip({})

        self.assertEqual(set(result.errors), {
            'origin', 'destination', 'startTime', 'endTime', 'distance',
            'companions', 'cost', 'mode', 'purpose', 'frequency',
        })

    def test_malformed_payload_raises(self):
        for payload in [None, [], 'trip', 42]:
            with self.subTest(payload=payload):
                with self.assertRaises(MalformedTripPayload):
                    validate_trip(payload)

    def test_describe_rules(self):
        schema = describe_rules()

        self.assertIn('Auto-rickshaw', schema['choices']['mode'])
        self.assertIn('Personal Business', schema['choices']['purpose'])
        self.assertEqual(schema['choices']['frequency'], ['Daily', 'Weekly', 'Monthly', 'Occasionally'])
        self.assertEqual(schema['defaults']['companions'], 0)
        self.assertEqual(schema['defaults']['cost'], '')
        end_codes = [rule['code'] for rule in schema['rules']['endTime']]
        self.assertEqual(end_codes, ['required', 'invalid', 'after_start'])
        self.assertTrue(all(rule['authoritativeOnly'] for rule in schema['rules']['mode']))


class TripFilterTests(TestCase):
    """Tests for in-memory trip filtering."""

    def setUp(self):
        self.car = Trip(mode='Car', purpose='Work', start_time=local(2023, 10, 27, 9, 0))
        self.bus = Trip(mode='Bus', purpose='Shopping', start_time=local(2023, 10, 28, 18, 30))
        self.trips = [self.car, self.bus]

    def test_filter_by_mode(self):
        self.assertEqual(filter_trips(self.trips, TripFilterCriteria(mode='Bus')), [self.bus])

    def test_filter_by_purpose(self):
        self.assertEqual(filter_trips(self.trips, TripFilterCriteria(purpose='Work')), [self.car])

    def test_date_range(self):
        criteria = TripFilterCriteria(start_date=date(2023, 10, 28), end_date=date(2023, 10, 28))
        self.assertEqual(filter_trips(self.trips, criteria), [self.bus])

    def test_no_criteria_returns_input_unchanged(self):
        reversed_trips = [self.bus, self.car]

        self.assertEqual(filter_trips(reversed_trips), reversed_trips)
        self.assertEqual(filter_trips(reversed_trips, TripFilterCriteria()), reversed_trips)
        self.assertEqual(
            filter_trips(reversed_trips, TripFilterCriteria(mode='', purpose='')),
            reversed_trips
        )

    def test_filter_is_idempotent(self):
        criteria = TripFilterCriteria(mode='Car', start_date=date(2023, 10, 1))
        once = filter_trips(self.trips, criteria)

        self.assertEqual(filter_trips(once, criteria), once)

    def test_day_boundaries_are_inclusive(self):
        day = date(2023, 10, 27)
        first = Trip(mode='Walk', start_time=start_of_day(day))
        last = Trip(mode='Walk', start_time=end_of_day(day))
        next_day = Trip(mode='Walk', start_time=local(2023, 10, 28, 0, 0))
        criteria = TripFilterCriteria(start_date=day, end_date=day)

        self.assertEqual(filter_trips([first, last, next_day], criteria), [first, last])
        self.assertEqual(end_of_day(day).microsecond, 999000)

    def test_from_params(self):
        criteria = TripFilterCriteria.from_params(
            mode='', purpose='Work', start_date='2023-10-28', end_date=''
        )

        self.assertEqual(criteria, TripFilterCriteria(purpose='Work', start_date=date(2023, 10, 28)))
        self.assertTrue(TripFilterCriteria.from_params().is_empty)
        self.assertEqual(
            TripFilterCriteria.from_params(end_date=date(2023, 10, 27)).end_date,
            date(2023, 10, 27)
        )

    def test_from_params_invalid_date(self):
        for value in ['28/10/2023', '2023-02-30', 'soon']:
            with self.subTest(value=value):
                with self.assertRaises(InvalidFilterDate) as context:
                    TripFilterCriteria.from_params(start_date=value)
                self.assertEqual(context.exception.param, 'startDate')

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_from_params_day_outside_storage_range(self):
        with self.assertRaises(InvalidFilterDate) as context:
            TripFilterCriteria.from_params(end_date='0001-01-01')

        self.assertEqual(context.exception.param, 'endDate')
        self.assertEqual(str(context.exception), 'Date is out of range.')

    def test_unknown_mode_matches_nothing(self):
        self.assertEqual(filter_trips(self.trips, TripFilterCriteria(mode='Spaceship')), [])

    def test_api_shaped_trips(self):
        trips = [
            {'id': 'a', 'mode': 'Car', 'startTime': '2023-10-27T09:00:00'},
            {'id': 'b', 'mode': 'Bus', 'startTime': '2023-10-28T18:30:00'},
            {'id': 'c', 'mode': 'Bus'},
        ]
        criteria = TripFilterCriteria(start_date=date(2023, 10, 28), end_date=date(2023, 10, 28))

        self.assertEqual([t['id'] for t in filter_trips(trips, criteria)], ['b'])
        self.assertEqual([t['id'] for t in filter_trips(trips, TripFilterCriteria(mode='Bus'))], ['b', 'c'])


class TripRepositoryTests(TestCase):
    """Tests for trip persistence."""

    def test_trip_numbers_are_sequential(self):
        first = create_trip()
        second = create_trip(startTime='2023-10-28T09:00', endTime='2023-10-28T10:00')

        self.assertEqual(first.trip_number, 1)
        self.assertEqual(second.trip_number, 2)
        self.assertIsInstance(first.id, uuid.UUID)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(TripNumberSequence.objects.get(name='trip_number').value, 2)

    def test_missing_sequence_is_reseeded_from_count(self):
        create_trip()
        TripNumberSequence.objects.all().delete()

        trip = create_trip(startTime='2023-10-28T09:00', endTime='2023-10-28T10:00')

        self.assertEqual(trip.trip_number, 2)

    def test_list_orders_newest_first(self):
        older = create_trip()
        newer = create_trip(startTime='2023-10-29T07:00', endTime='2023-10-29T08:00')
        middle = create_trip(startTime='2023-10-28T07:00', endTime='2023-10-28T08:00')

        self.assertEqual(list(TripRepository().list()), [newer, middle, older])

    def test_query_matches_in_memory_filter(self):
        create_trip(mode='Car')
        create_trip(mode='Bus', startTime='2023-10-28T00:00', endTime='2023-10-28T01:00')
        create_trip(mode='Bus', purpose='Leisure', startTime='2023-10-28T23:59:59.999', endTime='2023-10-29T01:00')
        create_trip(mode='Bus', startTime='2023-10-29T00:00', endTime='2023-10-29T01:00')
        repository = TripRepository()
        everything = list(repository.list())

        for criteria in [
            TripFilterCriteria(mode='Bus'),
            TripFilterCriteria(purpose='Leisure'),
            TripFilterCriteria(start_date=date(2023, 10, 28), end_date=date(2023, 10, 28)),
            TripFilterCriteria(mode='Car', end_date=date(2023, 10, 27)),
            TripFilterCriteria(start_date=date(2023, 10, 30)),
        ]:
            with self.subTest(criteria=criteria):
                self.assertEqual(list(repository.list(criteria)), filter_trips(everything, criteria))

    def test_get_trip(self):
        trip = create_trip()

        self.assertEqual(TripRepository().get(trip.id), trip)
        with self.assertRaises(Trip.DoesNotExist):
            TripRepository().get(uuid.uuid4())


class TripAPITests(APITestCase):
    """Tests for Trip API endpoints."""

    def test_create_trip(self):
        """Test recording a trip via API."""
        url = reverse('trip-list')

        response = self.client.post(url, VALID_PAYLOAD, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Trip.objects.count(), 1)
        data = response.data
        self.assertEqual(data['tripNumber'], 1)
        self.assertEqual(data['id'], str(Trip.objects.get().id))
        self.assertEqual(data['origin'], {'lat': 12.97, 'lon': 77.59})
        self.assertEqual(data['destination'], {'lat': 12.98, 'lon': 77.64})
        self.assertTrue(data['startTime'].startswith('2023-10-27T09:00:00'))
        self.assertEqual(data['distance'], 8.0)
        self.assertEqual(data['companions'], 1)
        self.assertEqual(data['cost'], 150.0)
        self.assertEqual(data['frequency'], 'Daily')

    def test_create_assigns_next_trip_number(self):
        url = reverse('trip-list')
        self.client.post(url, VALID_PAYLOAD, format='json')

        response = self.client.post(url, VALID_PAYLOAD, format='json')

        self.assertEqual(response.data['tripNumber'], 2)

    def test_create_trip_validation_failure(self):
        url = reverse('trip-list')

        response = self.client.post(url, make_payload(endTime='2023-10-27T08:00'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {
            'message': 'Validation failed',
            'errors': {'endTime': 'End time must be after start time.'},
        })
        self.assertEqual(Trip.objects.count(), 0)

    def test_create_trip_requires_choices(self):
        url = reverse('trip-list')
        payload = make_payload()
        del payload['frequency']

        response = self.client.post(url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'], {'frequency': 'Frequency is required.'})

    def test_create_trip_malformed_payload(self):
        url = reverse('trip-list')

        response = self.client.post(url, [VALID_PAYLOAD], format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'message': 'Malformed trip payload'})

    def test_create_trip_companions_beyond_storage(self):
        url = reverse('trip-list')

        response = self.client.post(url, make_payload(companions=1e20), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.json()['errors'],
            {'companions': f'Companions must be at most {MAX_COMPANIONS}.'}
        )
        self.assertEqual(Trip.objects.count(), 0)

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_create_trip_times_beyond_storage(self):
        url = reverse('trip-list')
        payload = make_payload(startTime='0001-01-01T00:00', endTime='0001-01-01T01:00')

        response = self.client.post(url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.json()['errors']), {'startTime', 'endTime'})
        self.assertEqual(Trip.objects.count(), 0)

    @patch.object(TripRepository, 'create')
    def test_create_trip_value_overflow(self, mock_create):
        mock_create.side_effect = OverflowError("Python int too large to convert to SQLite INTEGER")
        url = reverse('trip-list')

        with self.assertLogs('trips.views', level='ERROR'):
            response = self.client.post(url, VALID_PAYLOAD, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {'message': 'Internal server error'})

    def test_create_trip_invalid_json(self):
        url = reverse('trip-list')

        response = self.client.post(url, '{"origin":', content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch.object(TripRepository, 'create')
    def test_create_trip_persistence_failure(self, mock_create):
        mock_create.side_effect = DatabaseError("disk I/O error")
        url = reverse('trip-list')

        with self.assertLogs('trips.views', level='ERROR'):
            response = self.client.post(url, VALID_PAYLOAD, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {'message': 'Internal server error'})

    def test_list_trips(self):
        create_trip()
        create_trip(startTime='2023-10-28T09:00', endTime='2023-10-28T10:00')
        url = reverse('trip-list')

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsInstance(response.data, list)
        self.assertEqual([trip['tripNumber'] for trip in response.data], [2, 1])

    def test_list_filter_by_mode(self):
        create_trip(mode='Car')
        bus = create_trip(mode='Bus')
        url = reverse('trip-list')

        response = self.client.get(url, {'mode': 'Bus'})

        self.assertEqual([trip['id'] for trip in response.data], [str(bus.id)])

    def test_list_filter_by_date_range(self):
        create_trip()
        second = create_trip(startTime='2023-10-28T09:00', endTime='2023-10-28T10:00')
        url = reverse('trip-list')

        response = self.client.get(url, {'startDate': '2023-10-28', 'endDate': '2023-10-28'})

        self.assertEqual([trip['id'] for trip in response.data], [str(second.id)])

    def test_list_empty_parameters_are_ignored(self):
        create_trip()
        url = reverse('trip-list')

        response = self.client.get(url, {'mode': '', 'purpose': '', 'startDate': '', 'endDate': ''})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_list_start_date_out_of_range(self):
        url = reverse('trip-list')

        response = self.client.get(url, {'startDate': '0001-01-01'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {
            'message': 'Validation failed',
            'errors': {'startDate': 'Date is out of range.'},
        })

    @override_settings(TIME_ZONE='America/New_York')
    def test_list_end_date_out_of_range(self):
        url = reverse('trip-list')

        response = self.client.get(url, {'endDate': '9999-12-31'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'], {'endDate': 'Date is out of range.'})

    def test_list_invalid_date(self):
        url = reverse('trip-list')

        response = self.client.get(url, {'startDate': 'not-a-date'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertEqual(body['message'], 'Validation failed')
        self.assertIn('startDate', body['errors'])

    @patch.object(TripRepository, 'list')
    def test_list_persistence_failure(self, mock_list):
        mock_list.side_effect = DatabaseError("connection lost")
        url = reverse('trip-list')

        with self.assertLogs('trips.views', level='ERROR'):
            response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_retrieve_trip(self):
        trip = create_trip()
        url = reverse('trip-detail', kwargs={'pk': trip.id})

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(trip.id))

    def test_retrieve_nonexistent_trip(self):
        for pk in [uuid.uuid4(), 'not-a-uuid']:
            with self.subTest(pk=pk):
                url = reverse('trip-detail', kwargs={'pk': pk})
                response = self.client.get(url)
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_trips_cannot_be_edited_or_deleted(self):
        trip = create_trip()
        url = reverse('trip-detail', kwargs={'pk': trip.id})

        self.assertEqual(self.client.patch(url, {'cost': 1}, format='json').status_code,
                         status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_form_schema(self):
        url = reverse('trip-form-schema')

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), json.loads(json.dumps(describe_rules())))

    def test_openapi_schema(self):
        response = self.client.get(reverse('schema'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class FilterTripsCommandTests(TestCase):
    """Tests for the filter_trips management command."""

    def setUp(self):
        trips = [
            {'id': 'a', 'tripNumber': 2, 'mode': 'Bus', 'purpose': 'Work', 'startTime': '2023-10-28T09:00:00+05:30'},
            {'id': 'b', 'tripNumber': 1, 'mode': 'Car', 'purpose': 'Work', 'startTime': '2023-10-27T09:00:00+05:30'},
        ]
        handle = tempfile.NamedTemporaryFile('w', suffix='.json', delete=False)
        with handle:
            json.dump(trips, handle)
        self.path = handle.name
        self.addCleanup(os.remove, self.path)

    def run_command(self, *args, **options):
        out, err = StringIO(), StringIO()
        call_command('filter_trips', *args, stdout=out, stderr=err, **options)
        return json.loads(out.getvalue()), err.getvalue()

    def test_filter_by_mode(self):
        matches, summary = self.run_command(self.path, mode='Car')

        self.assertEqual([trip['id'] for trip in matches], ['b'])
        self.assertIn('1 of 2', summary)

    def test_filter_by_date_range(self):
        matches, _ = self.run_command(self.path, start_date='2023-10-28', end_date='2023-10-28')
        self.assertEqual([trip['id'] for trip in matches], ['a'])

    def test_no_filters_keeps_order(self):
        matches, _ = self.run_command(self.path)
        self.assertEqual([trip['id'] for trip in matches], ['a', 'b'])

    def test_invalid_date(self):
        with self.assertRaises(CommandError):
            self.run_command(self.path, start_date='28/10/2023')

    def test_not_a_list(self):
        with open(self.path, 'w', encoding='utf-8') as handle:
            json.dump({'trips': []}, handle)

        with self.assertRaises(CommandError):
            self.run_command(self.path)

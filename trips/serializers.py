"""
Serializers for the trips API.
"""

from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from .models import Trip
from .services.filtering import InvalidFilterDate, TripFilterCriteria, parse_filter_day


class CoordinateSerializer(serializers.Serializer):
    lat = serializers.FloatField()
    lon = serializers.FloatField()


@extend_schema_field(CoordinateSerializer)
class CoordinateField(serializers.Field):
    """Renders a pair of ``<prefix>_lat`` / ``<prefix>_lon`` model fields as ``{lat, lon}``."""

    def __init__(self, prefix, **kwargs):
        self.prefix = prefix
        kwargs['source'] = '*'
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, instance):
        return {
            'lat': getattr(instance, f'{self.prefix}_lat'),
            'lon': getattr(instance, f'{self.prefix}_lon'),
        }


class TripSerializer(serializers.ModelSerializer):
    """Serializer for Trip model - used for create responses, list and retrieve."""

    tripNumber = serializers.IntegerField(source='trip_number', read_only=True)
    origin = CoordinateField('origin')
    destination = CoordinateField('destination')
    startTime = serializers.DateTimeField(source='start_time', read_only=True)
    endTime = serializers.DateTimeField(source='end_time', read_only=True)

    class Meta:
        model = Trip
        fields = [
            'id',
            'tripNumber',
            'origin',
            'startTime',
            'destination',
            'endTime',
            'mode',
            'distance',
            'purpose',
            'companions',
            'frequency',
            'cost',
        ]
        read_only_fields = fields


class TripPayloadSerializer(serializers.Serializer):
    """
    Documents the trip creation payload.

    Validation itself is done by ``validate_trip`` so that the form and the
    API share the same rules; this serializer only describes the shape.
    """

    origin = CoordinateSerializer()
    destination = CoordinateSerializer()
    startTime = serializers.CharField()
    endTime = serializers.CharField()
    mode = serializers.CharField()
    distance = serializers.FloatField()
    purpose = serializers.CharField()
    companions = serializers.IntegerField()
    frequency = serializers.CharField()
    cost = serializers.FloatField()


class ValidationErrorSerializer(serializers.Serializer):
    message = serializers.CharField()
    errors = serializers.DictField(child=serializers.CharField())


class TripFilterQuerySerializer(serializers.Serializer):
    """Serializer for trip listing query parameters."""

    mode = serializers.CharField(required=False, allow_blank=True)
    purpose = serializers.CharField(required=False, allow_blank=True)
    startDate = serializers.DateField(required=False, allow_null=True)
    endDate = serializers.DateField(required=False, allow_null=True)

    def to_internal_value(self, data):
        # Empty query values are wildcards, not invalid dates.
        cleaned = {key: value for key, value in data.items() if value != ''}
        return super().to_internal_value(cleaned)

    def _check_day(self, value, param):
        try:
            return parse_filter_day(value, param)
        except InvalidFilterDate as e:
            raise serializers.ValidationError(str(e))

    def validate_startDate(self, value):
        return self._check_day(value, 'startDate')

    def validate_endDate(self, value):
        return self._check_day(value, 'endDate')

    def to_criteria(self) -> TripFilterCriteria:
        data = self.validated_data
        return TripFilterCriteria.from_params(
            mode=data.get('mode'),
            purpose=data.get('purpose'),
            start_date=data.get('startDate'),
            end_date=data.get('endDate'),
        )

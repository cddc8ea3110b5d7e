"""
API views for the trips application.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.http import Http404
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from .models import Trip
from .serializers import (
    TripSerializer,
    TripPayloadSerializer,
    TripFilterQuerySerializer,
    ValidationErrorSerializer,
)
from .services import TripRepository, MalformedTripPayload, describe_rules, validate_trip

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {'message': 'Internal server error'}


def _validation_failed(errors):
    return Response(
        {'message': 'Validation failed', 'errors': errors},
        status=status.HTTP_400_BAD_REQUEST
    )


@extend_schema_view(
    list=extend_schema(
        summary="List trips",
        description="List trips, newest start time first, optionally filtered by mode, purpose and start-date range.",
        tags=['Trips'],
        parameters=[
            OpenApiParameter(
                name='mode',
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description='Exact travel mode'
            ),
            OpenApiParameter(
                name='purpose',
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description='Exact trip purpose'
            ),
            OpenApiParameter(
                name='startDate',
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                required=False,
                description='Earliest start date (inclusive, local time)'
            ),
            OpenApiParameter(
                name='endDate',
                type=OpenApiTypes.DATE,
                location=OpenApiParameter.QUERY,
                required=False,
                description='Latest start date (inclusive, local time)'
            ),
        ],
        responses={200: TripSerializer(many=True), 400: ValidationErrorSerializer},
    ),
    retrieve=extend_schema(
        summary="Get a trip",
        description="Retrieve details of a specific trip by ID.",
        tags=['Trips']
    ),
    create=extend_schema(
        summary="Record a trip",
        description="Validate and store a new trip. The trip number is assigned by the server.",
        tags=['Trips'],
        request=TripPayloadSerializer,
        responses={
            201: TripSerializer,
            400: OpenApiResponse(ValidationErrorSerializer, description="Validation failed"),
        },
    ),
)
class TripViewSet(viewsets.GenericViewSet):
    """
    ViewSet for recording and listing trips.

    Endpoints:
    - POST /api/trips/ - Record a trip
    - GET /api/trips/ - List trips (filterable)
    - GET /api/trips/{id}/ - Retrieve a trip
    """

    queryset = Trip.objects.all()
    serializer_class = TripSerializer

    def get_repository(self):
        return TripRepository()

    def create(self, request, *args, **kwargs):
        """Validate the payload and persist the trip."""
        try:
            result = validate_trip(request.data)
        except MalformedTripPayload as e:
            logger.info(f"Rejected malformed trip payload: {e}")
            return Response(
                {'message': 'Malformed trip payload'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if not result.is_valid:
            logger.info(f"Trip validation failed for fields: {', '.join(result.errors)}")
            return _validation_failed(result.errors)

        try:
            trip = self.get_repository().create(result.trip)
        except (DatabaseError, OverflowError):
            # Drivers raise OverflowError for values outside the column range.
            logger.exception("Error creating trip")
            return Response(INTERNAL_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(self.get_serializer(trip).data, status=status.HTTP_201_CREATED)

    def list(self, request, *args, **kwargs):
        """List trips matching the query parameters."""
        query = TripFilterQuerySerializer(data=request.query_params)
        if not query.is_valid():
            errors = {name: str(messages[0]) for name, messages in query.errors.items()}
            return _validation_failed(errors)

        try:
            trips = list(self.get_repository().list(query.to_criteria()))
        except DatabaseError:
            logger.exception("Error fetching trips")
            return Response(INTERNAL_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(self.get_serializer(trips, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        try:
            trip = self.get_repository().get(kwargs['pk'])
        except (Trip.DoesNotExist, DjangoValidationError):
            # Malformed UUIDs are reported the same way as missing trips.
            raise Http404("Trip not found")
        return Response(self.get_serializer(trip).data)


class TripFormSchemaView(APIView):
    """
    API view publishing the shared trip validation rules.
    """

    @extend_schema(
        summary="Trip form schema",
        description="""
        The validation rules, enumeration options and initial values used by the
        trip form. The server applies the same rule table, including the rules
        flagged `authoritativeOnly`.
        """,
        tags=['Trips'],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        return Response(describe_rules())

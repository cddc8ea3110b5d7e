"""
URL configuration for the trips app.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import TripViewSet, TripFormSchemaView

router = DefaultRouter()
router.register(r'trips', TripViewSet, basename='trip')

urlpatterns = [
    path('trips/form-schema/', TripFormSchemaView.as_view(), name='trip-form-schema'),
    path('', include(router.urls)),
]

"""
Admin configuration for the trips app.
"""

from django.contrib import admin
from .models import Trip


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = [
        'trip_number',
        'start_time',
        'end_time',
        'mode',
        'purpose',
        'frequency',
        'distance',
        'companions',
        'cost',
    ]
    list_filter = ['mode', 'purpose', 'frequency', 'start_time']
    search_fields = ['id', 'trip_number']
    ordering = ['-start_time']

    # Trips are immutable once recorded.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

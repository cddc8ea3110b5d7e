"""
Management command to filter an exported trip list.
"""

import json
import sys

from django.core.management.base import BaseCommand, CommandError

from trips.services import InvalidFilterDate, TripFilterCriteria, filter_trips


class Command(BaseCommand):
    help = 'Filter a JSON trip list (as returned by GET /api/trips/) by mode, purpose and date range'

    def add_arguments(self, parser):
        parser.add_argument('source', help="Path to a JSON file, or '-' to read standard input")
        parser.add_argument('--mode', default='')
        parser.add_argument('--purpose', default='')
        parser.add_argument('--start-date', default='')
        parser.add_argument('--end-date', default='')

    def handle(self, *args, **options):
        trips = self._load(options['source'])

        try:
            criteria = TripFilterCriteria.from_params(
                mode=options['mode'],
                purpose=options['purpose'],
                start_date=options['start_date'],
                end_date=options['end_date'],
            )
        except InvalidFilterDate as e:
            raise CommandError(f"Invalid {e.param}: {e}")
        matches = filter_trips(trips, criteria)

        self.stdout.write(json.dumps(matches, indent=2))
        self.stderr.write(self.style.SUCCESS(f'{len(matches)} of {len(trips)} trip(s) matched'))

    def _load(self, source):
        try:
            if source == '-':
                data = json.load(sys.stdin)
            else:
                with open(source, encoding='utf-8') as handle:
                    data = json.load(handle)
        except OSError as e:
            raise CommandError(f"Cannot read {source}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"{source} is not valid JSON: {e}")

        if not isinstance(data, list):
            raise CommandError("Expected a JSON array of trips")
        return data

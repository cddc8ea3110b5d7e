import uuid

import django.core.validators
from django.conf import settings
from django.db import migrations, models


def seed_trip_number_sequence(apps, schema_editor):
    Trip = apps.get_model('trips', 'Trip')
    TripNumberSequence = apps.get_model('trips', 'TripNumberSequence')
    TripNumberSequence.objects.get_or_create(
        name=getattr(settings, 'TRIP_NUMBER_SEQUENCE', 'trip_number'),
        defaults={'value': Trip.objects.count()},
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Trip',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('trip_number', models.PositiveIntegerField(editable=False, help_text='Sequential trip number', unique=True)),
                ('origin_lat', models.FloatField(help_text='Origin latitude')),
                ('origin_lon', models.FloatField(help_text='Origin longitude')),
                ('destination_lat', models.FloatField(help_text='Destination latitude')),
                ('destination_lon', models.FloatField(help_text='Destination longitude')),
                ('start_time', models.DateTimeField(db_index=True)),
                ('end_time', models.DateTimeField()),
                ('mode', models.CharField(choices=[('Walk', 'Walk'), ('Cycle', 'Cycle'), ('Car', 'Car'), ('Motorbike', 'Motorbike'), ('Bus', 'Bus'), ('Train', 'Train'), ('Auto-rickshaw', 'Auto-rickshaw'), ('Taxi', 'Taxi'), ('Other', 'Other')], max_length=20)),
                ('distance', models.FloatField(help_text='Distance travelled in kilometers', validators=[django.core.validators.MinValueValidator(0)])),
                ('purpose', models.CharField(choices=[('Work', 'Work'), ('Education', 'Education'), ('Shopping', 'Shopping'), ('Leisure', 'Leisure'), ('Personal Business', 'Personal Business'), ('Health', 'Health'), ('Social', 'Social'), ('Other', 'Other')], max_length=20)),
                ('companions', models.PositiveIntegerField(default=0)),
                ('frequency', models.CharField(choices=[('Daily', 'Daily'), ('Weekly', 'Weekly'), ('Monthly', 'Monthly'), ('Occasionally', 'Occasionally')], max_length=20)),
                ('cost', models.FloatField(help_text='Trip cost in currency units', validators=[django.core.validators.MinValueValidator(0)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Trip',
                'verbose_name_plural': 'Trips',
                'ordering': ['-start_time', '-trip_number'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('end_time__gt', models.F('start_time'))), name='trip_ends_after_start'),
                    models.CheckConstraint(condition=models.Q(('distance__gte', 0), ('cost__gte', 0)), name='trip_non_negative_amounts'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TripNumberSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True)),
                ('value', models.PositiveIntegerField(default=0)),
            ],
        ),
        migrations.RunPython(seed_trip_number_sequence, migrations.RunPython.noop),
    ]

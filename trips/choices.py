"""
Closed enumerations for trip attributes.
"""

from django.db import models


class TravelMode(models.TextChoices):
    WALK = 'Walk', 'Walk'
    CYCLE = 'Cycle', 'Cycle'
    CAR = 'Car', 'Car'
    MOTORBIKE = 'Motorbike', 'Motorbike'
    BUS = 'Bus', 'Bus'
    TRAIN = 'Train', 'Train'
    AUTO = 'Auto-rickshaw', 'Auto-rickshaw'
    TAXI = 'Taxi', 'Taxi'
    OTHER = 'Other', 'Other'


class TripPurpose(models.TextChoices):
    WORK = 'Work', 'Work'
    EDUCATION = 'Education', 'Education'
    SHOPPING = 'Shopping', 'Shopping'
    LEISURE = 'Leisure', 'Leisure'
    PERSONAL = 'Personal Business', 'Personal Business'
    HEALTH = 'Health', 'Health'
    SOCIAL = 'Social', 'Social'
    OTHER = 'Other', 'Other'


class TripFrequency(models.TextChoices):
    DAILY = 'Daily', 'Daily'
    WEEKLY = 'Weekly', 'Weekly'
    MONTHLY = 'Monthly', 'Monthly'
    OCCASIONALLY = 'Occasionally', 'Occasionally'

from django.apps import AppConfig


class BusinessHoursConfig(AppConfig):
    name = 'business_hours'
    verbose_name = 'Business Hours'

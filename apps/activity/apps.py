"""
Django app configuration for the activity feed
"""

from django.apps import AppConfig


class ActivityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.activity"
    verbose_name = "Activity"

"""
Django app configuration for the Relof transparency index
"""

from django.apps import AppConfig


class RelofConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.relof"
    verbose_name = "Relof Index"

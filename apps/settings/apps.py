"""
Django app configuration for site settings
"""

from django.apps import AppConfig


class SettingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.settings"
    verbose_name = "Site Settings"

    def ready(self) -> None:
        """Connect cache invalidation signals."""
        from . import signals  # noqa: F401

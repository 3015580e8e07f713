"""
Django app configuration for the citizen services catalog
"""

from django.apps import AppConfig


class PublicServicesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.public_services"
    verbose_name = "Public Services"

    def ready(self) -> None:
        """Connect activity signals."""
        from . import signals  # noqa: F401

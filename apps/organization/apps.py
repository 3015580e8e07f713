"""
Django app configuration for organizational structure and directors
"""

from django.apps import AppConfig


class OrganizationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.organization"
    verbose_name = "Organization"

    def ready(self) -> None:
        """Connect activity signals."""
        from . import signals  # noqa: F401

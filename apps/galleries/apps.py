"""
Django app configuration for photo galleries
"""

from django.apps import AppConfig


class GalleriesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.galleries"
    verbose_name = "Galleries"

    def ready(self) -> None:
        """Connect activity signals."""
        from . import signals  # noqa: F401

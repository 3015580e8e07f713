"""
Django app configuration for the media library
"""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.media"
    verbose_name = "Media Library"

    def ready(self) -> None:
        """Connect activity signals."""
        from . import signals  # noqa: F401

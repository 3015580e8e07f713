"""
Django app configuration for Content app
"""

from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.content"
    verbose_name = "Content"

    def ready(self) -> None:
        """Connect activity and relof signals."""
        from . import signals  # noqa: F401

"""
Django app configuration for contact messages and newsletters
"""

from django.apps import AppConfig


class MailerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.mailer"
    verbose_name = "Mailer"

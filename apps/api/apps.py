# ===============================================================================
# CMS API APP CONFIGURATION 🛠️
# ===============================================================================

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """
    Centralized REST API for every CMS domain.

    The Next.js public site and the dashboard both talk to these endpoints;
    business rules stay in each domain's service layer.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.api"
    label = "platform_api"  # Unique label to avoid conflicts
    verbose_name = "CMS Platform API"

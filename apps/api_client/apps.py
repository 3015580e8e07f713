from django.apps import AppConfig


class ApiClientConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.api_client"
    verbose_name = "CMS API Client"

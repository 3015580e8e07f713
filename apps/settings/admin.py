"""
Django admin configuration for site settings
"""

from typing import ClassVar

from django.contrib import admin

from .models import SiteSetting


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("key", "category", "type", "is_public", "updated_at")
    list_filter: ClassVar[tuple[str, ...]] = ("category", "type", "is_public")
    search_fields: ClassVar[tuple[str, ...]] = ("key", "label")

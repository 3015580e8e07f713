"""
Django admin configuration for the media library
"""

from typing import ClassVar

from django.contrib import admin

from .models import Media


@admin.register(Media)
class MediaAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = (
        "original_name",
        "filename",
        "category",
        "mime_type",
        "size",
        "is_public",
    )
    list_filter: ClassVar[tuple[str, ...]] = ("category", "is_public")
    search_fields: ClassVar[tuple[str, ...]] = ("original_name", "alt", "caption")
    readonly_fields: ClassVar[tuple[str, ...]] = ("filename", "mime_type", "size", "uploaded_by")

"""
Django admin configuration for galleries
"""

from typing import ClassVar

from django.contrib import admin

from .models import Gallery, GalleryImage


class GalleryImageInline(admin.TabularInline):
    model = GalleryImage
    extra = 0
    fk_name = "gallery"
    fields: ClassVar[tuple[str, ...]] = ("title", "filename", "sort_order", "is_cover")
    readonly_fields: ClassVar[tuple[str, ...]] = ("filename",)


@admin.register(Gallery)
class GalleryAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("title", "type", "status", "event_date", "sort_order")
    list_filter: ClassVar[tuple[str, ...]] = ("type", "status")
    search_fields: ClassVar[tuple[str, ...]] = ("title", "description")
    raw_id_fields: ClassVar[tuple[str, ...]] = ("cover_image",)
    inlines: ClassVar[list[type[admin.TabularInline]]] = [GalleryImageInline]

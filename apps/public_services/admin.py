"""
Django admin configuration for the services catalog
"""

from typing import ClassVar

from django.contrib import admin

from .models import Service, ServiceDocument


class ServiceDocumentInline(admin.TabularInline):
    model = ServiceDocument
    extra = 0
    fields: ClassVar[tuple[str, ...]] = ("title", "type", "is_public", "is_active", "download_count")
    readonly_fields: ClassVar[tuple[str, ...]] = ("download_count",)


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("name", "type", "status", "priority", "is_public", "request_count")
    list_filter: ClassVar[tuple[str, ...]] = ("type", "status", "is_public", "is_online")
    search_fields: ClassVar[tuple[str, ...]] = ("name", "short_description")
    inlines: ClassVar[list[type[admin.TabularInline]]] = [ServiceDocumentInline]

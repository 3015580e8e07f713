"""
Django admin configuration for organizational structure
"""

from typing import ClassVar

from django.contrib import admin

from .models import Director, DirectorDocument, OrganizationalUnit


@admin.register(OrganizationalUnit)
class OrganizationalUnitAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("code", "name", "type", "parent", "is_active", "employee_count")
    list_filter: ClassVar[tuple[str, ...]] = ("type", "is_active")
    search_fields: ClassVar[tuple[str, ...]] = ("code", "name", "manager_name")


class DirectorDocumentInline(admin.TabularInline):
    model = DirectorDocument
    extra = 0
    fields: ClassVar[tuple[str, ...]] = ("title", "type", "document_date", "is_public")


@admin.register(Director)
class DirectorAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("full_name", "appointment_date", "termination_date", "is_current")
    list_filter: ClassVar[tuple[str, ...]] = ("is_current", "is_active")
    inlines: ClassVar[list[type[admin.TabularInline]]] = [DirectorDocumentInline]

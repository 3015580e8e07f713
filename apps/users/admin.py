"""
Django admin configuration for Users app
"""

from typing import ClassVar

from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Dashboard accounts with admin/author roles; passwords are managed through the API"""

    list_display: ClassVar[tuple[str, ...]] = ("email", "name", "role", "is_active", "last_login", "created_at")
    list_filter: ClassVar[tuple[str, ...]] = ("role", "is_active")
    search_fields: ClassVar[tuple[str, ...]] = ("email", "name")
    ordering: ClassVar[tuple[str, ...]] = ("-created_at",)
    readonly_fields: ClassVar[tuple[str, ...]] = ("last_login", "created_at", "updated_at")
    exclude: ClassVar[tuple[str, ...]] = ("password",)

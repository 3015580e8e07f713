"""
Django admin configuration for setup state
"""

from typing import ClassVar

from django.contrib import admin

from .models import SetupState


@admin.register(SetupState)
class SetupStateAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("is_completed", "institution_type", "completed_at")
    readonly_fields: ClassVar[tuple[str, ...]] = ("completed_at", "created_at", "updated_at")

"""
Django admin configuration for Relof index snapshots
"""

from typing import ClassVar

from django.contrib import admin

from .models import RelofScore


@admin.register(RelofScore)
class RelofScoreAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("calculated_at", "total_score", "earned_points", "max_score", "reason")
    readonly_fields: ClassVar[tuple[str, ...]] = (
        "total_score",
        "max_score",
        "earned_points",
        "category_scores",
        "requirement_results",
        "reason",
        "calculated_at",
    )
    date_hierarchy = "calculated_at"

"""
Activity feed models for the Municipal CMS Platform
"""

from __future__ import annotations

from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class ActivityLog(models.Model):
    """📜 One entry in the dashboard's recent-activity feed"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("post", _("Post")),
        ("page", _("Page")),
        ("media", _("Media")),
        ("user", _("User")),
        ("category", _("Category")),
        ("settings", _("Settings")),
        ("gallery", _("Gallery")),
        ("service", _("Service")),
        ("organization", _("Organization")),
        ("system", _("System")),
    )

    ACTION_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("created", _("Created")),
        ("updated", _("Updated")),
        ("deleted", _("Deleted")),
        ("uploaded", _("Uploaded")),
        ("published", _("Published")),
    )

    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="system")
    action = models.CharField(_("action"), max_length=20, choices=ACTION_CHOICES, default="updated")
    title = models.CharField(_("title"), max_length=255)
    object_id = models.CharField(_("object ID"), max_length=64, blank=True)
    status = models.CharField(_("status"), max_length=32, blank=True)
    url = models.CharField(_("URL"), max_length=500, blank=True, help_text=_("Dashboard link for the object"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
    )
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "activity_logs"
        verbose_name = _("Activity")
        verbose_name_plural = _("Activities")
        ordering: ClassVar[tuple[str, ...]] = ("-created_at", "-id")
        indexes: ClassVar[tuple[models.Index, ...]] = (models.Index(fields=["type", "-created_at"]),)

    def __str__(self) -> str:
        return f"📜 {self.type}:{self.action} {self.title}"

"""
Site Settings models for the Municipal CMS Platform
Key/value configuration edited from the dashboard.
"""

from __future__ import annotations

import json
import math
from typing import Any, ClassVar

from django.db import models
from django.utils.translation import gettext_lazy as _

TRUE_VALUES = frozenset({"true", "1"})
BOOLEAN_VALUES = frozenset({"true", "false", "1", "0"})


class SiteSetting(models.Model):
    """⚙️ Site setting stored as text and parsed by type"""

    TYPE_TEXT = "text"
    TYPE_NUMBER = "number"
    TYPE_BOOLEAN = "boolean"
    TYPE_JSON = "json"
    TYPE_COLOR = "color"
    TYPE_SELECT = "select"
    TYPE_FILE = "file"

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (TYPE_TEXT, _("Text")),
        (TYPE_NUMBER, _("Number")),
        (TYPE_BOOLEAN, _("Boolean")),
        (TYPE_JSON, _("JSON")),
        (TYPE_COLOR, _("Color")),
        (TYPE_SELECT, _("Select")),
        (TYPE_FILE, _("File")),
    )

    CATEGORY_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("general", _("General")),
        ("contact", _("Contact")),
        ("social", _("Social networks")),
        ("seo", _("SEO")),
        ("email", _("Email")),
        ("appearance", _("Appearance")),
        ("advanced", _("Advanced")),
    )

    key = models.CharField(
        _("Key"), max_length=100, unique=True, help_text=_('Setting identifier (e.g., "siteName")')
    )
    value = models.TextField(_("Value"), blank=True, default="")
    type = models.CharField(_("Type"), max_length=20, choices=TYPE_CHOICES, default=TYPE_TEXT)
    category = models.CharField(_("Category"), max_length=20, choices=CATEGORY_CHOICES, default="general")
    label = models.CharField(_("Label"), max_length=200, blank=True)
    description = models.TextField(_("Description"), blank=True)
    options = models.JSONField(_("Options"), default=list, blank=True, help_text=_("Allowed values for select"))
    is_public = models.BooleanField(
        _("Is Public"), default=True, help_text=_("Whether anonymous visitors can read this setting")
    )
    is_sensitive = models.BooleanField(
        _("Is Sensitive"), default=False, help_text=_("Stored encrypted and never returned by the API")
    )
    sort_order = models.PositiveIntegerField(_("Sort Order"), default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "site_settings"
        verbose_name = _("Site Setting")
        verbose_name_plural = _("Site Settings")
        ordering: ClassVar[tuple[str, ...]] = ("category", "sort_order", "key")
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["category", "sort_order"]),
            models.Index(fields=["is_public"]),
        )

    def __str__(self) -> str:
        return f"⚙️ {self.key}"

    def get_typed_value(self) -> Any:
        return parse_value(self.plain_value, self.type)

    @property
    def plain_value(self) -> str:
        if self.is_sensitive:
            from .encryption import decrypt_value  # noqa: PLC0415

            return decrypt_value(self.value)
        return self.value

    def get_display_value(self) -> str:
        return "(hidden)" if self.is_sensitive else self.value


def parse_value(raw: str | None, setting_type: str) -> Any:
    """
    Parse a stored text value by setting type.

    NUMBER -> int when integral, else float; BOOLEAN -> bool; JSON -> parsed
    data (raw text when unparseable); everything else stays text.
    """
    if raw is None:
        return None

    if setting_type == SiteSetting.TYPE_NUMBER:
        try:
            number = float(raw)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number

    if setting_type == SiteSetting.TYPE_BOOLEAN:
        return raw.strip().lower() in TRUE_VALUES

    if setting_type == SiteSetting.TYPE_JSON:
        try:
            return json.loads(raw) if raw else None
        except json.JSONDecodeError:
            return raw

    return raw

"""
Media library models for the Municipal CMS Platform
"""

from __future__ import annotations

from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.common.file_storage import GeneratedUploadPath, clean_filename
from apps.common.file_upload_security import is_image_mime_type


class Media(models.Model):
    """
    🖼️ Uploaded file in the media library.

    Public documents feed the documentation template and the relof index
    (procurement, financial reports, decisions, plans, reports).
    """

    CATEGORY_PROCUREMENT = "procurement"
    CATEGORY_FINANCIAL = "financial"
    CATEGORY_DECISIONS = "decisions"
    CATEGORY_PLANS = "plans"
    CATEGORY_REPORTS = "reports"
    CATEGORY_OTHER = "other"

    CATEGORY_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (CATEGORY_PROCUREMENT, "Јавне набавке"),
        (CATEGORY_FINANCIAL, "Финансијски извештаји"),
        (CATEGORY_DECISIONS, "Одлуке"),
        (CATEGORY_PLANS, "Планови"),
        (CATEGORY_REPORTS, "Извештаји"),
        (CATEGORY_OTHER, "Остало"),
    )

    CATEGORY_DESCRIPTIONS: ClassVar[dict[str, str]] = {
        CATEGORY_PROCUREMENT: "Документи везани за јавне набавке и тендере",
        CATEGORY_FINANCIAL: "Буџети, финансијски планови и извештаји",
        CATEGORY_DECISIONS: "Одлуке донесене на састанцима и седницама",
        CATEGORY_PLANS: "Годишњи планови рада и развоја",
        CATEGORY_REPORTS: "Извештаји о раду управе и других органа",
        CATEGORY_OTHER: "Остали документи и медији",
    }

    file = models.FileField(_("file"), upload_to=GeneratedUploadPath("uploads"), max_length=255)
    filename = models.CharField(_("stored filename"), max_length=255, unique=True)
    original_name = models.CharField(_("original name"), max_length=255)
    mime_type = models.CharField(_("MIME type"), max_length=100)
    size = models.PositiveBigIntegerField(_("size"), default=0, help_text=_("Size in bytes"))

    alt = models.CharField(_("alt text"), max_length=255, blank=True)
    caption = models.CharField(_("caption"), max_length=500, blank=True)
    description = models.TextField(_("description"), blank=True)
    category = models.CharField(_("category"), max_length=20, choices=CATEGORY_CHOICES, default=CATEGORY_OTHER)
    is_public = models.BooleanField(_("public"), default=True)

    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_media",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "media"
        verbose_name = _("Media file")
        verbose_name_plural = _("Media files")
        ordering: ClassVar[tuple[str, ...]] = ("-created_at",)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["category", "is_public"]),
            models.Index(fields=["mime_type"]),
        )

    def __str__(self) -> str:
        return f"🖼️ {self.original_name} ({self.filename})"

    @property
    def url(self) -> str:
        return f"/media/file/{clean_filename(self.filename)}"

    @property
    def is_image(self) -> bool:
        return is_image_mime_type(self.mime_type)

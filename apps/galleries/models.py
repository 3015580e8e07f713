"""
Gallery models for the Municipal CMS Platform
"""

from __future__ import annotations

from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.common.constants import SLUG_MAX_LENGTH, TITLE_MAX_LENGTH
from apps.common.file_storage import GeneratedUploadPath, clean_filename
from apps.content.models import STATUS_CHOICES, STATUS_DRAFT, STATUS_PUBLISHED, SlugMixin


class Gallery(SlugMixin):
    """📸 Photo gallery"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("general", "Општа"),
        ("event", "Догађај"),
        ("exhibition", "Изложба"),
        ("project", "Пројекат"),
        ("other", "Остало"),
    )

    TYPE_DESCRIPTIONS: ClassVar[dict[str, str]] = {
        "general": "Опште фотографије институције",
        "event": "Фотографије са догађаја и манифестација",
        "exhibition": "Поставке и изложбе",
        "project": "Документација пројеката",
        "other": "Остале галерије",
    }

    title = models.CharField(_("title"), max_length=TITLE_MAX_LENGTH)
    slug = models.SlugField(_("slug"), max_length=SLUG_MAX_LENGTH, unique=True, blank=True)
    description = models.TextField(_("description"), blank=True)
    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="general")
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    event_date = models.DateField(_("event date"), null=True, blank=True)
    cover_image = models.ForeignKey(
        "GalleryImage",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="galleries",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "galleries"
        verbose_name = _("Gallery")
        verbose_name_plural = _("Galleries")
        ordering: ClassVar[tuple[str, ...]] = ("sort_order", "-created_at")
        indexes: ClassVar[tuple[models.Index, ...]] = (models.Index(fields=["status", "type"]),)

    def __str__(self) -> str:
        return f"📸 {self.title}"

    @property
    def is_published(self) -> bool:
        return self.status == STATUS_PUBLISHED


class GalleryImage(models.Model):
    """
    🖼️ One image in a gallery.

    Either an uploaded ``file`` or a reference to an existing media
    library entry.
    """

    gallery = models.ForeignKey(Gallery, on_delete=models.CASCADE, related_name="images")
    file = models.FileField(_("file"), upload_to=GeneratedUploadPath("galleries"), max_length=255, blank=True)
    media = models.ForeignKey(
        "media.Media",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="gallery_images",
    )
    filename = models.CharField(_("stored filename"), max_length=255, blank=True)
    original_name = models.CharField(_("original name"), max_length=255, blank=True)
    mime_type = models.CharField(_("MIME type"), max_length=100, blank=True)
    size = models.PositiveBigIntegerField(_("size"), default=0)

    title = models.CharField(_("title"), max_length=TITLE_MAX_LENGTH, blank=True)
    description = models.TextField(_("description"), blank=True)
    alt = models.CharField(_("alt text"), max_length=255, blank=True)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    is_cover = models.BooleanField(_("cover"), default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "gallery_images"
        verbose_name = _("Gallery image")
        verbose_name_plural = _("Gallery images")
        ordering: ClassVar[tuple[str, ...]] = ("gallery", "sort_order", "id")

    def __str__(self) -> str:
        return f"🖼️ {self.title or self.original_name or self.filename}"

    @property
    def url(self) -> str:
        if self.media_id and not self.file:
            return self.media.url
        return f"/galleries/images/{clean_filename(self.filename)}"

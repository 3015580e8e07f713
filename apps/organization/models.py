"""
Organizational structure models for the Municipal CMS Platform
Unit hierarchy, directors and director documents.
"""

from __future__ import annotations

from typing import Any, ClassVar

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.common.file_storage import GeneratedUploadPath, clean_filename


class OrganizationalUnit(models.Model):
    """🏢 Department, sector or office in the institution's hierarchy"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("department", "Одељење"),
        ("division", "Одсек"),
        ("sector", "Сектор"),
        ("service", "Служба"),
        ("office", "Канцеларија"),
        ("other", "Остало"),
    )

    name = models.CharField(_("name"), max_length=255)
    code = models.CharField(_("code"), max_length=50, unique=True)
    description = models.TextField(_("description"), blank=True)
    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="department")
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
    )
    manager_name = models.CharField(_("manager"), max_length=255, blank=True)
    email = models.EmailField(_("email"), blank=True)
    phone = models.CharField(_("phone"), max_length=50, blank=True)
    location = models.CharField(_("location"), max_length=255, blank=True)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    is_active = models.BooleanField(_("active"), default=True)
    employee_count = models.PositiveIntegerField(_("employees"), default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "organizational_units"
        verbose_name = _("Organizational unit")
        verbose_name_plural = _("Organizational units")
        ordering: ClassVar[tuple[str, ...]] = ("sort_order", "name")

    def __str__(self) -> str:
        return f"🏢 {self.code} {self.name}"


class Director(models.Model):
    """👔 Institution director; exactly one may be current"""

    full_name = models.CharField(_("full name"), max_length=255)
    degree = models.CharField(_("degree"), max_length=100, blank=True)
    phone = models.CharField(_("phone"), max_length=50, blank=True)
    email = models.EmailField(_("email"), blank=True)
    office = models.CharField(_("office"), max_length=255, blank=True)
    biography = models.TextField(_("biography"), blank=True)
    biography_file = models.FileField(
        _("biography file"), upload_to=GeneratedUploadPath("directors"), max_length=255, blank=True
    )
    profile_image = models.FileField(
        _("profile image"), upload_to=GeneratedUploadPath("directors"), max_length=255, blank=True
    )
    appointment_date = models.DateField(_("appointment date"))
    termination_date = models.DateField(_("termination date"), null=True, blank=True)
    is_current = models.BooleanField(_("current"), default=False)
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "directors"
        verbose_name = _("Director")
        verbose_name_plural = _("Directors")
        ordering: ClassVar[tuple[str, ...]] = ("-is_current", "-appointment_date")

    def __str__(self) -> str:
        marker = " (current)" if self.is_current else ""
        return f"👔 {self.full_name}{marker}"

    @staticmethod
    def file_url(field: Any) -> str:
        if not field:
            return ""
        return f"/organizational-structure/directors/files/{clean_filename(field.name.rsplit('/', 1)[-1])}"


class DirectorDocument(models.Model):
    """📎 Appointment decree, CV or other document of a director"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("appointment", "Решење о именовању"),
        ("decree", "Указ"),
        ("decision", "Одлука"),
        ("contract", "Уговор"),
        ("termination", "Решење о разрешењу"),
        ("cv", "Биографија"),
        ("diploma", "Диплома"),
        ("certificate", "Сертификат"),
        ("other", "Остало"),
    )

    director = models.ForeignKey(Director, on_delete=models.CASCADE, related_name="documents")
    title = models.CharField(_("title"), max_length=255)
    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="other")
    description = models.TextField(_("description"), blank=True)
    document_date = models.DateField(_("document date"), null=True, blank=True)
    file = models.FileField(_("file"), upload_to=GeneratedUploadPath("directors"), max_length=255)
    original_name = models.CharField(_("original name"), max_length=255)
    mime_type = models.CharField(_("MIME type"), max_length=100)
    size = models.PositiveBigIntegerField(_("size"), default=0)
    is_public = models.BooleanField(_("public"), default=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "director_documents"
        verbose_name = _("Director document")
        verbose_name_plural = _("Director documents")
        ordering: ClassVar[tuple[str, ...]] = ("-uploaded_at",)

    def __str__(self) -> str:
        return f"📎 {self.title}"

    @property
    def filename(self) -> str:
        return self.file.name.rsplit("/", 1)[-1] if self.file else ""

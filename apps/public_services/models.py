"""
Citizen services catalog models for the Municipal CMS Platform
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.common.constants import SLUG_MAX_LENGTH
from apps.common.file_storage import GeneratedUploadPath
from apps.content.models import SlugMixin


class Service(SlugMixin):
    """🏛️ Service offered to citizens"""

    slug_source: ClassVar[str] = "name"

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("administrative", "Административне услуге"),
        ("consulting", "Саветодавне услуге"),
        ("technical", "Техничке услуге"),
        ("legal", "Правне услуге"),
        ("educational", "Образовне услуге"),
        ("health", "Здравствене услуге"),
        ("social", "Социјалне услуге"),
        ("cultural", "Културне услуге"),
        ("other", "Остало"),
    )

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (STATUS_ACTIVE, _("Active")),
        (STATUS_INACTIVE, _("Inactive")),
        ("draft", _("Draft")),
    )

    PRIORITY_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("low", "Низак приоритет"),
        ("medium", "Средњи приоритет"),
        ("high", "Висок приоритет"),
        ("urgent", "Хитне услуге"),
    )

    name = models.CharField(_("name"), max_length=255)
    slug = models.SlugField(_("slug"), max_length=SLUG_MAX_LENGTH, unique=True, blank=True)
    short_description = models.CharField(_("short description"), max_length=500, blank=True)
    description = models.TextField(_("description"), blank=True)
    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="administrative")
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    priority = models.CharField(_("priority"), max_length=20, choices=PRIORITY_CHOICES, default="medium")

    price = models.DecimalField(
        _("price"),
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.CharField(_("currency"), max_length=3, default="RSD")
    duration = models.CharField(_("duration"), max_length=100, blank=True, help_text=_("e.g. 5 working days"))

    responsible_department = models.CharField(_("responsible department"), max_length=255, blank=True)
    contact_person = models.CharField(_("contact person"), max_length=255, blank=True)
    contact_phone = models.CharField(_("contact phone"), max_length=50, blank=True)
    contact_email = models.EmailField(_("contact email"), blank=True)
    working_hours = models.CharField(_("working hours"), max_length=255, blank=True)
    location = models.CharField(_("location"), max_length=255, blank=True)
    additional_info = models.TextField(_("additional info"), blank=True)
    requirements = models.JSONField(_("requirements"), default=list, blank=True)
    steps = models.JSONField(_("steps"), default=list, blank=True)

    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    is_active = models.BooleanField(_("active"), default=True)
    is_public = models.BooleanField(_("public"), default=True)
    requires_appointment = models.BooleanField(_("requires appointment"), default=False)
    is_online = models.BooleanField(_("available online"), default=False)
    request_count = models.PositiveIntegerField(_("requests"), default=0)
    view_count = models.PositiveIntegerField(_("views"), default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "services"
        verbose_name = _("Service")
        verbose_name_plural = _("Services")
        ordering: ClassVar[tuple[str, ...]] = ("sort_order", "name")
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["type", "status"]),
            models.Index(fields=["is_public", "is_active"]),
        )

    def __str__(self) -> str:
        return f"🏛️ {self.name}"


class ServiceDocument(models.Model):
    """📎 Downloadable form or instruction attached to a service"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ("form", "Образац"),
        ("instruction", "Упутство"),
        ("regulation", "Пропис"),
        ("template", "Шаблон"),
        ("other", "Остало"),
    )

    TYPE_DESCRIPTIONS: ClassVar[dict[str, str]] = {
        "form": "Образац за попуњавање",
        "instruction": "Упутство за коришћење услуге",
        "regulation": "Закон, правилник или одлука",
        "template": "Пример попуњеног документа",
        "other": "Остали документи",
    }

    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="documents")
    title = models.CharField(_("title"), max_length=255)
    type = models.CharField(_("type"), max_length=20, choices=TYPE_CHOICES, default="form")
    description = models.TextField(_("description"), blank=True)
    file = models.FileField(_("file"), upload_to=GeneratedUploadPath("services"), max_length=255)
    original_name = models.CharField(_("original name"), max_length=255)
    mime_type = models.CharField(_("MIME type"), max_length=100)
    size = models.PositiveBigIntegerField(_("size"), default=0)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    is_active = models.BooleanField(_("active"), default=True)
    is_public = models.BooleanField(_("public"), default=True)
    download_count = models.PositiveIntegerField(_("downloads"), default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "service_documents"
        verbose_name = _("Service document")
        verbose_name_plural = _("Service documents")
        ordering: ClassVar[tuple[str, ...]] = ("service", "sort_order", "id")

    def __str__(self) -> str:
        return f"📎 {self.title} ({self.service_id})"

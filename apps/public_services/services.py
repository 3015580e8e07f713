"""
Citizen services catalog for the Municipal CMS Platform
Service CRUD, statistics, counters and downloadable documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from django.db.models import Count, F, Q, QuerySet, Sum
from django.utils.translation import gettext as _

from apps.common.file_upload_security import validate_document_upload
from apps.common.security_decorators import atomic_with_retry, audit_service_call
from apps.common.transliteration import highlight_patterns
from apps.common.types import Err, Ok, Result, ServiceError, invalid, not_found
from apps.common.utils import unique_slug

from .models import Service, ServiceDocument

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_TYPES = dict(Service.TYPE_CHOICES)
_STATUSES = dict(Service.STATUS_CHOICES)
_PRIORITIES = dict(Service.PRIORITY_CHOICES)
_DOCUMENT_TYPES = dict(ServiceDocument.TYPE_CHOICES)


@dataclass
class ServiceCreationRequest:
    """Parameter object for service creation; ``extra`` carries optional model fields"""

    name: str
    type: str = "administrative"
    status: str = Service.STATUS_ACTIVE
    priority: str = "medium"
    slug: str = ""
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ServiceDocumentRequest:
    title: str
    type: str = "form"
    description: str = ""
    sort_order: int = 0
    is_public: bool = True


class ServiceCatalogService:
    """🏛️ Citizen services catalog"""

    OPTIONAL_FIELDS = (
        "short_description",
        "description",
        "price",
        "currency",
        "duration",
        "responsible_department",
        "contact_person",
        "contact_phone",
        "contact_email",
        "working_hours",
        "location",
        "additional_info",
        "requirements",
        "steps",
        "sort_order",
        "is_active",
        "is_public",
        "requires_appointment",
        "is_online",
    )
    EDITABLE_FIELDS = ("name", "type", "status", "priority", *OPTIONAL_FIELDS)
    DOCUMENT_FIELDS = ("title", "type", "description", "sort_order", "is_active", "is_public")

    # ===============================================================================
    # SERVICES
    # ===============================================================================

    @staticmethod
    def list(
        type: str | None = None,  # noqa: A002
        status: str | None = None,
        search: str | None = None,
        is_public: bool | None = None,
    ) -> QuerySet[Service]:
        queryset = Service.objects.annotate(documents_count=Count("documents", distinct=True))
        if type:
            queryset = queryset.filter(type=type)
        if status:
            queryset = queryset.filter(status=status)
        if is_public is not None:
            queryset = queryset.filter(is_public=is_public)
        if search and search.strip():
            condition = Q()
            for pattern in highlight_patterns(search.strip()):
                condition |= Q(name__icontains=pattern) | Q(short_description__icontains=pattern)
                condition |= Q(description__icontains=pattern)
            queryset = queryset.filter(condition)
        return queryset.order_by("sort_order", "name")

    @classmethod
    def public(cls, type: str | None = None, search: str | None = None) -> QuerySet[Service]:  # noqa: A002
        return cls.list(type=type, status=Service.STATUS_ACTIVE, search=search, is_public=True).filter(is_active=True)

    @staticmethod
    def get(service_id: int) -> Result[Service, ServiceError]:
        service = Service.objects.filter(pk=service_id).first()
        if service is None:
            return not_found(_("Service not found"))
        return Ok(service)

    @staticmethod
    def get_by_slug(slug: str, public_only: bool = False) -> Result[Service, ServiceError]:
        queryset = Service.objects.all()
        if public_only:
            queryset = queryset.filter(status=Service.STATUS_ACTIVE, is_active=True, is_public=True)
        service = queryset.filter(slug=slug).first()
        if service is None:
            return not_found(_("Service not found"))
        return Ok(service)

    @staticmethod
    def _validate(fields: dict[str, Any]) -> Err[ServiceError] | None:
        if "name" in fields and not (fields["name"] or "").strip():
            return invalid(_("Name is required"), "name")
        if "type" in fields and fields["type"] not in _TYPES:
            return invalid(_("Unknown service type"), "type")
        if "status" in fields and fields["status"] not in _STATUSES:
            return invalid(_("Unknown status"), "status")
        if "priority" in fields and fields["priority"] not in _PRIORITIES:
            return invalid(_("Unknown priority"), "priority")
        for list_field in ("requirements", "steps"):
            if list_field in fields and not isinstance(fields[list_field], list):
                return invalid(_("Must be a list"), list_field)
        if fields.get("price") not in (None, ""):
            try:
                price = Decimal(str(fields["price"]))
            except InvalidOperation:
                return invalid(_("Price must be a number"), "price")
            if price < 0:
                return invalid(_("Price cannot be negative"), "price")
            fields["price"] = price
        elif "price" in fields:
            fields["price"] = None
        return None

    @classmethod
    @audit_service_call("service_create")
    def create(cls, request: ServiceCreationRequest) -> Result[Service, ServiceError]:
        fields = {
            "name": request.name,
            "type": request.type,
            "status": request.status,
            "priority": request.priority,
            **{key: value for key, value in request.extra.items() if key in cls.OPTIONAL_FIELDS},
        }
        if error := cls._validate(fields):
            return error
        fields["name"] = fields["name"].strip()
        service = Service.objects.create(slug=request.slug, **fields)
        logger.info(f"✅ [Services] Created {service.slug}")
        return Ok(service)

    @classmethod
    @audit_service_call("service_update")
    def update(cls, service: Service, **fields: Any) -> Result[Service, ServiceError]:
        if error := cls._validate(fields):
            return error
        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                setattr(service, name, fields[name])
        if fields.get("slug"):
            service.slug = unique_slug(Service, fields["slug"], instance_pk=service.pk)
        service.save()
        return Ok(service)

    @staticmethod
    @audit_service_call("service_delete")
    def delete(service: Service) -> Result[int, ServiceError]:
        service_id = service.pk
        files = [document.file for document in service.documents.all()]
        service.delete()
        for file in files:
            file.storage.delete(file.name)
        logger.warning(f"🗑️ [Services] Deleted service {service_id} with {len(files)} documents")
        return Ok(service_id)

    @staticmethod
    def statistics() -> dict[str, Any]:
        by_type = dict(Service.objects.values_list("type").annotate(count=Count("id")))
        total = Service.objects.count()
        active = Service.objects.filter(status=Service.STATUS_ACTIVE).count()
        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "public": Service.objects.filter(is_public=True).count(),
            "online": Service.objects.filter(is_online=True).count(),
            "requiresAppointment": Service.objects.filter(requires_appointment=True).count(),
            "byType": {value: by_type.get(value, 0) for value in _TYPES},
            "totalRequests": Service.objects.aggregate(total=Sum("request_count"))["total"] or 0,
            "totalDocuments": ServiceDocument.objects.count(),
        }

    @staticmethod
    def increment_request_count(service: Service) -> int:
        Service.objects.filter(pk=service.pk).update(request_count=F("request_count") + 1)
        service.refresh_from_db(fields=["request_count"])
        return service.request_count

    @staticmethod
    def increment_view_count(service: Service) -> int:
        Service.objects.filter(pk=service.pk).update(view_count=F("view_count") + 1)
        service.refresh_from_db(fields=["view_count"])
        return service.view_count

    # ===============================================================================
    # DOCUMENTS
    # ===============================================================================

    @staticmethod
    def document_types() -> list[dict[str, str]]:
        return [
            {"value": value, "label": label, "description": ServiceDocument.TYPE_DESCRIPTIONS[value]}
            for value, label in ServiceDocument.TYPE_CHOICES
        ]

    @staticmethod
    def documents(service: Service) -> QuerySet[ServiceDocument]:
        return service.documents.order_by("sort_order", "id")

    @staticmethod
    def public_documents(service: Service) -> QuerySet[ServiceDocument]:
        return service.documents.filter(is_public=True, is_active=True).order_by("sort_order", "id")

    @staticmethod
    def get_document(service: Service, document_id: int) -> Result[ServiceDocument, ServiceError]:
        document = service.documents.filter(pk=document_id).first()
        if document is None:
            return not_found(_("Document not found"))
        return Ok(document)

    @staticmethod
    @atomic_with_retry()
    @audit_service_call("service_document_upload")
    def upload_document(
        service: Service, file: UploadedFile, request: ServiceDocumentRequest
    ) -> Result[ServiceDocument, ServiceError]:
        if not (request.title or "").strip():
            return invalid(_("Title is required"), "title")
        if request.type not in _DOCUMENT_TYPES:
            return invalid(_("Unknown document type"), "type")

        validation = validate_document_upload(file)
        if not validation.is_valid:
            return invalid(validation.error_message or _("File validation failed"), "file")

        document = ServiceDocument(
            service=service,
            title=request.title.strip(),
            type=request.type,
            description=request.description,
            original_name=file.name,
            mime_type=validation.detected_mime_type or "",
            size=validation.file_size,
            sort_order=request.sort_order,
            is_public=request.is_public,
        )
        document.file.save(file.name, file, save=False)
        document.save()
        logger.info(f"📤 [Services] Document {document.pk} uploaded for {service.slug}")
        return Ok(document)

    @classmethod
    def update_document(cls, document: ServiceDocument, **fields: Any) -> Result[ServiceDocument, ServiceError]:
        if "type" in fields and fields["type"] not in _DOCUMENT_TYPES:
            return invalid(_("Unknown document type"), "type")
        if "title" in fields and not (fields["title"] or "").strip():
            return invalid(_("Title is required"), "title")
        changed = [name for name in cls.DOCUMENT_FIELDS if name in fields]
        for name in changed:
            setattr(document, name, fields[name])
        if changed:
            document.save(update_fields=changed)
        return Ok(document)

    @staticmethod
    def delete_document(document: ServiceDocument) -> Result[int, ServiceError]:
        document_id = document.pk
        file = document.file
        document.delete()
        if file:
            file.storage.delete(file.name)
        logger.info(f"🗑️ [Services] Deleted document {document_id}")
        return Ok(document_id)

    @staticmethod
    def download_document(document: ServiceDocument) -> Result[ServiceDocument, ServiceError]:
        """Count the download atomically; the caller streams ``document.file``"""
        if not document.file or not document.file.storage.exists(document.file.name):
            return not_found(_("File not found"))
        ServiceDocument.objects.filter(pk=document.pk).update(download_count=F("download_count") + 1)
        document.refresh_from_db(fields=["download_count"])
        return Ok(document)

"""
Organizational structure services for the Municipal CMS Platform
Unit tree management and the director registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db.models import Count, QuerySet, Sum
from django.utils.translation import gettext as _

from apps.common.file_storage import clean_filename, is_safe_filename
from apps.common.file_upload_security import validate_document_upload, validate_image_upload
from apps.common.security_decorators import atomic_with_retry, audit_service_call
from apps.common.types import Err, Ok, Result, ServiceError, conflict, invalid, not_found

from .models import Director, DirectorDocument, OrganizationalUnit

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_UNIT_TYPES = dict(OrganizationalUnit.TYPE_CHOICES)
_DOCUMENT_TYPES = dict(DirectorDocument.TYPE_CHOICES)


def _children_map(units: list[OrganizationalUnit]) -> dict[int | None, list[OrganizationalUnit]]:
    known = {unit.pk for unit in units}
    children: dict[int | None, list[OrganizationalUnit]] = {}
    for unit in units:
        parent = unit.parent_id if unit.parent_id in known else None
        children.setdefault(parent, []).append(unit)
    for siblings in children.values():
        siblings.sort(key=lambda u: (u.sort_order, u.name))
    return children


# ===============================================================================
# ORGANIZATIONAL UNITS
# ===============================================================================


@dataclass
class UnitCreationRequest:
    """Parameter object for unit creation"""

    name: str
    code: str
    type: str = "department"
    description: str = ""
    parent_id: int | None = None
    manager_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    sort_order: int = 0
    is_active: bool = True
    employee_count: int = 0


class OrganizationService:
    """🏢 Organizational unit hierarchy"""

    EDITABLE_FIELDS = (
        "name",
        "code",
        "type",
        "description",
        "manager_name",
        "email",
        "phone",
        "location",
        "sort_order",
        "is_active",
        "employee_count",
    )

    @staticmethod
    def list(active_only: bool = False) -> QuerySet[OrganizationalUnit]:
        queryset = OrganizationalUnit.objects.select_related("parent")
        if active_only:
            queryset = queryset.filter(is_active=True)
        return queryset.order_by("sort_order", "name")

    @classmethod
    def tree(cls, active_only: bool = False) -> list[dict[str, Any]]:
        """Nested ``{unit, children}`` nodes, siblings by sort_order then name"""
        children = _children_map(list(cls.list(active_only)))

        def build(parent_id: int | None) -> list[dict[str, Any]]:
            return [{"unit": unit, "children": build(unit.pk)} for unit in children.get(parent_id, [])]

        return build(None)

    @staticmethod
    def roots() -> QuerySet[OrganizationalUnit]:
        return OrganizationalUnit.objects.filter(parent__isnull=True).order_by("sort_order", "name")

    @staticmethod
    def get(unit_id: int) -> Result[OrganizationalUnit, ServiceError]:
        unit = OrganizationalUnit.objects.select_related("parent").filter(pk=unit_id).first()
        if unit is None:
            return not_found(_("Organizational unit not found"))
        return Ok(unit)

    @staticmethod
    def get_by_code(code: str) -> Result[OrganizationalUnit, ServiceError]:
        unit = OrganizationalUnit.objects.filter(code=code).first()
        if unit is None:
            return not_found(_("Organizational unit not found"))
        return Ok(unit)

    @staticmethod
    def descendants(unit: OrganizationalUnit) -> list[OrganizationalUnit]:
        """All units below ``unit``, depth-first"""
        children = _children_map(list(OrganizationalUnit.objects.all()))
        result: list[OrganizationalUnit] = []
        stack = list(reversed(children.get(unit.pk, [])))
        seen = {unit.pk}
        while stack:
            current = stack.pop()
            if current.pk in seen:
                continue
            seen.add(current.pk)
            result.append(current)
            stack.extend(reversed(children.get(current.pk, [])))
        return result

    @staticmethod
    def ancestors(unit: OrganizationalUnit) -> list[OrganizationalUnit]:
        """Chain of parents, root first"""
        units = {u.pk: u for u in OrganizationalUnit.objects.all()}
        chain: list[OrganizationalUnit] = []
        seen = {unit.pk}
        current = units.get(unit.parent_id) if unit.parent_id else None
        while current is not None and current.pk not in seen:
            seen.add(current.pk)
            chain.append(current)
            current = units.get(current.parent_id) if current.parent_id else None
        chain.reverse()
        return chain

    @staticmethod
    def _validate(fields: dict[str, Any], instance_pk: int | None = None) -> Err[ServiceError] | None:
        if "name" in fields and not (fields["name"] or "").strip():
            return invalid(_("Name is required"), "name")
        if "code" in fields:
            code = (fields["code"] or "").strip()
            if not code:
                return invalid(_("Code is required"), "code")
            if OrganizationalUnit.objects.filter(code=code).exclude(pk=instance_pk).exists():
                return conflict(_("A unit with this code already exists"), "code")
        if "type" in fields and fields["type"] not in _UNIT_TYPES:
            return invalid(_("Unknown unit type"), "type")
        return None

    @classmethod
    @audit_service_call("org_unit_create")
    def create(cls, request: UnitCreationRequest) -> Result[OrganizationalUnit, ServiceError]:
        if error := cls._validate({"name": request.name, "code": request.code, "type": request.type}):
            return error
        if request.parent_id and not OrganizationalUnit.objects.filter(pk=request.parent_id).exists():
            return invalid(_("Parent unit does not exist"), "parentId")

        unit = OrganizationalUnit.objects.create(
            name=request.name.strip(),
            code=request.code.strip(),
            type=request.type,
            description=request.description,
            parent_id=request.parent_id,
            manager_name=request.manager_name,
            email=request.email,
            phone=request.phone,
            location=request.location,
            sort_order=request.sort_order,
            is_active=request.is_active,
            employee_count=request.employee_count,
        )
        logger.info(f"✅ [Organization] Created unit {unit.code}")
        return Ok(unit)

    @classmethod
    @audit_service_call("org_unit_update")
    def update(cls, unit: OrganizationalUnit, **fields: Any) -> Result[OrganizationalUnit, ServiceError]:
        if error := cls._validate(fields, instance_pk=unit.pk):
            return error
        if "parent_id" in fields:
            moved = cls.move(unit, fields["parent_id"])
            if moved.is_err():
                return moved
        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                value = fields[name]
                setattr(unit, name, value.strip() if name in {"name", "code"} else value)
        unit.save()
        return Ok(unit)

    @classmethod
    def move(cls, unit: OrganizationalUnit, new_parent_id: int | None) -> Result[OrganizationalUnit, ServiceError]:
        """Re-parent a unit; rejects itself and its own descendants as the new parent"""
        new_parent_id = new_parent_id or None
        if new_parent_id is not None:
            if new_parent_id == unit.pk:
                return invalid(_("A unit cannot be its own parent"), "newParentId")
            if not OrganizationalUnit.objects.filter(pk=new_parent_id).exists():
                return invalid(_("Parent unit does not exist"), "newParentId")
            if new_parent_id in {d.pk for d in cls.descendants(unit)}:
                return invalid(_("A unit cannot be moved under its own descendant"), "newParentId")

        unit.parent_id = new_parent_id
        unit.save(update_fields=["parent", "updated_at"])
        logger.info(f"🔀 [Organization] Moved {unit.code} under {new_parent_id or 'root'}")
        return Ok(unit)

    @staticmethod
    @atomic_with_retry()
    @audit_service_call("org_unit_delete")
    def delete(unit: OrganizationalUnit) -> Result[int, ServiceError]:
        """Delete a unit; its children move up to the unit's parent"""
        unit_id = unit.pk
        OrganizationalUnit.objects.filter(parent_id=unit_id).update(parent_id=unit.parent_id)
        unit.delete()
        logger.warning(f"🗑️ [Organization] Deleted unit {unit_id}")
        return Ok(unit_id)

    @classmethod
    def _levels(cls) -> list[tuple[OrganizationalUnit, int]]:
        """Depth-first ``(unit, level)`` pairs, roots at level 0"""
        children = _children_map(list(OrganizationalUnit.objects.select_related("parent")))
        result: list[tuple[OrganizationalUnit, int]] = []

        def visit(parent_id: int | None, level: int) -> None:
            for unit in children.get(parent_id, []):
                result.append((unit, level))
                visit(unit.pk, level + 1)

        visit(None, 0)
        return result

    @classmethod
    def statistics(cls) -> dict[str, Any]:
        levels = cls._levels()
        by_type = dict(OrganizationalUnit.objects.values_list("type").annotate(count=Count("id")))
        return {
            "totalUnits": len(levels),
            "activeUnits": sum(1 for unit, _level in levels if unit.is_active),
            "rootUnits": sum(1 for _unit, level in levels if level == 0),
            "maxDepth": max((level for _unit, level in levels), default=-1) + 1,
            "totalEmployees": OrganizationalUnit.objects.aggregate(total=Sum("employee_count"))["total"] or 0,
            "byType": {value: by_type.get(value, 0) for value in _UNIT_TYPES},
        }

    @classmethod
    def export(cls) -> list[dict[str, Any]]:
        """Flat export with ``parentCode`` and ``level``"""
        return [
            {
                "id": unit.pk,
                "name": unit.name,
                "code": unit.code,
                "type": unit.type,
                "description": unit.description,
                "parentCode": unit.parent.code if unit.parent_id and unit.parent else None,
                "level": level,
                "managerName": unit.manager_name,
                "email": unit.email,
                "phone": unit.phone,
                "location": unit.location,
                "employeeCount": unit.employee_count,
                "isActive": unit.is_active,
                "sortOrder": unit.sort_order,
            }
            for unit, level in cls._levels()
        ]


# ===============================================================================
# DIRECTORS
# ===============================================================================


@dataclass
class DirectorCreationRequest:
    """Parameter object for director creation"""

    full_name: str
    appointment_date: date
    degree: str = ""
    phone: str = ""
    email: str = ""
    office: str = ""
    biography: str = ""
    termination_date: date | None = None
    is_current: bool = False
    is_active: bool = True


@dataclass
class DirectorDocumentRequest:
    title: str
    type: str = "other"
    description: str = ""
    document_date: date | None = None
    is_public: bool = True


class DirectorService:
    """👔 Director registry"""

    EDITABLE_FIELDS = (
        "full_name",
        "degree",
        "phone",
        "email",
        "office",
        "biography",
        "appointment_date",
        "termination_date",
        "is_active",
    )
    DOCUMENT_FIELDS = ("title", "type", "description", "document_date", "is_public")

    @staticmethod
    def list() -> QuerySet[Director]:
        return Director.objects.annotate(documents_count=Count("documents")).order_by(
            "-is_current", "-appointment_date"
        )

    @staticmethod
    def get(director_id: int) -> Result[Director, ServiceError]:
        director = Director.objects.filter(pk=director_id).first()
        if director is None:
            return not_found(_("Director not found"))
        return Ok(director)

    @staticmethod
    def current() -> Director | None:
        return Director.objects.filter(is_current=True).first()

    @staticmethod
    def _clear_current(except_pk: int) -> None:
        Director.objects.filter(is_current=True).exclude(pk=except_pk).update(is_current=False)

    @classmethod
    @atomic_with_retry()
    @audit_service_call("director_create")
    def create(cls, request: DirectorCreationRequest) -> Result[Director, ServiceError]:
        if not (request.full_name or "").strip():
            return invalid(_("Full name is required"), "fullName")
        if request.appointment_date is None:
            return invalid(_("Appointment date is required"), "appointmentDate")

        director = Director.objects.create(
            full_name=request.full_name.strip(),
            degree=request.degree,
            phone=request.phone,
            email=request.email,
            office=request.office,
            biography=request.biography,
            appointment_date=request.appointment_date,
            termination_date=None if request.is_current else request.termination_date,
            is_current=request.is_current,
            is_active=request.is_active,
        )
        if director.is_current:
            cls._clear_current(director.pk)
        logger.info(f"✅ [Directors] Created {director.full_name}")
        return Ok(director)

    @classmethod
    @atomic_with_retry()
    def update(cls, director: Director, **fields: Any) -> Result[Director, ServiceError]:
        if "full_name" in fields and not (fields["full_name"] or "").strip():
            return invalid(_("Full name is required"), "fullName")
        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                setattr(director, name, fields[name])
        director.save()
        if fields.get("is_current") and not director.is_current:
            return cls.set_current(director)
        if fields.get("is_current") is False and director.is_current:
            director.is_current = False
            director.save(update_fields=["is_current", "updated_at"])
        return Ok(director)

    @classmethod
    @atomic_with_retry()
    @audit_service_call("director_set_current")
    def set_current(cls, director: Director) -> Result[Director, ServiceError]:
        """Make ``director`` the only current director"""
        cls._clear_current(director.pk)
        director.is_current = True
        director.termination_date = None
        director.save(update_fields=["is_current", "termination_date", "updated_at"])
        logger.info(f"⭐ [Directors] {director.full_name} is now the current director")
        return Ok(director)

    @staticmethod
    @audit_service_call("director_delete")
    def delete(director: Director) -> Result[int, ServiceError]:
        director_id = director.pk
        files = [doc.file for doc in director.documents.all()]
        files += [f for f in (director.biography_file, director.profile_image) if f]
        director.delete()
        for file in files:
            file.storage.delete(file.name)
        logger.warning(f"🗑️ [Directors] Deleted director {director_id}")
        return Ok(director_id)

    @staticmethod
    def statistics() -> dict[str, Any]:
        current = Director.objects.filter(is_current=True).first()
        by_type = DirectorDocument.objects.values("type").annotate(count=Count("id")).order_by("type")
        return {
            "totalDirectors": Director.objects.count(),
            "hasCurrentDirector": current is not None,
            "currentDirector": (
                {
                    "id": current.pk,
                    "fullName": current.full_name,
                    "appointmentDate": current.appointment_date.isoformat(),
                }
                if current
                else None
            ),
            "totalDocuments": DirectorDocument.objects.count(),
            "publicDocuments": DirectorDocument.objects.filter(is_public=True).count(),
            "documentsByType": [{"type": row["type"], "count": row["count"]} for row in by_type],
        }

    @staticmethod
    def document_types() -> list[dict[str, str]]:
        return [
            {"value": value, "label": label, "description": label} for value, label in DirectorDocument.TYPE_CHOICES
        ]

    # ===============================================================================
    # DOCUMENTS & FILES
    # ===============================================================================

    @staticmethod
    def documents(director: Director) -> QuerySet[DirectorDocument]:
        return director.documents.order_by("-uploaded_at")

    @staticmethod
    def public_documents(director: Director) -> QuerySet[DirectorDocument]:
        return director.documents.filter(is_public=True).order_by("-uploaded_at")

    @staticmethod
    def get_document(director: Director, document_id: int) -> Result[DirectorDocument, ServiceError]:
        document = director.documents.filter(pk=document_id).first()
        if document is None:
            return not_found(_("Document not found"))
        return Ok(document)

    @staticmethod
    @audit_service_call("director_document_upload")
    def upload_document(
        director: Director, file: UploadedFile, request: DirectorDocumentRequest
    ) -> Result[DirectorDocument, ServiceError]:
        if not (request.title or "").strip():
            return invalid(_("Title is required"), "title")
        if request.type not in _DOCUMENT_TYPES:
            return invalid(_("Unknown document type"), "type")
        validation = validate_document_upload(file)
        if not validation.is_valid:
            return invalid(validation.error_message or _("File validation failed"), "file")

        document = DirectorDocument(
            director=director,
            title=request.title.strip(),
            type=request.type,
            description=request.description,
            document_date=request.document_date,
            original_name=file.name,
            mime_type=validation.detected_mime_type or "",
            size=validation.file_size,
            is_public=request.is_public,
        )
        document.file.save(file.name, file, save=False)
        document.save()
        logger.info(f"📤 [Directors] Document {document.pk} uploaded for {director.full_name}")
        return Ok(document)

    @classmethod
    def update_document(cls, document: DirectorDocument, **fields: Any) -> Result[DirectorDocument, ServiceError]:
        if "type" in fields and fields["type"] not in _DOCUMENT_TYPES:
            return invalid(_("Unknown document type"), "type")
        changed = [name for name in cls.DOCUMENT_FIELDS if name in fields]
        for name in changed:
            setattr(document, name, fields[name])
        if changed:
            document.save(update_fields=changed)
        return Ok(document)

    @staticmethod
    def delete_document(document: DirectorDocument) -> Result[int, ServiceError]:
        document_id = document.pk
        file = document.file
        document.delete()
        if file:
            file.storage.delete(file.name)
        return Ok(document_id)

    @staticmethod
    def _replace_file(director: Director, field_name: str, file: UploadedFile) -> None:
        field = getattr(director, field_name)
        old_name = field.name if field else ""
        field.save(file.name, file, save=False)
        director.save(update_fields=[field_name, "updated_at"])
        if old_name:
            field.storage.delete(old_name)

    @classmethod
    def upload_biography(cls, director: Director, file: UploadedFile) -> Result[Director, ServiceError]:
        validation = validate_document_upload(file)
        if not validation.is_valid:
            return invalid(validation.error_message or _("File validation failed"), "file")
        cls._replace_file(director, "biography_file", file)
        return Ok(director)

    @classmethod
    def upload_profile_image(cls, director: Director, file: UploadedFile) -> Result[Director, ServiceError]:
        validation = validate_image_upload(file)
        if not validation.is_valid:
            return invalid(validation.error_message or _("File validation failed"), "file")
        cls._replace_file(director, "profile_image", file)
        return Ok(director)

    @staticmethod
    def get_file_path(filename: str) -> Result[Path, ServiceError]:
        name = clean_filename(filename or "")
        if not is_safe_filename(name):
            return invalid(_("Invalid filename"), "filename")
        path = Path(settings.MEDIA_ROOT) / "directors" / name
        if not path.is_file():
            return not_found(_("File not found"))
        return Ok(path)

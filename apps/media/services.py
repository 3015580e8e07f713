"""
Media library services for the Municipal CMS Platform
Validated uploads, metadata, category statistics and file lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db.models import Count, Q, QuerySet, Sum
from django.utils.translation import gettext as _

from apps.common.file_storage import clean_filename, is_safe_filename
from apps.common.file_upload_security import validate_media_upload
from apps.common.security_decorators import audit_service_call, monitor_performance
from apps.common.transliteration import highlight_patterns
from apps.common.types import Err, Ok, Result, ServiceError, invalid, not_found

from .models import Media

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_CATEGORIES = dict(Media.CATEGORY_CHOICES)


@dataclass
class MediaUploadRequest:
    """Metadata sent along with an upload"""

    alt: str = ""
    caption: str = ""
    description: str = ""
    category: str = Media.CATEGORY_OTHER
    is_public: bool = True


def _validation_failed(message: str | None) -> Err[ServiceError]:
    return invalid(message or _("File validation failed"), "file")


class MediaService:
    """🖼️ Media library management"""

    METADATA_FIELDS = ("alt", "caption", "description", "category", "is_public")

    # ===============================================================================
    # QUERIES
    # ===============================================================================

    @staticmethod
    def list(category: str | None = None, is_public: bool | None = None, search: str | None = None) -> QuerySet[Media]:
        queryset = Media.objects.select_related("uploaded_by")
        if category:
            queryset = queryset.filter(category=category)
        if is_public is not None:
            queryset = queryset.filter(is_public=is_public)
        if search and search.strip():
            condition = Q()
            for pattern in highlight_patterns(search.strip()):
                condition |= Q(original_name__icontains=pattern) | Q(alt__icontains=pattern)
                condition |= Q(caption__icontains=pattern) | Q(description__icontains=pattern)
            queryset = queryset.filter(condition)
        return queryset.order_by("-created_at")

    @classmethod
    def public(cls, category: str | None = None, search: str | None = None) -> QuerySet[Media]:
        return cls.list(category=category, is_public=True, search=search)

    @classmethod
    def by_category(cls, category: str) -> QuerySet[Media]:
        return cls.list(category=category)

    @classmethod
    def public_by_category(cls, category: str) -> QuerySet[Media]:
        return cls.list(category=category, is_public=True)

    @staticmethod
    def categories() -> list[dict[str, str]]:
        return [
            {"value": value, "label": label, "description": Media.CATEGORY_DESCRIPTIONS[value]}
            for value, label in Media.CATEGORY_CHOICES
        ]

    @staticmethod
    def category_stats() -> list[dict[str, Any]]:
        """``[{category, label, count, totalSize}]`` for every category, empty ones included"""
        rows = {
            row["category"]: row
            for row in Media.objects.values("category").annotate(count=Count("id"), total_size=Sum("size"))
        }
        return [
            {
                "category": value,
                "label": label,
                "count": rows.get(value, {}).get("count", 0),
                "totalSize": rows.get(value, {}).get("total_size") or 0,
            }
            for value, label in Media.CATEGORY_CHOICES
        ]

    @staticmethod
    def get_by_filename(filename: str) -> Media | None:
        return Media.objects.filter(filename=clean_filename(filename)).first()

    @staticmethod
    def get_file_path(filename: str) -> Result[Path, ServiceError]:
        """Absolute path of a stored upload; rejects path traversal"""
        name = clean_filename(filename or "")
        if not is_safe_filename(name):
            return invalid(_("Invalid filename"), "filename")
        path = Path(settings.MEDIA_ROOT) / "uploads" / name
        if not path.is_file():
            return not_found(_("File not found"))
        return Ok(path)

    # ===============================================================================
    # MUTATIONS
    # ===============================================================================

    @staticmethod
    def _check_category(category: str) -> Err[ServiceError] | None:
        if category not in _CATEGORIES:
            return invalid(_("Unknown media category"), "category")
        return None

    @classmethod
    @monitor_performance(max_duration_seconds=10.0)
    @audit_service_call("media_upload")
    def upload(
        cls, file: UploadedFile, request: MediaUploadRequest | None = None, user: Any = None
    ) -> Result[Media, ServiceError]:
        request = request or MediaUploadRequest()
        if error := cls._check_category(request.category):
            return error

        validation = validate_media_upload(file)
        if not validation.is_valid:
            logger.warning(f"🚨 [Media] Rejected upload {file.name}: {validation.error_message}")
            return _validation_failed(validation.error_message)

        media = Media(
            original_name=file.name,
            mime_type=validation.detected_mime_type or getattr(file, "content_type", "") or "",
            size=validation.file_size or file.size,
            alt=request.alt,
            caption=request.caption,
            description=request.description,
            category=request.category,
            is_public=request.is_public,
            uploaded_by=user if getattr(user, "pk", None) else None,
        )
        media.file.save(file.name, file, save=False)
        media.filename = Path(media.file.name).name
        media.save()

        logger.info(f"📤 [Media] Stored {media.original_name} as {media.filename} ({media.size} bytes)")
        return Ok(media)

    @classmethod
    @audit_service_call("media_replace")
    def replace_file(cls, media: Media, file: UploadedFile) -> Result[Media, ServiceError]:
        """Swap the stored file; the previous file is removed from storage"""
        validation = validate_media_upload(file)
        if not validation.is_valid:
            return _validation_failed(validation.error_message)

        old_name = media.file.name
        media.file.save(file.name, file, save=False)
        media.filename = Path(media.file.name).name
        media.original_name = file.name
        media.mime_type = validation.detected_mime_type or media.mime_type
        media.size = validation.file_size or file.size
        media.save()

        if old_name and old_name != media.file.name:
            media.file.storage.delete(old_name)
        logger.info(f"🔁 [Media] Replaced file of media {media.pk}")
        return Ok(media)

    @classmethod
    def update_metadata(cls, media: Media, **fields: Any) -> Result[Media, ServiceError]:
        if "category" in fields and (error := cls._check_category(fields["category"])):
            return error
        changed = [name for name in cls.METADATA_FIELDS if name in fields]
        for name in changed:
            setattr(media, name, fields[name])
        if changed:
            media.save(update_fields=[*changed, "updated_at"])
        return Ok(media)

    @staticmethod
    @audit_service_call("media_delete")
    def delete(media: Media) -> Result[int, ServiceError]:
        """Delete the row and the stored file"""
        media_id = media.pk
        stored = media.file.name
        storage = media.file.storage
        media.delete()
        if stored and storage.exists(stored):
            storage.delete(stored)
        logger.warning(f"🗑️ [Media] Deleted media {media_id} ({stored})")
        return Ok(media_id)

"""
Gallery services for the Municipal CMS Platform
Galleries, image uploads, covers, ordering and media library imports.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db.models import Count, Max, Q, QuerySet
from django.utils.translation import gettext as _

from apps.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from apps.common.file_storage import clean_filename, is_safe_filename
from apps.common.file_upload_security import is_image_mime_type, validate_image_upload
from apps.common.security_decorators import atomic_with_retry, audit_service_call, monitor_performance
from apps.common.transliteration import highlight_patterns
from apps.common.types import Err, Ok, Result, ServiceError, SortOrderUpdate, invalid, not_found
from apps.common.utils import unique_slug
from apps.content.models import STATUS_CHOICES, STATUS_DRAFT, STATUS_PUBLISHED
from apps.media.models import Media

from .models import Gallery, GalleryImage

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_TYPES = dict(Gallery.TYPE_CHOICES)
_STATUSES = dict(STATUS_CHOICES)


@dataclass
class GalleryCreationRequest:
    """Parameter object for gallery creation"""

    title: str
    description: str = ""
    type: str = "general"
    status: str = STATUS_DRAFT
    slug: str = ""
    event_date: date | None = None
    sort_order: int = 0


@dataclass
class GalleryImageRequest:
    """Shared metadata applied to every image of an upload batch"""

    title: str = ""
    description: str = ""
    alt: str = ""


class GalleryService:
    """📸 Gallery management"""

    EDITABLE_FIELDS = ("title", "description", "type", "status", "event_date", "sort_order")
    IMAGE_FIELDS = ("title", "description", "alt", "sort_order")

    # ===============================================================================
    # QUERIES
    # ===============================================================================

    @staticmethod
    def _filtered(
        status: str | None = None,
        type: str | None = None,  # noqa: A002
        search: str | None = None,
    ) -> QuerySet[Gallery]:
        queryset = Gallery.objects.select_related("cover_image", "author").annotate(
            images_count=Count("images", distinct=True)
        )
        if status:
            queryset = queryset.filter(status=status)
        if type:
            queryset = queryset.filter(type=type)
        if search and search.strip():
            condition = Q()
            for pattern in highlight_patterns(search.strip()):
                condition |= Q(title__icontains=pattern) | Q(description__icontains=pattern)
            queryset = queryset.filter(condition)
        return queryset.order_by("sort_order", "-created_at")

    @classmethod
    def list(  # noqa: PLR0913
        cls,
        status: str | None = None,
        type: str | None = None,  # noqa: A002
        search: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """``{galleries, total, page, totalPages}``"""
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        queryset = cls._filtered(status, type, search)
        total = queryset.count()
        total_pages = max(1, math.ceil(total / limit))
        page = min(max(1, page), total_pages)
        offset = (page - 1) * limit
        return {
            "galleries": [*queryset[offset : offset + limit]],
            "total": total,
            "page": page,
            "totalPages": total_pages,
        }

    @classmethod
    def published(
        cls,
        type: str | None = None,  # noqa: A002
        search: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        return cls.list(status=STATUS_PUBLISHED, type=type, search=search, page=page, limit=limit)

    @staticmethod
    def get_by_slug(slug: str, published_only: bool = False) -> Result[Gallery, ServiceError]:
        queryset = Gallery.objects.prefetch_related("images")
        if published_only:
            queryset = queryset.filter(status=STATUS_PUBLISHED)
        gallery = queryset.filter(slug=slug).first()
        if gallery is None:
            return not_found(_("Gallery not found"))
        return Ok(gallery)

    @staticmethod
    def images(gallery: Gallery) -> QuerySet[GalleryImage]:
        return gallery.images.select_related("media").order_by("sort_order", "id")

    @staticmethod
    def types() -> list[dict[str, str]]:
        return [
            {"value": value, "label": label, "description": Gallery.TYPE_DESCRIPTIONS[value]}
            for value, label in Gallery.TYPE_CHOICES
        ]

    @staticmethod
    def statistics() -> dict[str, Any]:
        by_type = dict(Gallery.objects.values_list("type").annotate(count=Count("id")))
        return {
            "total": Gallery.objects.count(),
            "published": Gallery.objects.filter(status=STATUS_PUBLISHED).count(),
            "draft": Gallery.objects.filter(status=STATUS_DRAFT).count(),
            "totalImages": GalleryImage.objects.count(),
            "byType": {value: by_type.get(value, 0) for value in _TYPES},
        }

    @staticmethod
    def get_image_path(filename: str) -> Result[Path, ServiceError]:
        name = clean_filename(filename or "")
        if not is_safe_filename(name):
            return invalid(_("Invalid filename"), "filename")
        path = Path(settings.MEDIA_ROOT) / "galleries" / name
        if not path.is_file():
            return not_found(_("File not found"))
        return Ok(path)

    # ===============================================================================
    # GALLERY CRUD
    # ===============================================================================

    @staticmethod
    def _validate(fields: dict[str, Any]) -> Err[ServiceError] | None:
        if "title" in fields and not (fields["title"] or "").strip():
            return invalid(_("Title is required"), "title")
        if "type" in fields and fields["type"] not in _TYPES:
            return invalid(_("Unknown gallery type"), "type")
        if "status" in fields and fields["status"] not in _STATUSES:
            return invalid(_("Unknown status"), "status")
        return None

    @classmethod
    @audit_service_call("gallery_create")
    def create(cls, request: GalleryCreationRequest, author: Any = None) -> Result[Gallery, ServiceError]:
        if error := cls._validate({"title": request.title, "type": request.type, "status": request.status}):
            return error
        gallery = Gallery.objects.create(
            title=request.title.strip(),
            slug=request.slug,
            description=request.description or "",
            type=request.type,
            status=request.status,
            event_date=request.event_date,
            sort_order=request.sort_order,
            author=author if getattr(author, "pk", None) else None,
        )
        logger.info(f"✅ [Galleries] Created {gallery.slug}")
        return Ok(gallery)

    @classmethod
    def update(cls, gallery: Gallery, **fields: Any) -> Result[Gallery, ServiceError]:
        if error := cls._validate(fields):
            return error
        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                setattr(gallery, name, fields[name])
        if fields.get("slug"):
            gallery.slug = unique_slug(Gallery, fields["slug"], instance_pk=gallery.pk)
        gallery.save()
        return Ok(gallery)

    @staticmethod
    @audit_service_call("gallery_delete")
    def delete(gallery: Gallery) -> Result[int, ServiceError]:
        """Delete the gallery with its images; uploaded files are removed, media entries stay"""
        gallery_id = gallery.pk
        stored = [image.file for image in gallery.images.all() if image.file]
        gallery.delete()
        for file in stored:
            file.storage.delete(file.name)
        logger.warning(f"🗑️ [Galleries] Deleted gallery {gallery_id} and {len(stored)} files")
        return Ok(gallery_id)

    # ===============================================================================
    # IMAGES
    # ===============================================================================

    @staticmethod
    def _next_sort_order(gallery: Gallery) -> int:
        current = gallery.images.aggregate(top=Max("sort_order"))["top"]
        return 0 if current is None else current + 1

    @staticmethod
    def _ensure_cover(gallery: Gallery) -> None:
        if gallery.cover_image_id is None:
            first = gallery.images.order_by("sort_order", "id").first()
            if first is not None:
                GalleryService._mark_cover(gallery, first)

    @staticmethod
    def _mark_cover(gallery: Gallery, image: GalleryImage) -> None:
        gallery.images.exclude(pk=image.pk).update(is_cover=False)
        if not image.is_cover:
            image.is_cover = True
            image.save(update_fields=["is_cover", "updated_at"])
        gallery.cover_image = image
        gallery.save(update_fields=["cover_image", "updated_at"])

    @classmethod
    @atomic_with_retry()
    @monitor_performance(max_duration_seconds=30.0)
    @audit_service_call("gallery_images_upload")
    def upload_images(
        cls, gallery: Gallery, files: list[UploadedFile], meta: GalleryImageRequest | None = None
    ) -> Result[list[GalleryImage], ServiceError]:
        """Validate every file first, then store them after the current last image"""
        if not files:
            return invalid(_("No files uploaded"), "files")
        meta = meta or GalleryImageRequest()

        validations = []
        for file in files:
            result = validate_image_upload(file)
            if not result.is_valid:
                return invalid(f"{file.name}: {result.error_message}", "files")
            validations.append(result)

        sort_order = cls._next_sort_order(gallery)
        created: list[GalleryImage] = []
        for offset, (file, validation) in enumerate(zip(files, validations, strict=True)):
            image = GalleryImage(
                gallery=gallery,
                original_name=file.name,
                mime_type=validation.detected_mime_type or "",
                size=validation.file_size,
                title=meta.title,
                description=meta.description,
                alt=meta.alt or meta.title,
                sort_order=sort_order + offset,
            )
            image.file.save(file.name, file, save=False)
            image.filename = Path(image.file.name).name
            image.save()
            created.append(image)

        cls._ensure_cover(gallery)
        logger.info(f"📤 [Galleries] Uploaded {len(created)} images to {gallery.slug}")
        return Ok(created)

    @staticmethod
    def _get_image(gallery: Gallery, image_id: int) -> Result[GalleryImage, ServiceError]:
        image = gallery.images.filter(pk=image_id).first()
        if image is None:
            return not_found(_("Image not found in this gallery"))
        return Ok(image)

    @classmethod
    def update_image(cls, gallery: Gallery, image_id: int, **fields: Any) -> Result[GalleryImage, ServiceError]:
        found = cls._get_image(gallery, image_id)
        if found.is_err():
            return found
        image = found.unwrap()
        changed = [name for name in cls.IMAGE_FIELDS if name in fields]
        for name in changed:
            setattr(image, name, fields[name])
        if changed:
            image.save(update_fields=[*changed, "updated_at"])
        return Ok(image)

    @classmethod
    @atomic_with_retry()
    def delete_image(cls, gallery: Gallery, image_id: int) -> Result[int, ServiceError]:
        """Delete an image; a deleted cover falls back to the first remaining image"""
        found = cls._get_image(gallery, image_id)
        if found.is_err():
            return found
        image = found.unwrap()

        was_cover = gallery.cover_image_id == image.pk or image.is_cover
        file = image.file if image.file else None
        image.delete()
        if file is not None:
            file.storage.delete(file.name)

        if was_cover:
            gallery.cover_image = None
            gallery.save(update_fields=["cover_image", "updated_at"])
            cls._ensure_cover(gallery)
        logger.info(f"🗑️ [Galleries] Deleted image {image_id} from {gallery.slug}")
        return Ok(image_id)

    @classmethod
    @atomic_with_retry()
    def set_cover(cls, gallery: Gallery, image_id: int) -> Result[Gallery, ServiceError]:
        found = cls._get_image(gallery, image_id)
        if found.is_err():
            return found
        cls._mark_cover(gallery, found.unwrap())
        logger.info(f"⭐ [Galleries] Image {image_id} is the cover of {gallery.slug}")
        return Ok(gallery)

    @classmethod
    @atomic_with_retry()
    def reorder_images(
        cls, gallery: Gallery, updates: list[SortOrderUpdate]
    ) -> Result[list[GalleryImage], ServiceError]:
        images = {image.pk: image for image in gallery.images.all()}
        try:
            orders = {int(item["id"]): int(item["sortOrder"]) for item in updates}
        except (KeyError, TypeError, ValueError):
            return invalid(_("Each item needs id and sortOrder"))

        foreign = [image_id for image_id in orders if image_id not in images]
        if foreign:
            return invalid(_("Images do not belong to this gallery"), details={"ids": foreign})

        for image_id, sort_order in orders.items():
            images[image_id].sort_order = sort_order
        GalleryImage.objects.bulk_update([images[image_id] for image_id in orders], ["sort_order"])
        return Ok(list(cls.images(gallery)))

    @classmethod
    @atomic_with_retry()
    @audit_service_call("gallery_media_import")
    def add_existing_media(cls, gallery: Gallery, media_ids: list[int]) -> Result[list[GalleryImage], ServiceError]:
        """Link image media into the gallery; non-images and already linked media are skipped"""
        if not media_ids:
            return invalid(_("No media selected"), "mediaIds")

        linked = set(gallery.images.exclude(media=None).values_list("media_id", flat=True))
        candidates = Media.objects.filter(pk__in=media_ids).order_by("created_at")
        selected = [media for media in candidates if is_image_mime_type(media.mime_type) and media.pk not in linked]
        return Ok(cls._link_media(gallery, selected))

    @classmethod
    @atomic_with_retry()
    def add_existing_media_by_filename(
        cls, gallery: Gallery, filenames: list[str]
    ) -> Result[list[GalleryImage], ServiceError]:
        if not filenames:
            return invalid(_("No files selected"), "filenames")
        names = [clean_filename(name) for name in filenames]
        media_ids = list(Media.objects.filter(filename__in=names).values_list("pk", flat=True))
        if not media_ids:
            return not_found(_("No media found for the given filenames"))
        return cls.add_existing_media(gallery, media_ids)

    @classmethod
    def _link_media(cls, gallery: Gallery, media_items: list[Media]) -> list[GalleryImage]:
        sort_order = cls._next_sort_order(gallery)
        created = [
            GalleryImage.objects.create(
                gallery=gallery,
                media=media,
                filename=media.filename,
                original_name=media.original_name,
                mime_type=media.mime_type,
                size=media.size,
                title=media.caption or media.original_name,
                alt=media.alt,
                sort_order=sort_order + offset,
            )
            for offset, media in enumerate(media_items)
        ]
        cls._ensure_cover(gallery)
        logger.info(f"🔗 [Galleries] Linked {len(created)} media items to {gallery.slug}")
        return created

"""
Secure file upload validation service.

Every upload (media library, gallery images, service and director
documents) passes through FileUploadSecurityService before it is stored.
Checks run in order and the first failure wins:
extension whitelist, category restriction, size cap, MIME consistency,
magic bytes, then a content scan for text-based formats.
"""

from __future__ import annotations

import hashlib
import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

HEADER_BYTES: Final[int] = 8192
MEGABYTE: Final[int] = 1024 * 1024


class FileCategory(Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    DATA = "data"
    VIDEO = "video"


@dataclass(frozen=True)
class AllowedFileType:
    extension: str
    mime_types: tuple[str, ...]
    category: FileCategory
    max_size_mb: float = 10.0
    magic_bytes: tuple[bytes, ...] | None = None
    # Compressed containers (docx, xlsx, odt) are not scanned for text patterns
    scan_content: bool = True


_OLE2 = (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",)
_ZIP = (b"PK\x03\x04",)

# ============================================================================
# ALLOWED FILE TYPES
# ============================================================================

ALLOWED_FILE_TYPES: Final[dict[str, AllowedFileType]] = {
    # Images
    ".jpg": AllowedFileType(".jpg", ("image/jpeg",), FileCategory.IMAGE, 10.0, (b"\xff\xd8\xff",)),
    ".jpeg": AllowedFileType(".jpeg", ("image/jpeg",), FileCategory.IMAGE, 10.0, (b"\xff\xd8\xff",)),
    ".png": AllowedFileType(".png", ("image/png",), FileCategory.IMAGE, 10.0, (b"\x89PNG\r\n\x1a\n",)),
    ".gif": AllowedFileType(".gif", ("image/gif",), FileCategory.IMAGE, 5.0, (b"GIF87a", b"GIF89a")),
    ".webp": AllowedFileType(".webp", ("image/webp",), FileCategory.IMAGE, 10.0, (b"RIFF",)),
    ".svg": AllowedFileType(".svg", ("image/svg+xml",), FileCategory.IMAGE, 1.0),
    # Documents
    ".pdf": AllowedFileType(".pdf", ("application/pdf",), FileCategory.DOCUMENT, 25.0, (b"%PDF",), False),
    ".doc": AllowedFileType(".doc", ("application/msword",), FileCategory.DOCUMENT, 25.0, _OLE2, False),
    ".docx": AllowedFileType(
        ".docx",
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",),
        FileCategory.DOCUMENT,
        25.0,
        _ZIP,
        False,
    ),
    ".odt": AllowedFileType(
        ".odt", ("application/vnd.oasis.opendocument.text",), FileCategory.DOCUMENT, 25.0, _ZIP, False
    ),
    ".txt": AllowedFileType(".txt", ("text/plain",), FileCategory.DOCUMENT, 5.0),
    # Spreadsheets and data
    ".xls": AllowedFileType(".xls", ("application/vnd.ms-excel",), FileCategory.DATA, 25.0, _OLE2, False),
    ".xlsx": AllowedFileType(
        ".xlsx",
        ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",),
        FileCategory.DATA,
        25.0,
        _ZIP,
        False,
    ),
    ".csv": AllowedFileType(".csv", ("text/csv", "text/plain", "application/csv"), FileCategory.DATA, 10.0),
    # Video (hero sections, event galleries)
    ".mp4": AllowedFileType(".mp4", ("video/mp4",), FileCategory.VIDEO, 100.0, scan_content=False),
    ".webm": AllowedFileType(".webm", ("video/webm",), FileCategory.VIDEO, 100.0, (b"\x1a\x45\xdf\xa3",), False),
}

# Markup and script markers rejected in any scanned upload
DANGEROUS_PATTERNS: Final[tuple[bytes, ...]] = (
    b"<script",
    b"javascript:",
    b"vbscript:",
    b"onload=",
    b"onerror=",
    b"onclick=",
    b"eval(",
    b"<?php",
    b"<%",
    b"#!/",
)

# SVG is XML, so event attributes and external references are checked too
SVG_DANGEROUS_PATTERNS: Final[tuple[bytes, ...]] = (
    b"onload",
    b"onerror",
    b"onmouseover",
    b"onfocus",
    b"<foreignobject",
    b"xlink:href",
    b"data:",
)


@dataclass
class FileValidationResult:
    is_valid: bool
    error_message: str | None = None
    file_hash: str | None = None
    detected_mime_type: str | None = None
    file_size: int | None = None
    category: FileCategory | None = None

    @classmethod
    def rejected(cls, message: str) -> FileValidationResult:
        return cls(is_valid=False, error_message=message)


@dataclass
class _Upload:
    """One file under inspection: the name, its type entry and the first bytes."""

    file: UploadedFile
    filename: str
    file_type: AllowedFileType
    header: bytes
    guessed_mime: str | None


class FileUploadSecurityService:
    """
    Validate an upload against the allowed file types.

        result = FileUploadSecurityService(allowed_categories={FileCategory.IMAGE}).validate_file(upload)
        if not result.is_valid:
            return invalid(result.error_message, "file")
    """

    def __init__(
        self,
        allowed_categories: set[FileCategory] | None = None,
        max_size_override_mb: float | None = None,
    ) -> None:
        self.allowed_categories = allowed_categories
        self.max_size_override_mb = max_size_override_mb

    def validate_file(self, file: UploadedFile, filename: str | None = None) -> FileValidationResult:
        filename = filename or file.name or ""
        if not filename:
            return FileValidationResult.rejected("Filename is required")

        extension = Path(filename).suffix.lower()
        file_type = ALLOWED_FILE_TYPES.get(extension)
        if file_type is None:
            logger.warning(f"⚠️ [Upload] Extension {extension!r} refused for {filename}")
            return FileValidationResult.rejected(f"File type '{extension}' is not allowed")

        file.seek(0)
        upload = _Upload(file, filename, file_type, file.read(HEADER_BYTES), mimetypes.guess_type(filename)[0])
        file.seek(0)

        checks: tuple[Callable[[_Upload], str | None], ...] = (
            self._check_category,
            self._check_size,
            self._check_mime,
            self._check_magic_bytes,
            self._check_content,
        )
        for check in checks:
            if error := check(upload):
                return FileValidationResult.rejected(error)

        return FileValidationResult(
            is_valid=True,
            file_hash=self._sha256(file),
            detected_mime_type=upload.guessed_mime or file_type.mime_types[0],
            file_size=file.size or 0,
            category=file_type.category,
        )

    # ===============================================================================
    # CHECKS
    # ===============================================================================

    def _check_category(self, upload: _Upload) -> str | None:
        category = upload.file_type.category
        if self.allowed_categories and category not in self.allowed_categories:
            return f"File category '{category.value}' is not allowed"
        return None

    def _check_size(self, upload: _Upload) -> str | None:
        limit_mb = upload.file_type.max_size_mb
        if self.max_size_override_mb is not None:
            limit_mb = min(limit_mb, self.max_size_override_mb)

        size = upload.file.size or 0
        if size <= limit_mb * MEGABYTE:
            return None
        logger.warning(f"⚠️ [Upload] {upload.filename} is {size} bytes, limit {limit_mb:g}MB")
        return f"File size ({size / MEGABYTE:.1f}MB) exceeds maximum ({limit_mb:g}MB)"

    @staticmethod
    def _check_mime(upload: _Upload) -> str | None:
        guessed, expected = upload.guessed_mime, upload.file_type.mime_types
        if not guessed or guessed in expected:
            return None
        if guessed.startswith("text/") and any(mime.startswith("text/") for mime in expected):
            return None
        return "File content does not match expected type"

    @staticmethod
    def _check_magic_bytes(upload: _Upload) -> str | None:
        signatures = upload.file_type.magic_bytes
        if not signatures or upload.header.startswith(signatures):
            return None
        logger.warning(f"⚠️ [Upload] Signature mismatch for {upload.filename}")
        return "File content does not match expected format"

    @staticmethod
    def _check_content(upload: _Upload) -> str | None:
        if not upload.file_type.scan_content:
            return None

        lowered = upload.header.lower()
        patterns = DANGEROUS_PATTERNS
        if upload.file_type.extension == ".svg":
            patterns += SVG_DANGEROUS_PATTERNS

        found = next((pattern for pattern in patterns if pattern in lowered), None)
        if found is None:
            return None
        logger.error(f"🚨 [Upload] {upload.filename} contains {found.decode(errors='ignore')!r}")
        return "Potentially malicious content detected in file"

    @staticmethod
    def _sha256(file: UploadedFile) -> str:
        digest = hashlib.sha256()
        for chunk in file.chunks():
            digest.update(chunk)
        file.seek(0)
        return digest.hexdigest()


# ============================================================================
# UPLOAD PROFILES
# ============================================================================


def _media_size_cap() -> float:
    return float(getattr(settings, "CMS_MEDIA_MAX_UPLOAD_MB", 25))


def validate_media_upload(file: UploadedFile) -> FileValidationResult:
    """Media library: any allowed type."""
    return FileUploadSecurityService(max_size_override_mb=_media_size_cap()).validate_file(file)


def validate_image_upload(file: UploadedFile) -> FileValidationResult:
    service = FileUploadSecurityService(allowed_categories={FileCategory.IMAGE}, max_size_override_mb=_media_size_cap())
    return service.validate_file(file)


def validate_document_upload(file: UploadedFile) -> FileValidationResult:
    service = FileUploadSecurityService(
        allowed_categories={FileCategory.DOCUMENT, FileCategory.DATA},
        max_size_override_mb=_media_size_cap(),
    )
    return service.validate_file(file)


def is_image_mime_type(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")  # type: ignore[union-attr]

"""
Stored file naming for the Municipal CMS Platform
Every upload (media library, gallery images, documents) is stored under a
generated ``<timestamp>-<random>.<ext>`` name; the original name is kept
on the owning row.
"""

from __future__ import annotations

import os
import secrets
import time
from pathlib import PurePosixPath
from typing import Any

from django.utils.deconstruct import deconstructible

UPLOADS_PREFIX = "uploads/"


def generate_stored_name(original_name: str) -> str:
    """``1718000000000-483920173.pdf`` style name for an upload"""
    extension = PurePosixPath(original_name or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"


def clean_filename(filename: str) -> str:
    """Strip the ``uploads/`` storage prefix from a stored name"""
    if filename.startswith(UPLOADS_PREFIX):
        return filename[len(UPLOADS_PREFIX) :]
    return filename


def is_safe_filename(filename: str) -> bool:
    """True for a bare stored name without path components"""
    return bool(filename) and os.path.basename(filename) == filename and filename not in {".", ".."}


@deconstructible
class GeneratedUploadPath:
    """``upload_to`` callable storing files as ``<subdir>/<generated name>``"""

    def __init__(self, subdir: str):
        self.subdir = subdir.strip("/")

    def __call__(self, instance: Any, filename: str) -> str:
        return f"{self.subdir}/{generate_stored_name(filename)}"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, GeneratedUploadPath) and other.subdir == self.subdir

    def __hash__(self) -> int:
        return hash(self.subdir)

# ===============================================================================
# TEST FACTORIES FOR UPLOADS
# ===============================================================================

import shutil
import tempfile

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings

# Smallest content that passes the magic byte checks
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< >>\nendobj\ntrailer\n<< >>\n%%EOF\n"


def png_upload(name: str = "photo.png") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, PNG_BYTES, content_type="image/png")


def pdf_upload(name: str = "document.pdf") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, PDF_BYTES, content_type="application/pdf")


def text_upload(name: str = "notes.txt", content: bytes = b"plain notes") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, content, content_type="text/plain")


class TempMediaRootMixin:
    """Point MEDIA_ROOT at a temporary directory for each test"""

    def setUp(self):
        super().setUp()
        self.media_root = tempfile.mkdtemp(prefix="cms-test-media-")
        override = override_settings(MEDIA_ROOT=self.media_root)
        override.enable()
        self.addCleanup(override.disable)
        self.addCleanup(shutil.rmtree, self.media_root, True)

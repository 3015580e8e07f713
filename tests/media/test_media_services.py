"""
Tests for upload validation and MediaService.
"""

from pathlib import Path

from django.test import TestCase

from apps.common.file_storage import clean_filename, generate_stored_name, is_safe_filename
from apps.common.file_upload_security import (
    FileCategory,
    FileUploadSecurityService,
    validate_document_upload,
    validate_image_upload,
)
from apps.media.models import Media
from apps.media.services import MediaService, MediaUploadRequest
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload, text_upload


class StoredNameTestCase(TestCase):
    def test_generated_names_keep_lowercase_extension(self):
        name = generate_stored_name("Извештај 2024.PDF")
        self.assertTrue(name.endswith(".pdf"))
        self.assertNotIn(" ", name)

    def test_clean_and_safe_filename(self):
        self.assertEqual(clean_filename("uploads/123-456.png"), "123-456.png")
        self.assertTrue(is_safe_filename("123-456.png"))
        self.assertFalse(is_safe_filename("../etc/passwd"))
        self.assertFalse(is_safe_filename(".."))
        self.assertFalse(is_safe_filename(""))


class UploadValidationTestCase(TestCase):
    def test_png_accepted_as_image(self):
        result = validate_image_upload(png_upload())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.detected_mime_type, "image/png")
        self.assertEqual(result.category, FileCategory.IMAGE)
        self.assertIsNotNone(result.file_hash)
        self.assertEqual(result.file_size, png_upload().size)

    def test_pdf_rejected_as_image(self):
        self.assertFalse(validate_image_upload(pdf_upload()).is_valid)
        self.assertTrue(validate_document_upload(pdf_upload()).is_valid)

    def test_unknown_extension_rejected(self):
        result = FileUploadSecurityService().validate_file(text_upload("run.exe", b"MZ"))
        self.assertFalse(result.is_valid)
        self.assertIn(".exe", result.error_message)

    def test_magic_bytes_must_match(self):
        result = FileUploadSecurityService().validate_file(text_upload("fake.png", b"not a png"))
        self.assertEqual(result.error_message, "File content does not match expected format")

    def test_script_in_text_file_rejected(self):
        result = FileUploadSecurityService().validate_file(text_upload("x.txt", b"hello <script>alert(1)</script>"))
        self.assertEqual(result.error_message, "Potentially malicious content detected in file")

    def test_size_override(self):
        result = FileUploadSecurityService(max_size_override_mb=0.00001).validate_file(pdf_upload())
        self.assertFalse(result.is_valid)
        self.assertIn("exceeds maximum", result.error_message)


class MediaServiceTestCase(TempMediaRootMixin, TestCase):
    def test_upload_stores_generated_name(self):
        media = MediaService.upload(
            png_upload("Грб општине.png"),
            MediaUploadRequest(alt="Грб", category=Media.CATEGORY_OTHER),
        ).unwrap()

        self.assertEqual(media.original_name, "Грб општине.png")
        self.assertEqual(media.mime_type, "image/png")
        self.assertNotEqual(media.filename, "Грб општине.png")
        self.assertTrue((Path(self.media_root) / "uploads" / media.filename).is_file())
        self.assertTrue(media.is_image)

    def test_upload_rejects_unknown_category(self):
        result = MediaService.upload(png_upload(), MediaUploadRequest(category="memes"))
        self.assertEqual(result.unwrap_err().field, "category")

    def test_upload_rejects_invalid_file(self):
        result = MediaService.upload(text_upload("fake.pdf", b"nope"))
        self.assertEqual(result.unwrap_err().field, "file")
        self.assertFalse(Media.objects.exists())

    def test_get_file_path(self):
        media = MediaService.upload(pdf_upload()).unwrap()

        self.assertTrue(MediaService.get_file_path(media.filename).is_ok())
        self.assertTrue(MediaService.get_file_path(f"uploads/{media.filename}").is_ok())
        self.assertEqual(MediaService.get_file_path("../secret").unwrap_err().http_status, 400)
        self.assertEqual(MediaService.get_file_path("missing.pdf").unwrap_err().http_status, 404)

    def test_replace_file_removes_previous(self):
        media = MediaService.upload(png_upload()).unwrap()
        old_path = Path(self.media_root) / "uploads" / media.filename

        replaced = MediaService.replace_file(media, pdf_upload("novi.pdf")).unwrap()

        self.assertEqual(replaced.original_name, "novi.pdf")
        self.assertEqual(replaced.mime_type, "application/pdf")
        self.assertFalse(old_path.exists())

    def test_update_metadata(self):
        media = MediaService.upload(pdf_upload()).unwrap()

        MediaService.update_metadata(media, caption="Буџет", category=Media.CATEGORY_FINANCIAL, ignored="x")

        media.refresh_from_db()
        self.assertEqual(media.caption, "Буџет")
        self.assertEqual(media.category, Media.CATEGORY_FINANCIAL)

    def test_delete_removes_file(self):
        media = MediaService.upload(pdf_upload()).unwrap()
        path = Path(self.media_root) / "uploads" / media.filename

        MediaService.delete(media)

        self.assertFalse(path.exists())
        self.assertFalse(Media.objects.exists())

    def test_search_and_category_stats(self):
        MediaService.upload(pdf_upload("budzet.pdf"), MediaUploadRequest(category=Media.CATEGORY_FINANCIAL))
        MediaService.upload(pdf_upload("plan.pdf"), MediaUploadRequest(category=Media.CATEGORY_PLANS, is_public=False))

        self.assertEqual(MediaService.list(search="буџет").count(), 1)
        self.assertEqual(MediaService.public().count(), 1)

        stats = {row["category"]: row for row in MediaService.category_stats()}
        self.assertEqual(stats[Media.CATEGORY_FINANCIAL]["count"], 1)
        self.assertEqual(stats[Media.CATEGORY_REPORTS]["count"], 0)
        self.assertGreater(stats[Media.CATEGORY_PLANS]["totalSize"], 0)

"""
Media library endpoints.
"""

from django.test import TestCase

from apps.media.models import Media
from apps.media.services import MediaService, MediaUploadRequest
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload, text_upload
from tests.factories.users import api_client_for, create_author


class MediaAPITestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.author = create_author()
        self.client = api_client_for(self.author)
        self.public = MediaService.upload(pdf_upload("javno.pdf")).unwrap()
        self.private = MediaService.upload(
            pdf_upload("interno.pdf"), MediaUploadRequest(is_public=False, category=Media.CATEGORY_PLANS)
        ).unwrap()

    def test_upload_multipart(self):
        response = self.client.post(
            "/api/media",
            {"file": png_upload("slika.png"), "alt": "Слика", "category": "reports", "isPublic": "false"},
            format="multipart",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["originalName"], "slika.png")
        self.assertEqual(response.data["category"], "reports")
        self.assertFalse(response.data["isPublic"])
        self.assertTrue(response.data["isImage"])
        self.assertEqual(response.data["uploadedBy"]["id"], self.author.pk)

    def test_upload_rejects_bad_file(self):
        response = self.client.post("/api/media", {"file": text_upload("virus.exe", b"MZ")}, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["field"], "file")

    def test_anonymous_cannot_upload(self):
        response = api_client_for().post("/api/media", {"file": png_upload()}, format="multipart")
        self.assertEqual(response.status_code, 401)

    def test_visitors_only_list_public_media(self):
        anonymous = api_client_for().get("/api/media")
        staff = self.client.get("/api/media", {"page": 1, "limit": 10})

        self.assertEqual([item["id"] for item in anonymous.data], [self.public.pk])
        self.assertEqual(staff.data["meta"]["total"], 2)

    def test_filter_by_visibility(self):
        response = self.client.get("/api/media", {"isPublic": "false"})
        self.assertEqual([item["id"] for item in response.data], [self.private.pk])

    def test_category_endpoints(self):
        categories = api_client_for().get("/api/media/categories")
        stats = self.client.get("/api/media/stats")
        by_category = api_client_for().get("/api/media/category/plans")

        self.assertEqual(len(categories.data), len(Media.CATEGORY_CHOICES))
        self.assertIn("description", categories.data[0])
        self.assertEqual({row["category"]: row["count"] for row in stats.data}["plans"], 1)
        self.assertEqual(by_category.data, [])

    def test_update_metadata(self):
        response = self.client.patch(f"/api/media/{self.public.pk}", {"caption": "Нови опис"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["caption"], "Нови опис")

    def test_replace_file(self):
        response = self.client.post(
            f"/api/media/{self.public.pk}/replace", {"file": png_upload("zamena.png")}, format="multipart"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["mimeType"], "image/png")

    def test_delete(self):
        response = self.client.delete(f"/api/media/{self.public.pk}")

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Media.objects.filter(pk=self.public.pk).exists())

    def test_file_serving(self):
        response = api_client_for().get(f"/api/media/file/{self.public.filename}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertIn("javno.pdf", response["Content-Disposition"])
        self.assertTrue(b"".join(response.streaming_content).startswith(b"%PDF"))

    def test_private_file_hidden_from_visitors(self):
        anonymous = api_client_for().get(f"/api/media/file/{self.private.filename}")
        staff = self.client.get(f"/api/media/file/{self.private.filename}")

        self.assertEqual(anonymous.status_code, 404)
        self.assertEqual(staff.status_code, 200)
        staff.close()

    def test_missing_file(self):
        self.assertEqual(api_client_for().get("/api/media/file/missing.pdf").status_code, 404)

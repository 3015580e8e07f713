"""
Gallery endpoints.
"""

from django.test import TestCase

from apps.content.models import STATUS_PUBLISHED
from apps.galleries.models import Gallery
from apps.galleries.services import GalleryCreationRequest, GalleryService
from apps.media.services import MediaService
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload
from tests.factories.users import api_client_for, create_author


class GalleryAPITestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.author = create_author()
        self.client = api_client_for(self.author)
        self.published = GalleryService.create(
            GalleryCreationRequest(title="Јавна галерија", status=STATUS_PUBLISHED)
        ).unwrap()
        self.draft = GalleryService.create(GalleryCreationRequest(title="Нацрт галерија")).unwrap()

    def test_visitors_only_see_published_galleries(self):
        response = api_client_for().get("/api/galleries", {"status": "draft"})

        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["galleries"][0]["slug"], self.published.slug)
        self.assertEqual(response.data["galleries"][0]["imagesCount"], 0)

    def test_staff_filters_by_status(self):
        response = self.client.get("/api/galleries", {"status": "draft"})
        self.assertEqual([item["id"] for item in response.data["galleries"]], [self.draft.pk])

    def test_by_slug_hides_drafts_from_visitors(self):
        self.assertEqual(api_client_for().get(f"/api/galleries/slug/{self.draft.slug}").status_code, 404)
        response = self.client.get(f"/api/galleries/slug/{self.draft.slug}")
        self.assertEqual(response.data["images"], [])

    def test_create_and_update(self):
        created = self.client.post("/api/galleries", {"title": "Спорт", "type": "event"}, format="json")
        missing = self.client.post("/api/galleries", {"type": "event"}, format="json")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["slug"], "sport")
        self.assertEqual(missing.status_code, 400)

        updated = self.client.patch(f"/api/galleries/{created.data['id']}", {"status": "published"}, format="json")
        self.assertEqual(updated.data["status"], "published")

    def test_upload_images_and_set_cover(self):
        response = self.client.post(
            f"/api/galleries/{self.draft.pk}/images",
            {"files": [png_upload("a.png"), png_upload("b.png")], "title": "Отварање"},
            format="multipart",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual([item["sortOrder"] for item in response.data], [0, 1])

        second_id = response.data[1]["id"]
        cover = self.client.post(f"/api/galleries/{self.draft.pk}/cover", {"imageId": second_id}, format="json")
        self.assertEqual(cover.data["coverImage"]["id"], second_id)

    def test_upload_rejects_documents(self):
        response = self.client.post(
            f"/api/galleries/{self.draft.pk}/images", {"files": [pdf_upload()]}, format="multipart"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "files")

    def test_reorder_update_and_delete_image(self):
        images = self.client.post(
            f"/api/galleries/{self.draft.pk}/images",
            {"files": [png_upload("a.png"), png_upload("b.png")]},
            format="multipart",
        ).data
        first, second = images[0]["id"], images[1]["id"]

        reordered = self.client.put(
            f"/api/galleries/{self.draft.pk}/images/reorder",
            {"images": [{"id": first, "sortOrder": 1}, {"id": second, "sortOrder": 0}]},
            format="json",
        )
        self.assertEqual([item["id"] for item in reordered.data], [second, first])

        renamed = self.client.patch(f"/api/galleries/{self.draft.pk}/images/{first}", {"alt": "Опис"}, format="json")
        self.assertEqual(renamed.data["alt"], "Опис")

        deleted = self.client.delete(f"/api/galleries/{self.draft.pk}/images/{first}")
        self.assertEqual(deleted.status_code, 204)

    def test_import_from_media_library(self):
        media = MediaService.upload(png_upload("grb.png")).unwrap()

        by_id = self.client.post(f"/api/galleries/{self.draft.pk}/media", {"mediaIds": [media.pk]}, format="json")
        empty = self.client.post(f"/api/galleries/{self.draft.pk}/media", {}, format="json")

        self.assertEqual(by_id.status_code, 201)
        self.assertEqual(by_id.data[0]["mediaId"], media.pk)
        self.assertEqual(empty.status_code, 400)

    def test_serves_uploaded_image(self):
        image = self.client.post(
            f"/api/galleries/{self.draft.pk}/images", {"files": [png_upload()]}, format="multipart"
        ).data[0]

        response = api_client_for().get(f"/api/galleries/images/{image['filename']}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "image/png")
        response.close()

    def test_types_statistics_and_delete(self):
        self.assertEqual(len(api_client_for().get("/api/galleries/types").data), len(Gallery.TYPE_CHOICES))
        self.assertEqual(api_client_for().get("/api/galleries/statistics").status_code, 401)
        self.assertEqual(self.client.get("/api/galleries/statistics").data["total"], 2)

        self.assertEqual(self.client.delete(f"/api/galleries/{self.draft.pk}").status_code, 204)
        self.assertFalse(Gallery.objects.filter(pk=self.draft.pk).exists())

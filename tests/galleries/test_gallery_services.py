"""
Tests for GalleryService.
"""

from pathlib import Path

from django.test import TestCase

from apps.content.models import STATUS_PUBLISHED
from apps.galleries.models import Gallery, GalleryImage
from apps.galleries.services import GalleryCreationRequest, GalleryImageRequest, GalleryService
from apps.media.models import Media
from apps.media.services import MediaService
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload


def create_gallery(title: str = "Дан општине", **fields) -> Gallery:
    return GalleryService.create(GalleryCreationRequest(title=title, **fields)).unwrap()


class GalleryCrudTestCase(TestCase):
    def test_create_generates_slug(self):
        gallery = create_gallery(type="event")

        self.assertEqual(gallery.slug, "dan-opstine")
        self.assertEqual(gallery.type, "event")
        self.assertFalse(gallery.is_published)

    def test_create_validates_type_and_status(self):
        self.assertEqual(
            GalleryService.create(GalleryCreationRequest(title="X", type="party")).unwrap_err().field, "type"
        )
        self.assertEqual(
            GalleryService.create(GalleryCreationRequest(title="X", status="gone")).unwrap_err().field, "status"
        )
        self.assertEqual(GalleryService.create(GalleryCreationRequest(title=" ")).unwrap_err().field, "title")

    def test_update_slug_stays_unique(self):
        create_gallery(title="Сајам")
        gallery = create_gallery(title="Друга")

        updated = GalleryService.update(gallery, slug="sajam", status=STATUS_PUBLISHED).unwrap()

        self.assertEqual(updated.slug, "sajam-2")
        self.assertTrue(updated.is_published)

    def test_list_is_paged_and_counts_images(self):
        for index in range(3):
            create_gallery(title=f"Galerija {index}", sort_order=index)

        listed = GalleryService.list(page=2, limit=2)

        self.assertEqual(listed["total"], 3)
        self.assertEqual(listed["totalPages"], 2)
        self.assertEqual([gallery.title for gallery in listed["galleries"]], ["Galerija 2"])
        self.assertEqual(listed["galleries"][0].images_count, 0)

    def test_published_and_get_by_slug(self):
        draft = create_gallery(title="Нацрт")
        create_gallery(title="Јавна", status=STATUS_PUBLISHED)

        self.assertEqual(GalleryService.published()["total"], 1)
        self.assertTrue(GalleryService.get_by_slug(draft.slug, published_only=True).is_err())
        self.assertTrue(GalleryService.get_by_slug(draft.slug).is_ok())

    def test_search_matches_both_scripts(self):
        create_gallery(title="Sajam meda")
        self.assertEqual(GalleryService.list(search="сајам")["total"], 1)

    def test_types_and_statistics(self):
        create_gallery(type="event", status=STATUS_PUBLISHED)
        create_gallery(title="Друга")

        self.assertEqual([item["value"] for item in GalleryService.types()][0], "general")
        stats = GalleryService.statistics()
        self.assertEqual((stats["total"], stats["published"], stats["draft"]), (2, 1, 1))
        self.assertEqual(stats["byType"]["event"], 1)
        self.assertEqual(stats["byType"]["exhibition"], 0)


class GalleryImageTestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.gallery = create_gallery()

    def _upload(self, count: int = 2) -> list[GalleryImage]:
        files = [png_upload(f"slika-{index}.png") for index in range(count)]
        return GalleryService.upload_images(self.gallery, files, GalleryImageRequest(title="Свечаност")).unwrap()

    def test_upload_sets_cover_and_order(self):
        images = self._upload()

        self.gallery.refresh_from_db()
        self.assertEqual([image.sort_order for image in images], [0, 1])
        self.assertEqual(self.gallery.cover_image_id, images[0].pk)
        self.assertEqual(images[0].alt, "Свечаност")
        self.assertTrue((Path(self.media_root) / "galleries" / images[0].filename).is_file())

    def test_upload_appends_after_existing(self):
        self._upload()
        more = self._upload(count=1)
        self.assertEqual(more[0].sort_order, 2)

    def test_upload_is_all_or_nothing(self):
        result = GalleryService.upload_images(self.gallery, [png_upload(), pdf_upload()])

        self.assertEqual(result.unwrap_err().field, "files")
        self.assertIn("document.pdf", result.unwrap_err().message)
        self.assertFalse(self.gallery.images.exists())

    def test_upload_requires_files(self):
        self.assertEqual(GalleryService.upload_images(self.gallery, []).unwrap_err().field, "files")

    def test_deleting_cover_promotes_next_image(self):
        first, second = self._upload()

        GalleryService.delete_image(self.gallery, first.pk).unwrap()

        self.gallery.refresh_from_db()
        self.assertEqual(self.gallery.cover_image_id, second.pk)
        self.assertFalse((Path(self.media_root) / "galleries" / first.filename).exists())

    def test_set_cover_is_exclusive(self):
        first, second = self._upload()

        GalleryService.set_cover(self.gallery, second.pk).unwrap()

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertFalse(first.is_cover)
        self.assertTrue(second.is_cover)

    def test_image_must_belong_to_gallery(self):
        other = create_gallery(title="Друга")
        image = self._upload(count=1)[0]

        self.assertEqual(GalleryService.set_cover(other, image.pk).unwrap_err().http_status, 404)
        self.assertEqual(GalleryService.update_image(other, image.pk, title="x").unwrap_err().http_status, 404)

    def test_reorder_rejects_foreign_ids(self):
        first, second = self._upload()

        reordered = GalleryService.reorder_images(
            self.gallery, [{"id": first.pk, "sortOrder": 1}, {"id": second.pk, "sortOrder": 0}]
        ).unwrap()

        self.assertEqual([image.pk for image in reordered], [second.pk, first.pk])
        error = GalleryService.reorder_images(self.gallery, [{"id": 999, "sortOrder": 0}]).unwrap_err()
        self.assertEqual(error.details, {"ids": [999]})

    def test_add_existing_media_skips_documents_and_duplicates(self):
        image = MediaService.upload(png_upload("biblioteka.png")).unwrap()
        document = MediaService.upload(pdf_upload()).unwrap()

        linked = GalleryService.add_existing_media(self.gallery, [image.pk, document.pk]).unwrap()
        again = GalleryService.add_existing_media(self.gallery, [image.pk]).unwrap()

        self.assertEqual([item.media_id for item in linked], [image.pk])
        self.assertEqual(again, [])
        self.assertEqual(GalleryService.add_existing_media(self.gallery, []).unwrap_err().field, "mediaIds")

    def test_add_existing_media_by_filename(self):
        image = MediaService.upload(png_upload()).unwrap()

        linked = GalleryService.add_existing_media_by_filename(self.gallery, [f"uploads/{image.filename}"]).unwrap()

        self.assertEqual(linked[0].filename, image.filename)
        self.assertTrue(GalleryService.add_existing_media_by_filename(self.gallery, ["nope.png"]).is_err())

    def test_delete_gallery_keeps_library_media(self):
        media = MediaService.upload(png_upload()).unwrap()
        GalleryService.add_existing_media(self.gallery, [media.pk])
        uploaded = self._upload(count=1)[0]

        GalleryService.delete(self.gallery)

        self.assertTrue(Media.objects.filter(pk=media.pk).exists())
        self.assertFalse((Path(self.media_root) / "galleries" / uploaded.filename).exists())

    def test_image_path_rejects_traversal(self):
        image = self._upload(count=1)[0]

        self.assertTrue(GalleryService.get_image_path(image.filename).is_ok())
        self.assertEqual(GalleryService.get_image_path("../../settings.py").unwrap_err().http_status, 400)

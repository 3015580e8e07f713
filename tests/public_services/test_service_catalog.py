"""
Tests for ServiceCatalogService.
"""

from decimal import Decimal

from django.test import TestCase

from apps.public_services.models import Service, ServiceDocument
from apps.public_services.services import ServiceCatalogService, ServiceCreationRequest, ServiceDocumentRequest
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload


def create_service(name: str = "Издавање грађевинске дозволе", **extra) -> Service:
    return ServiceCatalogService.create(ServiceCreationRequest(name=name, extra=extra)).unwrap()


class ServiceCatalogTestCase(TestCase):
    def test_create_with_optional_fields(self):
        service = create_service(price="1500.50", requirements=["Лична карта"], unknown="ignored")

        self.assertEqual(service.slug, "izdavanje-gradjevinske-dozvole")
        self.assertEqual(service.price, Decimal("1500.50"))
        self.assertEqual(service.requirements, ["Лична карта"])
        self.assertEqual(service.currency, "RSD")

    def test_create_validates_choices_and_price(self):
        cases = [
            (ServiceCreationRequest(name=""), "name"),
            (ServiceCreationRequest(name="X", type="magic"), "type"),
            (ServiceCreationRequest(name="X", status="gone"), "status"),
            (ServiceCreationRequest(name="X", priority="asap"), "priority"),
            (ServiceCreationRequest(name="X", extra={"price": "-1"}), "price"),
            (ServiceCreationRequest(name="X", extra={"price": "free"}), "price"),
            (ServiceCreationRequest(name="X", extra={"steps": "one"}), "steps"),
        ]
        for request, field in cases:
            with self.subTest(field=field):
                self.assertEqual(ServiceCatalogService.create(request).unwrap_err().field, field)

    def test_update_clears_price(self):
        service = create_service(price="100")

        updated = ServiceCatalogService.update(service, price="", status=Service.STATUS_INACTIVE).unwrap()

        self.assertIsNone(updated.price)
        self.assertEqual(updated.status, Service.STATUS_INACTIVE)

    def test_public_listing(self):
        visible = create_service(name="Видљива")
        create_service(name="Приватна", is_public=False)
        create_service(name="Угашена", is_active=False)
        ServiceCatalogService.create(ServiceCreationRequest(name="Нацрт", status="draft"))

        self.assertEqual([service.pk for service in ServiceCatalogService.public()], [visible.pk])
        self.assertEqual(ServiceCatalogService.list().count(), 4)

    def test_get_by_slug_public_only(self):
        hidden = create_service(is_public=False)

        self.assertTrue(ServiceCatalogService.get_by_slug(hidden.slug).is_ok())
        self.assertEqual(ServiceCatalogService.get_by_slug(hidden.slug, public_only=True).unwrap_err().http_status, 404)
        self.assertTrue(ServiceCatalogService.get(999).is_err())

    def test_counters(self):
        service = create_service()

        self.assertEqual(ServiceCatalogService.increment_request_count(service), 1)
        self.assertEqual(ServiceCatalogService.increment_request_count(service), 2)
        self.assertEqual(ServiceCatalogService.increment_view_count(service), 1)

    def test_statistics(self):
        service = create_service(is_online=True, requires_appointment=True)
        create_service(name="Друга", is_public=False)
        ServiceCatalogService.create(ServiceCreationRequest(name="Правна", type="legal", status="inactive"))
        ServiceCatalogService.increment_request_count(service)

        stats = ServiceCatalogService.statistics()

        self.assertEqual((stats["total"], stats["active"], stats["inactive"]), (3, 2, 1))
        self.assertEqual((stats["public"], stats["online"], stats["requiresAppointment"]), (2, 1, 1))
        self.assertEqual(stats["byType"]["legal"], 1)
        self.assertEqual(stats["totalRequests"], 1)
        self.assertEqual(stats["totalDocuments"], 0)


class ServiceDocumentTestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.service = create_service()

    def _upload(self, **fields) -> ServiceDocument:
        request = ServiceDocumentRequest(title=fields.pop("title", "Захтев"), **fields)
        return ServiceCatalogService.upload_document(self.service, pdf_upload("zahtev.pdf"), request).unwrap()

    def test_upload_document(self):
        document = self._upload(type="instruction")

        self.assertEqual(document.original_name, "zahtev.pdf")
        self.assertEqual(document.mime_type, "application/pdf")
        self.assertTrue(document.file.name.startswith("services/"))
        self.assertEqual(ServiceCatalogService.list().get().documents_count, 1)

    def test_upload_validation(self):
        cases = [
            (pdf_upload(), ServiceDocumentRequest(title=""), "title"),
            (pdf_upload(), ServiceDocumentRequest(title="X", type="poster"), "type"),
            (png_upload(), ServiceDocumentRequest(title="X"), "file"),
        ]
        for file, request, field in cases:
            with self.subTest(field=field):
                result = ServiceCatalogService.upload_document(self.service, file, request)
                self.assertEqual(result.unwrap_err().field, field)

    def test_public_documents(self):
        self._upload(title="Јавни")
        self._upload(title="Интерни", is_public=False)

        self.assertEqual([doc.title for doc in ServiceCatalogService.public_documents(self.service)], ["Јавни"])
        self.assertEqual(ServiceCatalogService.documents(self.service).count(), 2)

    def test_update_document(self):
        document = self._upload()

        self.assertEqual(ServiceCatalogService.update_document(document, type="bogus").unwrap_err().field, "type")
        updated = ServiceCatalogService.update_document(document, title="Нови", is_active=False).unwrap()
        self.assertEqual(updated.title, "Нови")
        self.assertFalse(updated.is_active)

    def test_download_counts_and_needs_file(self):
        document = self._upload()

        self.assertEqual(ServiceCatalogService.download_document(document).unwrap().download_count, 1)

        document.file.storage.delete(document.file.name)
        self.assertEqual(ServiceCatalogService.download_document(document).unwrap_err().http_status, 404)

    def test_delete_removes_files(self):
        document = self._upload()
        storage, name = document.file.storage, document.file.name

        ServiceCatalogService.delete(self.service)

        self.assertFalse(storage.exists(name))
        self.assertFalse(ServiceDocument.objects.exists())

    def test_document_must_belong_to_service(self):
        document = self._upload()
        other = create_service(name="Друга")

        self.assertTrue(ServiceCatalogService.get_document(self.service, document.pk).is_ok())
        self.assertEqual(ServiceCatalogService.get_document(other, document.pk).unwrap_err().http_status, 404)

"""
Citizen services catalog endpoints.
"""

from django.test import TestCase

from apps.public_services.models import Service
from apps.public_services.services import ServiceCatalogService, ServiceCreationRequest, ServiceDocumentRequest
from tests.factories.files import TempMediaRootMixin, pdf_upload
from tests.factories.users import api_client_for, create_author


class ServiceAPITestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = api_client_for(create_author())
        self.service = ServiceCatalogService.create(ServiceCreationRequest(name="Упис у матичну књигу")).unwrap()
        self.hidden = ServiceCatalogService.create(
            ServiceCreationRequest(name="Интерна услуга", extra={"is_public": False})
        ).unwrap()

    def _document(self, title: str = "Образац", is_public: bool = True):
        request = ServiceDocumentRequest(title=title, is_public=is_public)
        return ServiceCatalogService.upload_document(self.service, pdf_upload("obrazac.pdf"), request).unwrap()

    def test_visitors_only_see_public_services(self):
        anonymous = api_client_for().get("/api/services")
        staff = self.client.get("/api/services", {"isPublic": "false"})

        self.assertEqual([item["id"] for item in anonymous.data], [self.service.pk])
        self.assertEqual([item["id"] for item in staff.data], [self.hidden.pk])

    def test_create_and_validation(self):
        created = self.client.post(
            "/api/services",
            {"name": "Нова услуга", "type": "legal", "price": "250.00", "requirements": ["Захтев"]},
            format="json",
        )
        negative = self.client.post("/api/services", {"name": "X", "price": "-5"}, format="json")
        nameless = self.client.post("/api/services", {"type": "legal"}, format="json")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["slug"], "nova-usluga")
        self.assertEqual(created.data["price"], 250)
        self.assertEqual(created.data["documents"], [])
        self.assertEqual((negative.status_code, negative.data["field"]), (400, "price"))
        self.assertEqual(nameless.status_code, 400)

    def test_anonymous_cannot_write(self):
        response = api_client_for().post("/api/services", {"name": "X"}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_retrieve_counts_public_views(self):
        api_client_for().get(f"/api/services/{self.service.pk}")
        self.client.get(f"/api/services/{self.service.pk}")

        self.service.refresh_from_db()
        self.assertEqual(self.service.view_count, 1)
        self.assertEqual(api_client_for().get(f"/api/services/{self.hidden.pk}").status_code, 404)

    def test_by_slug_and_request_counter(self):
        by_slug = api_client_for().get(f"/api/services/slug/{self.service.slug}")
        counted = api_client_for().post(f"/api/services/{self.service.pk}/request")

        self.assertEqual(by_slug.data["id"], self.service.pk)
        self.assertEqual(counted.data, {"success": True, "requestCount": 1})

    def test_update(self):
        response = self.client.patch(
            f"/api/services/{self.service.pk}", {"status": "inactive", "isOnline": True}, format="json"
        )

        self.assertEqual(response.data["status"], "inactive")
        self.assertTrue(response.data["isOnline"])

    def test_document_upload_and_visibility(self):
        uploaded = self.client.post(
            f"/api/services/{self.service.pk}/documents",
            {"file": pdf_upload(), "title": "Упутство", "type": "instruction", "isPublic": "false"},
            format="multipart",
        )
        self._document(title="Јавни образац")

        self.assertEqual(uploaded.status_code, 201)
        self.assertEqual(uploaded.data["type"], "instruction")
        public = api_client_for().get(f"/api/services/{self.service.pk}/documents")
        public_titles = [doc["title"] for doc in public.data]
        self.assertEqual(public_titles, ["Јавни образац"])
        self.assertEqual(len(self.client.get(f"/api/services/{self.service.pk}/documents").data), 2)

    def test_download_document(self):
        document = self._document()

        response = api_client_for().get(f"/api/services/{self.service.pk}/documents/{document.pk}/download")

        self.assertEqual(response.status_code, 200)
        self.assertIn("attachment", response["Content-Disposition"])
        self.assertTrue(b"".join(response.streaming_content).startswith(b"%PDF"))
        document.refresh_from_db()
        self.assertEqual(document.download_count, 1)

    def test_private_document_not_downloadable_by_visitors(self):
        document = self._document(is_public=False)
        url = f"/api/services/{self.service.pk}/documents/{document.pk}/download"

        self.assertEqual(api_client_for().get(url).status_code, 404)
        staff = self.client.get(url)
        self.assertEqual(staff.status_code, 200)
        staff.close()

    def test_document_update_and_delete(self):
        document = self._document()
        url = f"/api/services/{self.service.pk}/documents/{document.pk}"

        self.assertEqual(self.client.patch(url, {"title": "Измењен"}, format="json").data["title"], "Измењен")
        self.assertEqual(self.client.delete(url).status_code, 204)
        self.assertEqual(self.client.delete(url).status_code, 404)

    def test_statistics_and_document_types(self):
        self.assertEqual(self.client.get("/api/services/statistics").data["total"], 2)
        self.assertEqual(api_client_for().get("/api/services/document-types").data[0]["value"], "form")

    def test_delete_service(self):
        self.assertEqual(self.client.delete(f"/api/services/{self.hidden.pk}").status_code, 204)
        self.assertFalse(Service.objects.filter(pk=self.hidden.pk).exists())

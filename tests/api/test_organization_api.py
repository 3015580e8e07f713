"""
Organizational structure endpoints.
"""

from datetime import date

from django.test import TestCase

from apps.organization.services import (
    DirectorCreationRequest,
    DirectorDocumentRequest,
    DirectorService,
    OrganizationService,
    UnitCreationRequest,
)
from tests.factories.files import TempMediaRootMixin, pdf_upload, png_upload
from tests.factories.users import api_client_for, create_author

UNITS_URL = "/api/organizational-structure/units"
DIRECTORS_URL = "/api/organizational-structure/directors"


class UnitAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client_for(create_author())
        self.root = OrganizationService.create(UnitCreationRequest(name="Управа", code="UPR")).unwrap()
        self.child = OrganizationService.create(
            UnitCreationRequest(name="Финансије", code="FIN", parent_id=self.root.pk)
        ).unwrap()
        self.inactive = OrganizationService.create(
            UnitCreationRequest(name="Архива", code="ARH", is_active=False)
        ).unwrap()

    def test_visitors_only_see_active_units(self):
        anonymous = api_client_for().get(UNITS_URL)
        staff = self.client.get(UNITS_URL)

        self.assertNotIn(self.inactive.pk, [unit["id"] for unit in anonymous.data])
        self.assertEqual(len(staff.data), 3)

    def test_tree(self):
        response = api_client_for().get(f"{UNITS_URL}/tree")

        self.assertEqual(response.data[0]["code"], "UPR")
        self.assertEqual(response.data[0]["children"][0]["parentId"], self.root.pk)

    def test_create_and_conflict(self):
        payload = {"name": "Правна", "code": "PRA", "parentId": self.root.pk}
        created = self.client.post(UNITS_URL, payload, format="json")
        duplicate = self.client.post(UNITS_URL, {"name": "Друга", "code": "PRA"}, format="json")
        missing = self.client.post(UNITS_URL, {"name": "Без кода"}, format="json")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["parentId"], self.root.pk)
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(missing.status_code, 400)

    def test_move(self):
        cycle = self.client.patch(f"{UNITS_URL}/{self.root.pk}/move", {"newParentId": self.child.pk}, format="json")
        to_root = self.client.patch(f"{UNITS_URL}/{self.child.pk}/move", {"newParentId": None}, format="json")

        self.assertEqual(cycle.status_code, 400)
        self.assertIsNone(to_root.data["parentId"])

    def test_relations_and_lookup(self):
        self.assertEqual(self.client.get(f"{UNITS_URL}/{self.root.pk}/descendants").data[0]["code"], "FIN")
        self.assertEqual(self.client.get(f"{UNITS_URL}/{self.child.pk}/ancestors").data[0]["code"], "UPR")
        self.assertEqual(api_client_for().get(f"{UNITS_URL}/code/FIN").data["id"], self.child.pk)
        self.assertEqual(api_client_for().get(f"{UNITS_URL}/code/NOPE").status_code, 404)

    def test_statistics_and_export(self):
        self.assertEqual(self.client.get(f"{UNITS_URL}/statistics").data["totalUnits"], 3)
        self.assertEqual(api_client_for().get(f"{UNITS_URL}/export").status_code, 401)
        self.assertEqual(len(self.client.get(f"{UNITS_URL}/export").data), 3)

    def test_delete(self):
        self.assertEqual(self.client.delete(f"{UNITS_URL}/{self.root.pk}").status_code, 204)
        self.child.refresh_from_db()
        self.assertIsNone(self.child.parent_id)


class DirectorAPITestCase(TempMediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = api_client_for(create_author())
        self.director = DirectorService.create(
            DirectorCreationRequest(full_name="Јован Јовановић", appointment_date=date(2021, 3, 1))
        ).unwrap()

    def test_create_requires_fields(self):
        response = self.client.post(DIRECTORS_URL, {"degree": "мср"}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("fullName", response.data["errors"])
        self.assertIn("appointmentDate", response.data["errors"])

    def test_create_current_and_fetch(self):
        created = self.client.post(
            DIRECTORS_URL,
            {"fullName": "Ана Анић", "appointmentDate": "2024-01-15", "isCurrent": True},
            format="json",
        )
        current = api_client_for().get(f"{DIRECTORS_URL}/current")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(current.data["id"], created.data["id"])
        self.assertEqual(current.data["documents"], [])

    def test_set_current(self):
        response = self.client.post(f"{DIRECTORS_URL}/{self.director.pk}/set-current")
        self.assertTrue(response.data["isCurrent"])

    def test_documents_visibility(self):
        DirectorService.upload_document(self.director, pdf_upload(), DirectorDocumentRequest(title="Јавно"))
        uploaded = self.client.post(
            f"{DIRECTORS_URL}/{self.director.pk}/documents",
            {"file": pdf_upload("ugovor.pdf"), "title": "Уговор", "type": "contract", "isPublic": "false"},
            format="multipart",
        )

        self.assertEqual(uploaded.status_code, 201)
        public = api_client_for().get(f"{DIRECTORS_URL}/{self.director.pk}")
        self.assertEqual([doc["title"] for doc in public.data["documents"]], ["Јавно"])
        self.assertEqual(len(self.client.get(f"{DIRECTORS_URL}/{self.director.pk}/documents").data), 2)

    def test_profile_image_and_file_serving(self):
        response = self.client.post(
            f"{DIRECTORS_URL}/{self.director.pk}/profile-image", {"file": png_upload()}, format="multipart"
        )
        url = response.data["profileImageUrl"]

        self.assertTrue(url.startswith("/organizational-structure/directors/files/"))
        served = api_client_for().get(f"/api{url}")
        self.assertEqual(served.status_code, 200)
        served.close()

    def test_document_types_and_statistics(self):
        self.assertEqual(api_client_for().get(f"{DIRECTORS_URL}/document-types").data[0]["value"], "appointment")
        self.assertEqual(self.client.get(f"{DIRECTORS_URL}/statistics").data["totalDirectors"], 1)

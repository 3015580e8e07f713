"""
Tests for the first-run setup wizard and the setup gate.
"""

from django.test import TestCase, override_settings

from apps.content.models import Page
from apps.settings.services import SettingsService
from apps.setup.models import SetupState
from apps.setup.services import SetupCompletionRequest, SetupService
from apps.users.models import User
from tests.factories.users import api_client_for

WIZARD_PAYLOAD = {
    "siteName": "Општина Пример",
    "siteTagline": "Званична презентација",
    "adminName": "Администратор",
    "adminEmail": "Admin@Primer.rs",
    "adminPassword": "tajna123",
    "contactEmail": "info@primer.rs",
    "institutionType": "municipality",
}


def wizard_request(**overrides) -> SetupCompletionRequest:
    data = {
        "site_name": "Општина Пример",
        "admin_name": "Администратор",
        "admin_email": "admin@primer.rs",
        "admin_password": "tajna123",
        "contact_email": "info@primer.rs",
    }
    data.update(overrides)
    return SetupCompletionRequest(**data)


class SetupServiceTestCase(TestCase):
    def test_validation(self):
        cases = [
            ({"site_name": " "}, "siteName"),
            ({"site_name": "x" * 101}, "siteName"),
            ({"admin_name": ""}, "adminName"),
            ({"admin_email": "not-an-email"}, "adminEmail"),
            ({"contact_email": ""}, "contactEmail"),
            ({"admin_password": "123"}, "adminPassword"),
            ({"institution_type": "zoo"}, "institutionType"),
        ]
        for overrides, field in cases:
            with self.subTest(field=field, overrides=overrides):
                self.assertEqual(SetupService.complete(wizard_request(**overrides)).unwrap_err().field, field)

        self.assertFalse(User.objects.exists())

    def test_complete_seeds_installation(self):
        completion = SetupService.complete(wizard_request()).unwrap()

        self.assertEqual(completion.user.role, User.ROLE_ADMIN)
        self.assertTrue(completion.token)
        self.assertTrue(SetupService.is_completed())
        self.assertEqual(SettingsService.get_value("siteName"), "Општина Пример")
        self.assertEqual(SettingsService.get_value("primaryColor"), "#003366")

        homepage = Page.objects.get(pk=completion.homepage_id)
        self.assertTrue(homepage.is_homepage)
        self.assertEqual(homepage.status, "published")
        self.assertEqual(homepage.allowed_section_types, [])
        self.assertEqual(completion.sections_created, 0)

    def test_museum_template_seeds_sections(self):
        completion = SetupService.complete(wizard_request(institution_type="museum")).unwrap()

        homepage = Page.objects.get(pk=completion.homepage_id)
        self.assertTrue(homepage.use_page_builder)
        self.assertEqual(completion.sections_created, homepage.sections.count())
        self.assertGreater(completion.sections_created, 0)
        self.assertIn("hero_image", homepage.allowed_section_types)
        self.assertEqual(SetupState.load().institution_type, "museum")

    def test_second_completion_conflicts(self):
        SetupService.complete(wizard_request())

        again = SetupService.complete(wizard_request(admin_email="drugi@primer.rs"))

        self.assertEqual(again.unwrap_err().http_status, 409)
        self.assertEqual(User.objects.count(), 1)

    def test_status_and_check_admin(self):
        self.assertEqual(SetupService.check_admin(), {"hasAdmin": False, "exists": False})
        self.assertFalse(SetupService.status()["isCompleted"])

        SetupService.complete(wizard_request(institution_type="library"))

        status = SetupService.status()
        self.assertTrue(status["isCompleted"])
        self.assertTrue(status["hasAdmin"])
        self.assertEqual(status["institutionType"], "library")

    def test_templates(self):
        values = [template["value"] for template in SetupService.templates()]
        self.assertIn("municipality", values)
        self.assertIn("museum", values)


@override_settings(SETUP_GATE_ENABLED=True)
class SetupGateTestCase(TestCase):
    def test_api_blocked_until_setup_completed(self):
        response = api_client_for().get("/api/posts")

        self.assertEqual(response.status_code, 412)
        self.assertEqual(response.json()["setupRequired"], True)

    def test_setup_endpoints_stay_open(self):
        self.assertEqual(api_client_for().get("/api/setup/status").status_code, 200)

    def test_gate_opens_after_completion(self):
        client = api_client_for()

        completed = client.post("/api/setup/complete", WIZARD_PAYLOAD, format="json")

        self.assertEqual(completed.status_code, 201)
        self.assertEqual(completed.data["user"]["email"], "admin@primer.rs")
        self.assertEqual(client.get("/api/posts").status_code, 200)


class SetupAPITestCase(TestCase):
    def test_complete_returns_token(self):
        response = api_client_for().post("/api/setup/complete", WIZARD_PAYLOAD, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["access_token"])
        self.assertIsNotNone(response.data["homepageId"])

        token = response.data["access_token"]
        signed_in = api_client_for()
        signed_in.credentials(HTTP_AUTHORIZATION=f"Token {token}")
        self.assertEqual(signed_in.get("/api/auth/profile").status_code, 200)

    def test_repeat_completion_conflicts(self):
        api_client_for().post("/api/setup/complete", WIZARD_PAYLOAD, format="json")

        response = api_client_for().post("/api/setup/complete", WIZARD_PAYLOAD, format="json")

        self.assertEqual(response.status_code, 409)
        self.assertFalse(response.data["success"])

    def test_validation_error_field(self):
        payload = {**WIZARD_PAYLOAD, "adminPassword": "x"}

        response = api_client_for().post("/api/setup/complete", payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "adminPassword")

    def test_status_and_templates(self):
        self.assertEqual(api_client_for().get("/api/setup/check-admin").data["hasAdmin"], False)
        self.assertGreater(len(api_client_for().get("/api/setup/templates").data), 1)

"""
Endpoint tests for /api/settings/* and maintenance mode.
"""

from django.test import TestCase

from apps.settings.services import SettingsService
from tests.factories.users import api_client_for, create_admin, create_author


class SettingsAPITestCase(TestCase):
    def setUp(self):
        self.admin_client = api_client_for(create_admin())
        self.anonymous = api_client_for()

    def test_anonymous_sees_public_settings_only(self):
        response = self.anonymous.get("/api/settings")

        self.assertEqual(response.status_code, 200)
        keys = {item["key"] for item in response.data}
        self.assertIn("siteName", keys)
        self.assertNotIn("smtpHost", keys)

    def test_admin_sees_everything_with_masked_secrets(self):
        SettingsService.update("smtpPassword", "hunter22")

        response = self.admin_client.get("/api/settings/")

        by_key = {item["key"]: item for item in response.data}
        self.assertIn("smtpHost", by_key)
        self.assertEqual(by_key["smtpPassword"]["value"], "(hidden)")
        self.assertIsNone(by_key["smtpPassword"]["typedValue"])

    def test_private_setting_hidden_from_anonymous(self):
        self.assertEqual(self.anonymous.get("/api/settings/smtpHost").status_code, 404)
        self.assertEqual(self.admin_client.get("/api/settings/smtpHost").status_code, 200)

    def test_detail_routes_accept_trailing_slash(self):
        self.assertEqual(self.admin_client.get("/api/settings/smtpHost/").status_code, 200)
        self.assertEqual(self.anonymous.get("/api/settings/public/").status_code, 200)
        self.assertEqual(self.admin_client.get("/api/settings/category/general/").status_code, 200)

    def test_update_requires_admin(self):
        response = api_client_for(create_author()).put("/api/settings/siteName", {"value": "X"}, format="json")
        self.assertEqual(response.status_code, 403)

    def test_update_single_setting(self):
        response = self.admin_client.put("/api/settings/postsPerPage", {"value": 12}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["typedValue"], 12)

    def test_update_invalid_value(self):
        response = self.admin_client.put("/api/settings/primaryColor", {"value": "red"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["field"], "primaryColor")

    def test_bulk_update(self):
        response = self.admin_client.put(
            "/api/settings/bulk",
            {"settings": [{"key": "siteName", "value": "Школа"}, {"key": "fontFamily", "value": "Roboto"}]},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["updated"], 2)

    def test_bulk_update_reports_every_invalid_item(self):
        response = self.admin_client.put(
            "/api/settings/bulk",
            {"settings": [{"key": "postsPerPage", "value": "x"}, {"key": "nope", "value": 1}]},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual([e["key"] for e in response.data["errors"]], ["postsPerPage", "nope"])

    def test_structured_category_and_export(self):
        structured = self.anonymous.get("/api/settings/structured")
        self.assertIn("general", structured.data)

        category = self.admin_client.get("/api/settings/category/social")
        self.assertTrue(all(item["category"] == "social" for item in category.data))

        export = self.admin_client.get("/api/settings/export")
        self.assertIn("siteName", export.data)

    def test_reset_and_import(self):
        self.admin_client.put("/api/settings/primaryColor", {"value": "#111111"}, format="json")

        reset = self.admin_client.post("/api/settings/reset", {"category": "appearance"}, format="json")
        self.assertTrue(reset.data["success"])
        self.assertEqual(SettingsService.get_value("primaryColor"), "#1E40AF")

        imported = self.admin_client.post("/api/settings/import", {"siteName": "Увезено"}, format="json")
        self.assertEqual(imported.data["imported"], 1)
        self.assertEqual(SettingsService.get_value("siteName"), "Увезено")


class MaintenanceModeTestCase(TestCase):
    def setUp(self):
        SettingsService.update("maintenanceMode", True)
        SettingsService.update("maintenanceMessage", "Радови у току")

    def test_public_requests_get_503(self):
        response = self.client.get("/api/posts")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json(), {"maintenance": True, "message": "Радови у току"})

    def test_dashboard_token_bypasses_maintenance(self):
        response = api_client_for(create_author()).get("/api/posts")
        self.assertEqual(response.status_code, 200)

    def test_settings_and_auth_stay_reachable(self):
        self.assertEqual(self.client.get("/api/settings/public").status_code, 200)
        self.assertNotEqual(self.client.post("/api/auth/login", {}).status_code, 503)

"""
Tests for SettingsService: typed values, validation, caching and import/export.
"""

from django.test import TestCase

from apps.settings.encryption import ENCRYPTED_PREFIX
from apps.settings.models import SiteSetting, parse_value
from apps.settings.services import SettingsService


class ParseValueTestCase(TestCase):
    def test_number_values(self):
        self.assertEqual(parse_value("10", SiteSetting.TYPE_NUMBER), 10)
        self.assertEqual(parse_value("2.5", SiteSetting.TYPE_NUMBER), 2.5)
        self.assertIsNone(parse_value("abc", SiteSetting.TYPE_NUMBER))
        self.assertIsNone(parse_value("inf", SiteSetting.TYPE_NUMBER))

    def test_boolean_values(self):
        self.assertTrue(parse_value("true", SiteSetting.TYPE_BOOLEAN))
        self.assertTrue(parse_value("1", SiteSetting.TYPE_BOOLEAN))
        self.assertFalse(parse_value("false", SiteSetting.TYPE_BOOLEAN))

    def test_json_values(self):
        self.assertEqual(parse_value('{"a": 1}', SiteSetting.TYPE_JSON), {"a": 1})
        self.assertEqual(parse_value("{broken", SiteSetting.TYPE_JSON), "{broken")

    def test_text_passthrough(self):
        self.assertEqual(parse_value("Општина", SiteSetting.TYPE_TEXT), "Општина")


class SettingsServiceTestCase(TestCase):
    def test_defaults_are_seeded_once(self):
        created = SettingsService.ensure_defaults()
        self.assertEqual(created, len(SettingsService.DEFAULT_SETTINGS))
        self.assertEqual(SettingsService.ensure_defaults(), 0)

    def test_get_value_falls_back_to_registry_default(self):
        self.assertEqual(SettingsService.get_value("postsPerPage"), 10)
        self.assertEqual(SettingsService.get_value("unknownKey", "fallback"), "fallback")

    def test_update_number_setting(self):
        result = SettingsService.update("postsPerPage", 25)

        self.assertTrue(result.is_ok())
        self.assertEqual(SettingsService.get_value("postsPerPage"), 25)

    def test_update_invalidates_cache(self):
        self.assertEqual(SettingsService.get_value("siteName"), "")
        SettingsService.update("siteName", "Општина Пример")
        self.assertEqual(SettingsService.get_value("siteName"), "Општина Пример")

    def test_update_rejects_bad_values(self):
        self.assertEqual(SettingsService.update("postsPerPage", "many").unwrap_err().field, "postsPerPage")
        for value in ("nan", "inf", "-Infinity", float("nan")):
            with self.subTest(value=value):
                self.assertEqual(SettingsService.update("postsPerPage", value).unwrap_err().field, "postsPerPage")
        self.assertTrue(SettingsService.update("primaryColor", "blue").is_err())
        self.assertTrue(SettingsService.update("maintenanceMode", "maybe").is_err())
        self.assertTrue(SettingsService.update("institutionType", "castle").is_err())

    def test_update_unknown_key_not_found(self):
        result = SettingsService.update("doesNotExist", "x")
        self.assertEqual(result.unwrap_err().http_status, 404)

    def test_boolean_values_are_normalized(self):
        SettingsService.update("maintenanceMode", True)
        self.assertEqual(SiteSetting.objects.get(key="maintenanceMode").value, "true")
        self.assertTrue(SettingsService.is_maintenance_mode())

    def test_sensitive_setting_is_encrypted(self):
        SettingsService.update("smtpPassword", "s3cret")

        setting = SiteSetting.objects.get(key="smtpPassword")
        self.assertTrue(setting.value.startswith(ENCRYPTED_PREFIX))
        self.assertEqual(setting.plain_value, "s3cret")
        self.assertEqual(setting.get_display_value(), "(hidden)")
        self.assertNotIn("smtpPassword", SettingsService.export())

    def test_bulk_update_is_all_or_nothing(self):
        result = SettingsService.bulk_update(
            [{"key": "siteName", "value": "Нови назив"}, {"key": "postsPerPage", "value": "lots"}]
        )

        self.assertTrue(result.is_err())
        errors = result.unwrap_err()
        self.assertEqual([e.key for e in errors], ["postsPerPage"])
        self.assertEqual(SettingsService.get_value("siteName"), "")

    def test_bulk_update_applies_all(self):
        result = SettingsService.bulk_update(
            [{"key": "siteName", "value": "Нови назив"}, {"key": "postsPerPage", "value": 5}]
        )
        self.assertEqual(len(result.unwrap()), 2)
        self.assertEqual(SettingsService.get_value("postsPerPage"), 5)

    def test_reset_category(self):
        SettingsService.update("primaryColor", "#000000")

        result = SettingsService.reset_category("appearance")

        self.assertTrue(result.is_ok())
        self.assertEqual(SettingsService.get_value("primaryColor"), "#1E40AF")

    def test_reset_unknown_category(self):
        self.assertTrue(SettingsService.reset_category("weather").is_err())

    def test_structured_view_groups_by_category(self):
        SettingsService.update("contactEmail", "info@opstina.rs")

        structured = SettingsService.get_structured(public_only=True)

        self.assertEqual(structured["contact"]["contactEmail"], "info@opstina.rs")
        self.assertNotIn("smtpHost", structured["email"])

    def test_export_import_roundtrip(self):
        SettingsService.update("siteName", "Музеј")
        exported = SettingsService.export()
        SettingsService.update("siteName", "Changed")

        imported = SettingsService.import_settings(exported)

        self.assertEqual(imported.unwrap(), len(exported))
        self.assertEqual(SettingsService.get_value("siteName"), "Музеј")

    def test_import_rejects_non_mapping(self):
        self.assertTrue(SettingsService.import_settings(["siteName"]).is_err())

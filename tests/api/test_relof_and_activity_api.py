"""
Relof index, activity feed and dashboard endpoints.
"""

from unittest import mock

from django.test import TestCase

from apps.activity.services import ActivityService
from apps.relof.models import RelofScore
from apps.relof.requirements import CATEGORIES
from tests.factories.users import api_client_for, create_admin, create_author

RELOF_URL = "/api/relof-index"


class RelofAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client_for(create_author())

    def test_requires_staff(self):
        self.assertEqual(api_client_for().get(f"{RELOF_URL}/dashboard").status_code, 401)

    def test_dashboard_before_first_calculation(self):
        response = self.client.get(f"{RELOF_URL}/dashboard")

        self.assertEqual(response.status_code, 404)
        self.assertTrue(response.data["needsCalculation"])

    def test_recalculate_then_dashboard(self):
        recalculated = self.client.post(f"{RELOF_URL}/recalculate", {"reason": "rucno"}, format="json")
        dashboard = self.client.get(f"{RELOF_URL}/dashboard")

        self.assertEqual(recalculated.status_code, 200)
        self.assertTrue(recalculated.data["success"])
        self.assertEqual(recalculated.data["newScore"]["reason"], "rucno")
        self.assertEqual(dashboard.data["score"]["current"], RelofScore.objects.get().score)

    def test_async_recalculation_is_queued(self):
        with mock.patch("apps.api.relof.views.recalculate_score_async", return_value="task-1") as queued:
            response = self.client.post(f"{RELOF_URL}/recalculate?async=true")

        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.data["taskId"], "task-1")
        queued.assert_called_once_with("manual")
        self.assertFalse(RelofScore.objects.exists())

    def test_requirements_and_recommendations(self):
        requirements = self.client.get(f"{RELOF_URL}/requirements", {"category": "gallery"})
        invalid = self.client.get(f"{RELOF_URL}/requirements", {"status": "late"})
        recommendations = self.client.get(f"{RELOF_URL}/recommendations", {"limit": "2"})

        self.assertEqual(requirements.data["total"], 1)
        self.assertEqual((invalid.status_code, invalid.data["field"]), (400, "status"))
        self.assertEqual(len(recommendations.data["recommendations"]), 2)

    def test_statistics_history_and_categories(self):
        self.client.post(f"{RELOF_URL}/recalculate")

        statistics = self.client.get(f"{RELOF_URL}/statistics", {"period": "90d"})
        bad_period = self.client.get(f"{RELOF_URL}/statistics", {"period": "1y"})
        history = self.client.get(f"{RELOF_URL}/history", {"days": "abc"})
        categories = self.client.get(f"{RELOF_URL}/categories")

        self.assertEqual(statistics.data["dataPoints"], 1)
        self.assertEqual(bad_period.status_code, 400)
        self.assertEqual(len(history.data), 1)
        self.assertEqual(len(categories.data), len(CATEGORIES))

    def test_notify_is_admin_only(self):
        self.assertEqual(self.client.post(f"{RELOF_URL}/notify").status_code, 403)

        admin = api_client_for(create_admin())
        self.assertEqual(admin.post(f"{RELOF_URL}/notify").status_code, 404)


class ActivityAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client_for(create_author())
        for index in range(3):
            ActivityService.record("system", "updated", f"Унос {index}")

    def test_requires_staff(self):
        self.assertEqual(api_client_for().get("/api/activity/recent").status_code, 401)
        self.assertEqual(api_client_for().get("/api/dashboard/summary").status_code, 401)

    def test_recent_with_limit_and_type(self):
        limited = self.client.get("/api/activity/recent", {"limit": "2", "type": "system"})
        clamped = self.client.get("/api/activity/recent", {"limit": "-5"})
        unknown_type = self.client.get("/api/activity/recent", {"type": "weather"})

        self.assertEqual([entry["title"] for entry in limited.data], ["Унос 2", "Унос 1"])
        self.assertEqual(limited.data[0]["objectId"], "")
        self.assertEqual(len(clamped.data), 1)
        self.assertGreaterEqual(len(unknown_type.data), 3)

    def test_dashboard_summary(self):
        response = self.client.get("/api/dashboard/summary")

        self.assertEqual(response.data["counts"]["users"], 1)
        self.assertEqual(response.data["recentActivity"][0]["title"], "Унос 2")

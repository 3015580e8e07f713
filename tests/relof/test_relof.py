"""
Tests for the Relof transparency index: scoring, snapshots and background tasks.
"""

from decimal import Decimal
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings
from django_q.models import Schedule

from apps.relof.models import RelofScore
from apps.relof.requirements import CATEGORIES, PRIORITY_CRITICAL, REQUIREMENTS, earned_points
from apps.relof.services import RelofIndexService, score_results
from apps.relof.tasks import (
    DEBOUNCE_CACHE_KEY,
    recalculate_score_task,
    schedule_recalculation,
    setup_relof_scheduled_tasks,
)


def result(category: str, points: int, status: str) -> dict:
    return {"category": category, "points": points, "earnedPoints": earned_points(points, status), "status": status}


class ScoringTestCase(SimpleTestCase):
    def test_earned_points(self):
        self.assertEqual(earned_points(10, "fulfilled"), 10.0)
        self.assertEqual(earned_points(10, "partial"), 5.0)
        self.assertEqual(earned_points(10, "outdated"), 5.0)
        self.assertEqual(earned_points(10, "missing"), 0.0)

    def test_total_is_weighted_by_category(self):
        scores = score_results([result("basic_info", 10, "fulfilled"), result("documents", 10, "partial")])

        self.assertEqual(scores["categoryScores"]["basic_info"]["percentage"], 100.0)
        self.assertEqual(scores["categoryScores"]["documents"]["percentage"], 50.0)
        self.assertEqual(scores["totalScore"], 71.43)
        self.assertEqual((scores["earnedPoints"], scores["maxScore"]), (15.0, 20))

    def test_empty_categories_do_not_count(self):
        scores = score_results([result("gallery", 5, "fulfilled")])

        self.assertEqual(scores["totalScore"], 100.0)
        self.assertEqual(scores["categoryScores"]["services"]["percentage"], 0.0)
        self.assertEqual(scores["categoryScores"]["gallery"]["requirements"]["fulfilled"], 1)

    def test_grade_and_color(self):
        cases = [(95, "Одличан", "green"), (71.43, "Добар", "yellow"), (45, "Незадовољавајући", "orange")]
        for score, grade, color in cases:
            with self.subTest(score=score):
                self.assertEqual(RelofIndexService.grade(score), grade)
                self.assertEqual(RelofIndexService.color(score), color)
        self.assertEqual(RelofIndexService.color(10), "red")


class RelofIndexServiceTestCase(TestCase):
    def test_recalculate_stores_snapshots(self):
        first = RelofIndexService.recalculate("initial").unwrap()
        second = RelofIndexService.recalculate("manual").unwrap()

        self.assertIsNone(first["previousScore"])
        self.assertIsNone(first["change"])
        self.assertEqual(second["change"], 0.0)
        self.assertEqual(RelofScore.objects.count(), 2)
        self.assertEqual(RelofIndexService.latest().reason, "manual")

    @override_settings(RELOF_NOTIFICATION_RECIPIENTS=["nadzor@example.rs"], RELOF_SCORE_DROP_ALERT=5)
    def test_score_drop_sends_notification(self):
        RelofScore.objects.create(total_score=Decimal("99"), max_score=100, earned_points=Decimal("99"))

        change = RelofIndexService.recalculate("drop").unwrap()["change"]

        self.assertLess(change, -5)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["nadzor@example.rs"])
        self.assertIn("Релоф индекс", mail.outbox[0].subject)

    def test_dashboard_requires_snapshot(self):
        error = RelofIndexService.dashboard().unwrap_err()

        self.assertEqual(error.http_status, 404)
        self.assertTrue(error.details["needsCalculation"])

    def test_dashboard(self):
        RelofIndexService.recalculate()

        dashboard = RelofIndexService.dashboard().unwrap()

        self.assertEqual(dashboard["quickStats"]["totalRequirements"], len(REQUIREMENTS))
        self.assertIsNone(dashboard["trends"]["isImproving"])
        self.assertEqual(len(dashboard["trends"]["history"]), 1)
        self.assertLessEqual(len(dashboard["alerts"]["recommendations"]), 3)
        for item in dashboard["alerts"]["critical"]:
            self.assertEqual(item["priority"], PRIORITY_CRITICAL)

    def test_requirements_filters(self):
        gallery = RelofIndexService.requirements(category="gallery").unwrap()
        searched = RelofIndexService.requirements(search="galerija").unwrap()

        self.assertEqual(gallery["total"], 1)
        self.assertEqual(gallery["requirements"]["gallery"][0]["status"], "missing")
        self.assertIn("gallery", searched["requirements"])

        for field, value in (("category", "weather"), ("status", "late"), ("priority", "urgent")):
            with self.subTest(field=field):
                self.assertEqual(RelofIndexService.requirements(**{field: value}).unwrap_err().field, field)

    def test_recommendations_sorted_by_priority(self):
        recommendations = RelofIndexService.recommendations(limit=2).unwrap()["recommendations"]

        self.assertEqual(len(recommendations), 2)
        self.assertEqual(recommendations[0]["priority"], PRIORITY_CRITICAL)
        self.assertTrue(recommendations[0]["actionItems"])

    def test_statistics(self):
        self.assertEqual(RelofIndexService.statistics("1y").unwrap_err().field, "period")
        self.assertTrue(RelofIndexService.statistics("7d").unwrap_err().details["needsCalculation"])

        RelofIndexService.recalculate()
        stats = RelofIndexService.statistics("7d").unwrap()

        self.assertEqual(stats["dataPoints"], 1)
        self.assertEqual(stats["trends"]["trend"], 0.0)

    def test_history_and_categories(self):
        RelofIndexService.recalculate("first")

        self.assertEqual([entry["reason"] for entry in RelofIndexService.history(7)], ["first"])
        self.assertEqual(len(RelofIndexService.category_breakdown()), len(CATEGORIES))

    def test_notification_without_recipients(self):
        RelofIndexService.recalculate()

        with mock.patch("apps.settings.services.SettingsService.get_value", return_value=""):
            outcome = RelofIndexService.trigger_notification().unwrap()

        self.assertFalse(outcome["success"])
        self.assertEqual(len(mail.outbox), 0)


class RelofTasksTestCase(TestCase):
    def test_recalculate_task(self):
        cache.set(DEBOUNCE_CACHE_KEY, "pending")

        outcome = recalculate_score_task("scheduled")

        self.assertTrue(outcome["success"])
        self.assertEqual(outcome["score"], RelofIndexService.latest().score)
        self.assertIsNone(cache.get(DEBOUNCE_CACHE_KEY))

    def test_auto_recalculation_disabled(self):
        with mock.patch("apps.relof.tasks.recalculate_score_async") as queued:
            self.assertFalse(schedule_recalculation("post_created"))
        queued.assert_not_called()

    @override_settings(RELOF_AUTO_RECALCULATE=True)
    def test_changes_are_debounced_until_commit(self):
        with mock.patch("apps.relof.tasks.recalculate_score_async") as queued:
            with self.captureOnCommitCallbacks(execute=True):
                self.assertTrue(schedule_recalculation("post_created"))
                self.assertFalse(schedule_recalculation("post_updated"))
                queued.assert_not_called()

        queued.assert_called_once_with("post_created")

    def test_daily_schedule_created_once(self):
        self.assertEqual(setup_relof_scheduled_tasks(), {"daily_recalculation": "created"})
        self.assertEqual(setup_relof_scheduled_tasks(), {"daily_recalculation": "already_exists"})
        self.assertEqual(Schedule.objects.filter(func="apps.relof.tasks.recalculate_score_task").count(), 1)

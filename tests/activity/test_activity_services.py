"""
Tests for the activity feed.
"""

from django.test import SimpleTestCase, TestCase

from apps.activity.models import ActivityLog
from apps.activity.services import ActivityService
from tests.factories.content import create_post
from tests.factories.users import create_author


class MapUpdateTypeTestCase(SimpleTestCase):
    def test_mapping(self):
        cases = {
            "post_created": ("post", "created"),
            "media_uploaded": ("media", "uploaded"),
            "document_deleted": ("media", "deleted"),
            "settings_updated": ("settings", "updated"),
            "org_unit_changed": ("organization", "updated"),
            "director_deleted": ("organization", "deleted"),
            "gallery_published": ("gallery", "published"),
            "service_changed": ("service", "updated"),
            "cache_warmed": ("system", "updated"),
            "": ("system", "updated"),
        }
        for update_type, expected in cases.items():
            with self.subTest(update_type=update_type):
                self.assertEqual(ActivityService.map_update_type(update_type), expected)


class ActivityServiceTestCase(TestCase):
    def test_record_and_recent(self):
        ActivityLog.objects.all().delete()
        ActivityService.record("system", "updated", "Прво")
        ActivityService.record_update("settings_updated", "Друго", metadata={"key": "siteName"})

        entries = list(ActivityService.recent(limit=5))

        self.assertEqual([entry.title for entry in entries], ["Друго", "Прво"])
        self.assertEqual(entries[0].type, "settings")
        self.assertEqual(entries[0].metadata, {"key": "siteName"})
        self.assertEqual([entry.title for entry in ActivityService.recent(type="system")], ["Прво"])
        self.assertEqual(len(ActivityService.recent(limit=0)), 1)

    def test_anonymous_actor_and_blank_title(self):
        entry = ActivityService.record("system", "updated", "", user=object())

        self.assertIsNone(entry.user)
        self.assertEqual(entry.title, "Unknown")

    def test_post_changes_are_recorded(self):
        author = create_author()
        post = create_post(title="Седница скупштине", author=author)

        entry = ActivityService.recent(type="post")[0]

        self.assertEqual((entry.action, entry.title, entry.user), ("published", "Седница скупштине", author))
        self.assertEqual(entry.object_id, str(post.pk))

        post.delete()
        self.assertEqual(ActivityService.recent(type="post")[0].action, "deleted")

    def test_dashboard_summary(self):
        author = create_author()
        create_post(author=author)
        create_post(title="Нацрт", author=author, status="draft")

        summary = ActivityService.dashboard_summary()

        self.assertEqual(summary["counts"]["posts"], 2)
        self.assertEqual(summary["counts"]["publishedPosts"], 1)
        self.assertEqual(summary["counts"]["draftPosts"], 1)
        self.assertEqual(summary["counts"]["users"], 1)
        self.assertLessEqual(len(summary["recentActivity"]), 10)
        self.assertEqual(summary["recentActivity"][0].title, "Нацрт")

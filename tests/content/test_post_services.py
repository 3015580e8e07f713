"""
Tests for CategoryService and PostService.
"""

from django.test import TestCase

from apps.activity.models import ActivityLog
from apps.content.models import STATUS_DRAFT, STATUS_PUBLISHED, Post
from apps.content.services import CategoryService, PostCreationRequest, PostService
from tests.factories.content import create_category, create_draft_post, create_page, create_post
from tests.factories.users import create_admin, create_author


class CategoryServiceTestCase(TestCase):
    def test_create_generates_latin_slug(self):
        category = CategoryService.create("Вести из општине").unwrap()
        self.assertEqual(category.slug, "vesti-iz-opstine")

    def test_create_requires_name(self):
        self.assertEqual(CategoryService.create("   ").unwrap_err().field, "name")

    def test_slugs_stay_unique(self):
        first = CategoryService.create("Вести").unwrap()
        second = CategoryService.create("Vesti").unwrap()
        self.assertEqual(first.slug, "vesti")
        self.assertEqual(second.slug, "vesti-2")

    def test_list_counts_posts(self):
        category = create_category()
        create_post(category=category)
        create_draft_post()

        listed = CategoryService.list().get(pk=category.pk)
        self.assertEqual(listed.posts_count, 1)

    def test_published_counts_ignore_drafts(self):
        category = create_category()
        create_post(category=category)
        create_post(title="Draft", category=category, status=STATUS_DRAFT)

        self.assertEqual(CategoryService.with_published_posts().get(pk=category.pk).posts_count, 1)

    def test_delete_keeps_posts(self):
        category = create_category()
        post = create_post(category=category)

        CategoryService.delete(category)

        post.refresh_from_db()
        self.assertIsNone(post.category_id)


class PostServiceTestCase(TestCase):
    def setUp(self):
        self.author = create_author()
        self.admin = create_admin()

    def test_create_published_sets_published_at(self):
        post = PostService.create(
            PostCreationRequest(title="Седница скупштине", status=STATUS_PUBLISHED), author=self.author
        ).unwrap()

        self.assertEqual(post.slug, "sednica-skupstine")
        self.assertIsNotNone(post.published_at)
        self.assertEqual(post.author, self.author)

    def test_create_draft_has_no_published_at(self):
        post = PostService.create(PostCreationRequest(title="Нацрт")).unwrap()
        self.assertIsNone(post.published_at)

    def test_create_validates_relations(self):
        self.assertEqual(
            PostService.create(PostCreationRequest(title="X", category_id=9999)).unwrap_err().field, "categoryId"
        )
        self.assertEqual(
            PostService.create(PostCreationRequest(title="X", page_ids=[9999])).unwrap_err().field, "pageIds"
        )

    def test_create_rejects_unknown_status(self):
        result = PostService.create(PostCreationRequest(title="X", status="archived"))
        self.assertEqual(result.unwrap_err().field, "status")

    def test_create_links_pages(self):
        page = create_page()
        post = PostService.create(PostCreationRequest(title="X", page_ids=[page.pk])).unwrap()
        self.assertEqual(list(post.pages.all()), [page])

    def test_author_cannot_edit_foreign_post(self):
        post = create_post(author=self.admin)

        result = PostService.update(post, user=self.author, title="Hijacked")

        self.assertEqual(result.unwrap_err().http_status, 403)

    def test_admin_edits_any_post(self):
        post = create_post(author=self.author)
        self.assertTrue(PostService.update(post, user=self.admin, title="Edited").is_ok())

    def test_update_slug_stays_unique(self):
        create_post(title="Taken")
        post = create_post(title="Other", author=self.author)

        updated = PostService.update(post, user=self.author, slug="taken").unwrap()

        self.assertEqual(updated.slug, "taken-2")

    def test_author_cannot_delete_foreign_post(self):
        post = create_post(author=self.admin)
        self.assertTrue(PostService.delete(post, user=self.author).is_err())
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

    def test_paged_listing(self):
        for index in range(5):
            create_post(title=f"Post {index}")

        paged = PostService.paged(page=2, limit=2)

        self.assertEqual(paged["total"], 5)
        self.assertEqual(paged["page"], 2)
        self.assertEqual(paged["totalPages"], 3)
        self.assertEqual(len(paged["posts"]), 2)

    def test_paged_clamps_page_number(self):
        create_post()
        self.assertEqual(PostService.paged(page=99, limit=10)["page"], 1)

    def test_list_search_is_script_insensitive(self):
        create_post(title="Објављен јавни позив")
        create_post(title="Something else")

        found = PostService.list(search="javni poziv")

        self.assertEqual([post.title for post in found], ["Објављен јавни позив"])

    def test_list_filters_by_category_slug_or_id(self):
        category = create_category(name="Обавештења")
        create_post(category=category)
        create_post(title="Uncategorized")

        self.assertEqual(PostService.list(category=category.slug).count(), 1)
        self.assertEqual(PostService.list(category=str(category.pk)).count(), 1)

    def test_increment_view_only_for_published(self):
        post = create_post()
        draft = create_draft_post()

        self.assertEqual(PostService.increment_view(post.slug).unwrap(), 1)
        self.assertEqual(PostService.increment_view(post.slug).unwrap(), 2)
        self.assertEqual(PostService.increment_view(draft.slug).unwrap_err().http_status, 404)

    def test_get_by_slug_published_only(self):
        draft = create_draft_post()
        self.assertTrue(PostService.get_by_slug(draft.slug, published_only=True).is_err())
        self.assertTrue(PostService.get_by_slug(draft.slug).is_ok())

    def test_by_page_and_homepage(self):
        page = create_page()
        linked = create_post(title="Linked")
        linked.pages.add(page)
        create_post(title="Unlinked")

        self.assertEqual([p.title for p in PostService.by_page(page.pk)], ["Linked"])
        self.assertEqual([p.title for p in PostService.by_page_slug(page.slug)], ["Linked"])
        self.assertEqual(len(PostService.homepage(limit=1)), 1)

    def test_saving_post_records_activity(self):
        create_post(title="Логована", author=self.author)

        entry = ActivityLog.objects.filter(type="post").latest("id")
        self.assertEqual(entry.action, "published")
        self.assertEqual(entry.title, "Логована")
        self.assertEqual(entry.user, self.author)

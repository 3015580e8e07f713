"""
Posts, pages, search and public slug resolution endpoints.
"""

from django.test import TestCase

from apps.content.models import STATUS_DRAFT, Post
from apps.content.services import PostCreationRequest, PostService
from tests.factories.content import create_category, create_page, create_section
from tests.factories.users import api_client_for, create_admin, create_author


def publish(title: str, author=None, **fields) -> Post:
    return PostService.create(PostCreationRequest(title=title, status="published", **fields), author=author).unwrap()


class PostAPITestCase(TestCase):
    def setUp(self):
        self.author = create_author()
        self.client = api_client_for(self.author)
        self.post = publish("Седница скупштине", self.author)
        self.draft = PostService.create(PostCreationRequest(title="Нацрт", status=STATUS_DRAFT), self.author).unwrap()

    def test_visitors_only_see_published_posts(self):
        anonymous = api_client_for().get("/api/posts", {"status": STATUS_DRAFT})
        staff = self.client.get("/api/posts", {"status": STATUS_DRAFT})

        self.assertEqual([post["id"] for post in anonymous.data["posts"]], [self.post.pk])
        self.assertEqual(anonymous.data["total"], 1)
        self.assertEqual([post["id"] for post in staff.data["posts"]], [self.draft.pk])
        self.assertEqual(api_client_for().get(f"/api/posts/{self.draft.pk}").status_code, 404)

    def test_create(self):
        category = create_category()
        created = self.client.post(
            "/api/posts", {"title": "Јавни позив", "status": "published", "categoryId": category.pk}, format="json"
        )
        missing_title = self.client.post("/api/posts", {"content": "Без наслова"}, format="json")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data["slug"], "javni-poziv")
        self.assertEqual(created.data["author"]["id"], self.author.pk)
        self.assertEqual(created.data["category"]["id"], category.pk)
        self.assertEqual(missing_title.status_code, 400)
        self.assertEqual(api_client_for().post("/api/posts", {"title": "X"}, format="json").status_code, 401)

    def test_authors_edit_only_their_posts(self):
        other = api_client_for(create_author(email="drugi@test.rs", name="Други"))
        admin = api_client_for(create_admin())

        forbidden = other.patch(f"/api/posts/{self.post.pk}", {"title": "Туђа"}, format="json")
        allowed = admin.patch(f"/api/posts/{self.post.pk}", {"title": "Измењено"}, format="json")

        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(allowed.data["title"], "Измењено")
        self.assertEqual(other.delete(f"/api/posts/{self.post.pk}").status_code, 403)
        self.assertEqual(self.client.delete(f"/api/posts/{self.post.pk}").status_code, 204)

    def test_slug_lookup_and_view_counter(self):
        by_slug = api_client_for().get("/api/posts/slug/sednica-skupstine")
        viewed = api_client_for().post("/api/posts/slug/sednica-skupstine/view")

        self.assertEqual(by_slug.data["id"], self.post.pk)
        self.assertEqual(viewed.data, {"viewCount": 1})
        self.assertEqual(api_client_for().get(f"/api/posts/slug/{self.draft.slug}").status_code, 404)


class SearchAPITestCase(TestCase):
    def setUp(self):
        publish("Седница скупштине", content="<p>Дневни ред</p>")
        create_page(title="Скупштина општине")

    def test_short_query_returns_nothing(self):
        response = api_client_for().get("/api/search", {"q": "ск"})
        self.assertEqual(response.data["total"], 0)

    def test_latin_query_finds_cyrillic_content(self):
        response = api_client_for().get("/api/search", {"q": "skupstin"})

        self.assertEqual(response.data["total"], 2)
        self.assertEqual(response.data["posts"][0]["title"], "Седница скупштине")
        self.assertEqual(response.data["pages"][0]["title"], "Скупштина општине")
        self.assertEqual(response.data["highlight"], ["skupstin", "скупстин"])

    def test_drafts_are_not_searchable(self):
        PostService.create(PostCreationRequest(title="Тајна седница", status=STATUS_DRAFT))
        self.assertEqual(api_client_for().get("/api/search", {"q": "tajna"}).data["total"], 0)


class PublicResolutionAPITestCase(TestCase):
    def test_resolves_post_category_and_page(self):
        category = create_category(name="Обавештења", slug="obavestenja")
        post = publish("Радови на путу", category_id=category.pk)
        page = create_page(title="О нама", slug="o-nama", use_page_builder=True)
        create_section(page, data={"htmlContent": "<p>Видљиво</p>"})
        create_section(page, name="Скривено", sort_order=1, data={"htmlContent": "x"}, is_visible=False)

        resolved_post = api_client_for().get(f"/api/public/resolve/{post.slug}")
        resolved_category = api_client_for().get("/api/public/resolve/obavestenja")
        resolved_page = api_client_for().get("/api/public/resolve/o-nama/")

        self.assertEqual((resolved_post.data["type"], resolved_post.data["data"]["id"]), ("post", post.pk))
        self.assertEqual(resolved_category.data["type"], "category")
        self.assertEqual([p["id"] for p in resolved_category.data["data"]["posts"]], [post.pk])
        self.assertEqual(resolved_page.data["type"], "page")
        self.assertEqual([s["name"] for s in resolved_page.data["data"]["sections"]], ["Section"])

    def test_unknown_and_unpublished_slugs(self):
        create_page(title="Нацрт", slug="nacrt", status=STATUS_DRAFT)

        self.assertEqual(api_client_for().get("/api/public/resolve/nacrt").status_code, 404)
        self.assertEqual(api_client_for().get("/api/public/resolve/nema-ga").status_code, 404)

    def test_homepage(self):
        empty = api_client_for().get("/api/public/homepage")
        self.assertIsNone(empty.data["page"])

        homepage = create_page(title="Почетна", slug="pocetna", is_homepage=True, use_page_builder=True)
        create_section(homepage, data={"htmlContent": "<p>Добродошли</p>"})
        publish("Прва вест")

        response = api_client_for().get("/api/public/homepage")

        self.assertEqual(response.data["page"]["id"], homepage.pk)
        self.assertEqual(len(response.data["sections"]), 1)
        self.assertEqual(response.data["posts"][0]["title"], "Прва вест")


class PageBuilderAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client_for(create_author())
        self.page = create_page(title="Услуге")

    def test_add_and_reorder_sections(self):
        first = self.client.post(
            f"/api/pages/{self.page.pk}/sections", {"type": "custom_html", "data": {"htmlContent": "a"}}, format="json"
        )
        second = self.client.post(f"/api/pages/{self.page.pk}/sections", {"type": "hero_stack"}, format="json")
        invalid = self.client.post(
            f"/api/pages/{self.page.pk}/sections", {"type": "custom_html", "data": {}}, format="json"
        )

        self.assertEqual((first.status_code, first.data["sortOrder"]), (201, 0))
        self.assertEqual(second.data["sortOrder"], 1)
        self.assertEqual((invalid.status_code, invalid.data["field"]), (400, "data"))

        reordered = self.client.put(
            f"/api/pages/{self.page.pk}/sections/reorder",
            {"sections": [{"id": second.data["id"], "sortOrder": 0}, {"id": first.data["id"], "sortOrder": 1}]},
            format="json",
        )
        self.assertEqual([section["id"] for section in reordered.data], [second.data["id"], first.data["id"]])

    def test_malformed_section_data_is_a_validation_error(self):
        section = create_section(self.page, "cta_one", data={"title": "X", "buttonText": "Да", "buttonLink": "/"})

        response = self.client.patch(
            f"/api/sections/{section.pk}", {"data": {"title": "X", "buttonStyle": ["a"]}}, format="json"
        )

        self.assertEqual((response.status_code, response.data["field"]), (400, "data"))
        self.assertEqual(response.data["errors"], ["buttonStyle: must be a string"])

    def test_blank_template_on_update(self):
        response = self.client.patch(f"/api/pages/{self.page.pk}", {"template": ""}, format="json")

        self.assertEqual(response.status_code, 200)
        self.page.refresh_from_db()
        self.assertEqual(self.page.template, "default")

    def test_section_type_required(self):
        response = self.client.post(f"/api/pages/{self.page.pk}/sections", {"name": "Без типа"}, format="json")
        self.assertEqual((response.status_code, response.data["field"]), (400, "type"))

    def test_templates_and_section_types_are_listed(self):
        self.assertTrue(api_client_for().get("/api/pages/templates").data)
        self.assertTrue(self.client.get("/api/sections/types").data)

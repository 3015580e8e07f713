"""
Endpoint tests for /api/auth/* and /api/users/*.
"""

from django.test import TestCase
from rest_framework.authtoken.models import Token

from apps.users.models import User
from tests.factories.users import DEFAULT_PASSWORD, api_client_for, create_admin, create_author


class AuthAPITestCase(TestCase):
    def setUp(self):
        self.user = create_author()
        self.client = api_client_for()

    def test_login_returns_access_token_and_user(self):
        response = self.client.post(
            "/api/auth/login", {"email": "author@test.rs", "password": DEFAULT_PASSWORD}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["access_token"], Token.objects.get(user=self.user).key)
        self.assertEqual(response.data["user"]["email"], "author@test.rs")
        self.assertNotIn("password", response.data["user"])

    def test_login_with_trailing_slash(self):
        response = self.client.post(
            "/api/auth/login/", {"email": "author@test.rs", "password": DEFAULT_PASSWORD}, format="json"
        )
        self.assertEqual(response.status_code, 200)

    def test_login_wrong_password(self):
        response = self.client.post(
            "/api/auth/login", {"email": "author@test.rs", "password": "nope-nope"}, format="json"
        )
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data["success"])

    def test_login_missing_fields(self):
        response = self.client.post("/api/auth/login", {"email": "author@test.rs"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_profile_requires_token(self):
        self.assertEqual(self.client.get("/api/auth/profile").status_code, 401)

    def test_profile_and_logout(self):
        client = api_client_for(self.user)

        profile = client.get("/api/auth/profile")
        self.assertEqual(profile.status_code, 200)
        self.assertEqual(profile.data["role"], User.ROLE_AUTHOR)
        self.assertTrue(profile.data["isActive"])

        logout = client.post("/api/auth/logout")
        self.assertEqual(logout.status_code, 200)
        self.assertFalse(Token.objects.filter(user=self.user).exists())


class UsersAPITestCase(TestCase):
    def setUp(self):
        self.admin = create_admin()
        self.author = create_author()
        self.admin_client = api_client_for(self.admin)

    def test_authors_cannot_manage_users(self):
        response = api_client_for(self.author).get("/api/users")
        self.assertEqual(response.status_code, 403)

    def test_list_plain_and_paginated(self):
        plain = self.admin_client.get("/api/users")
        self.assertEqual(plain.status_code, 200)
        self.assertEqual(len(plain.data), 2)

        paged = self.admin_client.get("/api/users", {"page": 1, "limit": 1})
        self.assertEqual(len(paged.data["data"]), 1)
        self.assertEqual(paged.data["meta"]["total"], 2)
        self.assertEqual(paged.data["meta"]["totalPages"], 2)

    def test_list_with_stats_and_filters(self):
        response = self.admin_client.get("/api/users", {"withStats": "true", "role": "author"})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["postsCount"], 0)

    def test_create_user(self):
        response = self.admin_client.post(
            "/api/users",
            {"email": "new@test.rs", "name": "New", "password": "secret123", "role": "author"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["email"], "new@test.rs")

    def test_create_duplicate_email(self):
        response = self.admin_client.post(
            "/api/users",
            {"email": "author@test.rs", "name": "Dup", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)

    def test_create_missing_password(self):
        response = self.admin_client.post("/api/users", {"email": "x@test.rs", "name": "X"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("password", response.data["errors"])

    def test_update_role(self):
        response = self.admin_client.patch(
            f"/api/users/{self.author.pk}", {"role": "admin"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["role"], "admin")

    def test_toggle_and_set_status(self):
        toggled = self.admin_client.patch(f"/api/users/{self.author.pk}/toggle-status")
        self.assertFalse(toggled.data["isActive"])

        restored = self.admin_client.patch(
            f"/api/users/{self.author.pk}/status", {"isActive": True}, format="json"
        )
        self.assertTrue(restored.data["isActive"])

    def test_cannot_delete_self(self):
        response = self.admin_client.delete(f"/api/users/{self.admin.pk}")
        self.assertEqual(response.status_code, 403)

    def test_delete_author(self):
        response = self.admin_client.delete(f"/api/users/{self.author.pk}")
        self.assertEqual(response.status_code, 204)

    def test_statistics(self):
        response = self.admin_client.get("/api/users/statistics")
        self.assertEqual(response.data["total"], 2)

    def test_author_can_edit_own_profile(self):
        client = api_client_for(self.author)

        response = client.patch("/api/users/me", {"name": "Renamed"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "Renamed")
        self.assertEqual(client.get("/api/users/me").data["name"], "Renamed")

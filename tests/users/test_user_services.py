"""
Tests for UserService: account creation, role guards and token login.
"""

from django.test import TestCase
from rest_framework.authtoken.models import Token

from apps.users.models import User
from apps.users.services import UserCreationRequest, UserService
from tests.factories.users import DEFAULT_PASSWORD, create_admin, create_author


class UserCreationTestCase(TestCase):
    def test_create_author_by_default(self):
        result = UserService.create_user(
            UserCreationRequest(email="nova@test.rs", name="  Нова Ауторка ", password="secret123")
        )

        self.assertTrue(result.is_ok())
        user = result.unwrap()
        self.assertEqual(user.role, User.ROLE_AUTHOR)
        self.assertEqual(user.name, "Нова Ауторка")
        self.assertFalse(user.is_staff)
        self.assertTrue(user.check_password("secret123"))

    def test_admin_role_sets_staff_flag(self):
        user = UserService.create_user(
            UserCreationRequest(email="boss@test.rs", name="Boss", password="secret123", role=User.ROLE_ADMIN)
        ).unwrap()
        self.assertTrue(user.is_staff)

    def test_duplicate_email_is_conflict(self):
        create_author(email="taken@test.rs")

        result = UserService.create_user(
            UserCreationRequest(email="TAKEN@test.rs", name="Other", password="secret123")
        )

        self.assertTrue(result.is_err())
        self.assertEqual(result.unwrap_err().http_status, 409)
        self.assertEqual(result.unwrap_err().field, "email")

    def test_short_password_rejected(self):
        result = UserService.create_user(UserCreationRequest(email="x@test.rs", name="X", password="123"))
        self.assertTrue(result.is_err())
        self.assertEqual(result.unwrap_err().field, "password")
        self.assertEqual(result.unwrap_err().http_status, 400)

    def test_invalid_email_rejected(self):
        result = UserService.create_user(UserCreationRequest(email="not-an-email", name="X", password="secret123"))
        self.assertEqual(result.unwrap_err().field, "email")

    def test_unknown_role_rejected(self):
        result = UserService.create_user(
            UserCreationRequest(email="x@test.rs", name="X", password="secret123", role="editor")
        )
        self.assertEqual(result.unwrap_err().field, "role")


class UserGuardsTestCase(TestCase):
    def setUp(self):
        self.admin = create_admin()
        self.author = create_author()

    def test_last_admin_cannot_lose_admin_role(self):
        result = UserService.update_user(self.admin, role=User.ROLE_AUTHOR)

        self.assertTrue(result.is_err())
        self.assertEqual(result.unwrap_err().http_status, 403)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, User.ROLE_ADMIN)

    def test_admin_can_be_demoted_when_another_admin_exists(self):
        create_admin(email="second@test.rs")

        result = UserService.update_user(self.admin, role=User.ROLE_AUTHOR)

        self.assertTrue(result.is_ok())
        self.assertFalse(result.unwrap().is_staff)

    def test_update_password_rehashes(self):
        UserService.update_user(self.author, password="brand-new-pass")
        self.author.refresh_from_db()
        self.assertTrue(self.author.check_password("brand-new-pass"))

    def test_cannot_deactivate_own_account(self):
        other_admin = create_admin(email="second@test.rs")
        result = UserService.set_status(other_admin, False, acting_user=other_admin)
        self.assertEqual(result.unwrap_err().http_status, 403)

    def test_cannot_deactivate_last_active_admin(self):
        result = UserService.set_status(self.admin, False, acting_user=self.author)
        self.assertEqual(result.unwrap_err().http_status, 403)

    def test_deactivation_revokes_token(self):
        Token.objects.create(user=self.author)

        result = UserService.set_status(self.author, False, acting_user=self.admin)

        self.assertTrue(result.is_ok())
        self.assertFalse(Token.objects.filter(user=self.author).exists())

    def test_toggle_status_flips_flag(self):
        UserService.toggle_status(self.author, acting_user=self.admin)
        self.author.refresh_from_db()
        self.assertFalse(self.author.is_active)

        UserService.toggle_status(self.author, acting_user=self.admin)
        self.author.refresh_from_db()
        self.assertTrue(self.author.is_active)

    def test_delete_user(self):
        author_pk = self.author.pk

        result = UserService.delete_user(self.author, acting_user=self.admin)

        self.assertEqual(result.unwrap(), author_pk)
        self.assertFalse(User.objects.filter(email="author@test.rs").exists())

    def test_delete_self_forbidden(self):
        result = UserService.delete_user(self.admin, acting_user=self.admin)
        self.assertTrue(result.is_err())
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_statistics(self):
        create_author(email="inactive@test.rs")
        User.objects.filter(email="inactive@test.rs").update(is_active=False)

        stats = UserService.get_statistics()

        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["active"], 2)
        self.assertEqual(stats["inactive"], 1)
        self.assertEqual(stats["admins"], 1)
        self.assertEqual(stats["authors"], 2)
        self.assertEqual(stats["recentlyCreated"], 3)


class AuthenticationTestCase(TestCase):
    def setUp(self):
        self.user = create_author()

    def test_valid_credentials_return_token(self):
        result = UserService.authenticate("author@test.rs", DEFAULT_PASSWORD)

        self.assertTrue(result.is_ok())
        user, token = result.unwrap()
        self.assertEqual(user, self.user)
        self.assertEqual(Token.objects.get(user=self.user).key, token)
        user.refresh_from_db()
        self.assertIsNotNone(user.last_login)

    def test_wrong_password_is_unauthorized(self):
        result = UserService.authenticate("author@test.rs", "wrong-password")
        self.assertEqual(result.unwrap_err().http_status, 401)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()
        result = UserService.authenticate("author@test.rs", DEFAULT_PASSWORD)
        self.assertTrue(result.is_err())

    def test_missing_credentials(self):
        result = UserService.authenticate("", "")
        self.assertEqual(result.unwrap_err().http_status, 400)

    def test_logout_deletes_token(self):
        UserService.authenticate("author@test.rs", DEFAULT_PASSWORD)
        UserService.logout(self.user)
        self.assertFalse(Token.objects.filter(user=self.user).exists())

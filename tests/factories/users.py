# ===============================================================================
# TEST FACTORIES FOR USERS
# ===============================================================================

from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from apps.users.models import User

DEFAULT_PASSWORD = "testpass123"


def create_user(
    email: str = "author@test.rs",
    name: str = "Test Author",
    role: str = User.ROLE_AUTHOR,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
) -> User:
    """Create a dashboard user with sensible defaults."""
    return User.objects.create_user(email=email, password=password, name=name, role=role, is_active=is_active)


def create_admin(email: str = "admin@test.rs", name: str = "Test Admin") -> User:
    return create_user(email=email, name=name, role=User.ROLE_ADMIN)


def create_author(email: str = "author@test.rs", name: str = "Test Author") -> User:
    return create_user(email=email, name=name, role=User.ROLE_AUTHOR)


def api_client_for(user: User | None = None) -> APIClient:
    """APIClient authenticated with the user's API token (anonymous when user is None)."""
    client = APIClient()
    if user is not None:
        token, _created = Token.objects.get_or_create(user=user)
        client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
    return client

# ===============================================================================
# API ROUTERS 🧭
# ===============================================================================

from collections.abc import Callable
from typing import Any

from django.urls import URLPattern, path
from rest_framework.routers import SimpleRouter


class OptionalSlashRouter(SimpleRouter):
    """Router accepting ``/api/posts`` and ``/api/posts/`` alike"""

    def __init__(self) -> None:
        super().__init__()
        self.trailing_slash = "/?"


def optional_slash_path(route: str, view: Callable[..., Any], name: str | None = None) -> list[URLPattern]:
    """
    Plain ``path()`` counterpart of OptionalSlashRouter.

        urlpatterns = [*optional_slash_path("auth/login", views.login_api, name="login")]

    Reversing ``name`` yields the slash-less form.
    """
    route = route.rstrip("/")
    return [path(route, view, name=name), path(f"{route}/", view)]

"""
Maintenance mode middleware for the Municipal CMS Platform
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from django.http import HttpRequest, HttpResponse, JsonResponse
from rest_framework.authtoken.models import Token

from .services import SettingsService

logger = logging.getLogger(__name__)


class MaintenanceModeMiddleware:
    """
    Answer public API calls with 503 while ``maintenanceMode`` is on.

    Dashboard users (session or ``Authorization: Token ...``) keep full access
    so they can switch maintenance off again.
    """

    EXEMPT_PREFIXES: ClassVar[tuple[str, ...]] = ("/api/auth/", "/api/setup/", "/api/settings/")

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if not request.path.startswith("/api/") or request.path.startswith(self.EXEMPT_PREFIXES):
            return self.get_response(request)

        if not SettingsService.is_maintenance_mode() or self._is_dashboard_user(request):
            return self.get_response(request)

        logger.info("🚧 [Maintenance] Blocked %s %s", request.method, request.path)
        return JsonResponse(
            {"maintenance": True, "message": SettingsService.get_maintenance_message()},
            status=503,
        )

    @staticmethod
    def _is_dashboard_user(request: HttpRequest) -> bool:
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return True

        header = request.headers.get("Authorization", "")
        keyword, _sep, key = header.partition(" ")
        if keyword != "Token" or not key:
            return False
        return Token.objects.filter(key=key.strip(), user__is_active=True).exists()

"""
Setup gate middleware for the Municipal CMS Platform
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse

from .services import SetupService

logger = logging.getLogger(__name__)


class SetupRequiredMiddleware:
    """
    Answer API calls with 412 until the setup wizard has been completed.

    Only ``/api/setup/`` stays reachable so the frontend can run the wizard.
    """

    EXEMPT_PREFIXES: ClassVar[tuple[str, ...]] = ("/api/setup/",)

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if (
            not getattr(settings, "SETUP_GATE_ENABLED", True)
            or not request.path.startswith("/api/")
            or request.path.startswith(self.EXEMPT_PREFIXES)
        ):
            return self.get_response(request)

        if SetupService.is_completed():
            return self.get_response(request)

        logger.info("🧭 [Setup] Blocked %s %s until setup is completed", request.method, request.path)
        return JsonResponse(
            {"setupRequired": True, "message": "Setup has not been completed"},
            status=412,
        )

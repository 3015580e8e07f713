"""
Common middleware for the Municipal CMS Platform
Request tracing and security headers.
"""

import logging
import re
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.common.logging import clear_request_context, set_request_context
from apps.common.request_ip import get_safe_client_ip

logger = logging.getLogger(__name__)

# Incoming ids from the frontend proxy are accepted only in this shape
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9\-_.]{8,128}$")

# ===============================================================================
# REQUEST ID MIDDLEWARE
# ===============================================================================


class RequestIDMiddleware:
    """Add a request ID for tracing and expose it to the logging filters"""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = request.headers.get("X-Request-ID", "")
        request_id = incoming if _REQUEST_ID_PATTERN.match(incoming) else str(uuid.uuid4())
        request.META["REQUEST_ID"] = request_id

        set_request_context(request_id=request_id, ip_address=get_safe_client_ip(request))
        try:
            response = self.get_response(request)
        finally:
            clear_request_context()

        response["X-Request-ID"] = request_id
        return response


# ===============================================================================
# SECURITY MIDDLEWARE
# ===============================================================================


class SecurityHeadersMiddleware:
    """Add security headers to API and admin responses"""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)

        if not response.get("Content-Security-Policy"):
            csp = (
                "default-src 'self'; "
                "style-src 'self' 'unsafe-inline'; "
                "img-src 'self' data: https:; "
                "connect-src 'self'; "
                "object-src 'none'; "
                "base-uri 'self'; "
                "form-action 'self';"
            )
            response["Content-Security-Policy"] = csp

        response["X-Content-Type-Options"] = "nosniff"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response["Cross-Origin-Opener-Policy"] = "same-origin"

        return response

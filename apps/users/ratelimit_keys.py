"""
Rate limiting key functions for authentication and public form endpoints.

Authenticated users are tracked by user ID, anonymous visitors by IP address.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from apps.common.request_ip import get_safe_client_ip

if TYPE_CHECKING:
    from django.http import HttpRequest


def user_or_ip(group: str, request: HttpRequest) -> str:
    """
    Rate limiting key that uses user ID for authenticated users
    and secure IP address for anonymous users.

    Editors sharing one municipal office IP are not throttled together.
    """
    if request.user.is_authenticated:
        return f"user:{request.user.pk}"
    return f"ip:{get_safe_client_ip(request)}"

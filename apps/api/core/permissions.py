# ===============================================================================
# API PERMISSIONS CLASSES 🔐
# ===============================================================================

from typing import Any

from rest_framework import permissions
from rest_framework.request import Request


def _is_staff_member(request: Request) -> bool:
    user = request.user
    return bool(user and user.is_authenticated and user.is_active)


def _is_admin(request: Request) -> bool:
    return _is_staff_member(request) and bool(getattr(request.user, "is_admin_role", False))


class IsStaffMember(permissions.BasePermission):
    """Any active dashboard account (admin or author)"""

    def has_permission(self, request: Request, view: Any) -> bool:
        return _is_staff_member(request)


class IsAdminRole(permissions.BasePermission):
    """Administrators only: users, settings, newsletter"""

    message = "Administrator role required"

    def has_permission(self, request: Request, view: Any) -> bool:
        return _is_admin(request)


class IsStaffOrReadOnly(permissions.BasePermission):
    """Public reads, dashboard writes"""

    def has_permission(self, request: Request, view: Any) -> bool:
        return request.method in permissions.SAFE_METHODS or _is_staff_member(request)

"""
User Services - Municipal CMS Platform
Account management, role guards and token login for the dashboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from django.contrib.auth import authenticate as django_authenticate
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db.models import Count, QuerySet
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework.authtoken.models import Token

from apps.common.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH, RECENT_USERS_DAYS
from apps.common.security_decorators import atomic_with_retry, audit_service_call
from apps.common.types import Err, Ok, Result, ServiceError, conflict, forbidden, invalid

from .models import User

logger = logging.getLogger(__name__)

# ===============================================================================
# USER SERVICE PARAMETER OBJECTS
# ===============================================================================


@dataclass
class UserCreationRequest:
    """Parameter object for dashboard user creation"""

    email: str
    name: str
    password: str
    role: str = User.ROLE_AUTHOR
    is_active: bool = True


def _validate_password(password: str | None) -> Err[ServiceError] | None:
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return invalid(_("Password must be at least %(n)d characters") % {"n": PASSWORD_MIN_LENGTH}, "password")
    if len(password) > PASSWORD_MAX_LENGTH:
        return invalid(_("Password must be at most %(n)d characters") % {"n": PASSWORD_MAX_LENGTH}, "password")
    return None


def _validate_email(email: str | None) -> Err[ServiceError] | None:
    try:
        validate_email(email or "")
    except ValidationError:
        return invalid(_("Enter a valid email address"), "email")
    return None


# ===============================================================================
# USER SERVICE
# ===============================================================================


class UserService:
    """👤 Dashboard account management"""

    EDITABLE_FIELDS = ("email", "name", "role", "is_active")

    @classmethod
    @atomic_with_retry()
    @audit_service_call("user_create")
    def create_user(cls, request: UserCreationRequest) -> Result[User, ServiceError]:
        if error := _validate_email(request.email):
            return error
        if error := _validate_password(request.password):
            return error
        if request.role not in dict(User.ROLE_CHOICES):
            return invalid(_("Unknown role"), "role")
        if User.objects.filter(email__iexact=request.email.strip()).exists():
            return conflict(_("A user with this email already exists"), "email")

        user = User.objects.create_user(
            email=request.email.strip(),
            password=request.password,
            name=request.name.strip(),
            role=request.role,
            is_active=request.is_active,
        )
        logger.info(f"✅ [Users] Created {user.role} account {user.email}")
        return Ok(user)

    @classmethod
    @atomic_with_retry()
    def update_user(cls, user: User, **fields: Any) -> Result[User, ServiceError]:
        """Update profile fields; ``password`` is re-hashed when present"""
        password = fields.pop("password", None)
        if password:
            if error := _validate_password(password):
                return error
            user.set_password(password)

        email = fields.get("email")
        if email is not None:
            if error := _validate_email(email):
                return error
            if User.objects.filter(email__iexact=email.strip()).exclude(pk=user.pk).exists():
                return conflict(_("A user with this email already exists"), "email")
            fields["email"] = email.strip()

        if "role" in fields and fields["role"] not in dict(User.ROLE_CHOICES):
            return invalid(_("Unknown role"), "role")

        if user.is_admin_role and fields.get("role", User.ROLE_ADMIN) != User.ROLE_ADMIN and cls._is_last_admin(user):
            return forbidden(_("The last administrator cannot lose the admin role"))

        for field in cls.EDITABLE_FIELDS:
            if field in fields:
                setattr(user, field, fields[field])
        user.save()

        logger.info(f"✅ [Users] Updated account {user.email}")
        return Ok(user)

    @staticmethod
    def _is_last_admin(user: User) -> bool:
        return (
            user.is_admin_role
            and user.is_active
            and not User.objects.filter(role=User.ROLE_ADMIN, is_active=True).exclude(pk=user.pk).exists()
        )

    @classmethod
    def _guard_deactivation(cls, user: User, acting_user: User | None) -> Err[ServiceError] | None:
        if acting_user is not None and acting_user.pk == user.pk:
            return forbidden(_("You cannot deactivate or delete your own account"))
        if cls._is_last_admin(user):
            return forbidden(_("The last active administrator cannot be deactivated"))
        return None

    @classmethod
    @audit_service_call("user_status")
    def set_status(cls, user: User, is_active: bool, acting_user: User | None = None) -> Result[User, ServiceError]:
        if not is_active and (error := cls._guard_deactivation(user, acting_user)):
            return error

        user.is_active = is_active
        user.save(update_fields=["is_active", "updated_at"])
        if not is_active:
            Token.objects.filter(user=user).delete()

        logger.info(f"🔁 [Users] {user.email} is now {'active' if is_active else 'inactive'}")
        return Ok(user)

    @classmethod
    def toggle_status(cls, user: User, acting_user: User | None = None) -> Result[User, ServiceError]:
        return cls.set_status(user, not user.is_active, acting_user=acting_user)

    @classmethod
    @audit_service_call("user_delete")
    def delete_user(cls, user: User, acting_user: User | None = None) -> Result[int, ServiceError]:
        if error := cls._guard_deactivation(user, acting_user):
            return error

        user_id = user.pk
        email = user.email
        user.delete()
        logger.warning(f"🗑️ [Users] Deleted account {email}")
        return Ok(user_id)

    @staticmethod
    def get_statistics() -> dict[str, int]:
        since = timezone.now() - timedelta(days=RECENT_USERS_DAYS)
        total = User.objects.count()
        active = User.objects.filter(is_active=True).count()
        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "admins": User.objects.filter(role=User.ROLE_ADMIN).count(),
            "authors": User.objects.filter(role=User.ROLE_AUTHOR).count(),
            "recentlyCreated": User.objects.filter(created_at__gte=since).count(),
        }

    @staticmethod
    def list_with_stats() -> QuerySet[User]:
        """Users annotated with ``posts_count``"""
        return User.objects.annotate(posts_count=Count("posts", distinct=True)).order_by("-created_at")

    # ===============================================================================
    # AUTHENTICATION
    # ===============================================================================

    @staticmethod
    def authenticate(email: str, password: str) -> Result[tuple[User, str], ServiceError]:
        """Check credentials and return the user with their API token"""
        if not email or not password:
            return invalid(_("Email and password are required"))

        user = django_authenticate(username=email.strip().lower(), password=password)
        if user is None:
            logger.warning(f"🚨 [Auth] Failed login for {email}")
            return Err(ServiceError(_("Invalid email or password"), code="unauthorized"))

        token, _created = Token.objects.get_or_create(user=user)
        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        logger.info(f"🔐 [Auth] {user.email} logged in")
        return Ok((user, token.key))

    @staticmethod
    def logout(user: User) -> None:
        Token.objects.filter(user=user).delete()
        logger.info(f"🔐 [Auth] {user.email} logged out")

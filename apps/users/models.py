"""
User models for the Municipal CMS Platform
Email-based authentication with two editorial roles.
"""

from __future__ import annotations

from typing import Any, ClassVar

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication"""

    use_in_migrations = True

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a regular user with email and password"""
        if not email:
            raise ValueError("The Email field must be set")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a superuser; superusers always carry the admin role"""
        extra_fields.setdefault("is_superuser", True)
        extra_fields["role"] = User.ROLE_ADMIN

        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Dashboard user.

    ``admin`` manages users and site settings, ``author`` manages content.
    """

    ROLE_ADMIN = "admin"
    ROLE_AUTHOR = "author"

    ROLE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (ROLE_ADMIN, _("Administrator")),
        (ROLE_AUTHOR, _("Author")),
    )

    email = models.EmailField(_("email address"), unique=True)
    name = models.CharField(_("name"), max_length=100)
    role = models.CharField(_("role"), max_length=20, choices=ROLE_CHOICES, default=ROLE_AUTHOR)

    is_active = models.BooleanField(_("active"), default=True)
    # Django admin access follows the admin role
    is_staff = models.BooleanField(_("staff status"), default=False, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = ["name"]

    class Meta:
        db_table = "users"
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering: ClassVar[tuple[str, ...]] = ("-created_at",)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["role"]),
            models.Index(fields=["is_active", "role"]),
        )

    def __str__(self) -> str:
        return f"👤 {self.name or self.email} ({self.email})"

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.email = (self.email or "").lower()
        self.is_staff = self.role == self.ROLE_ADMIN or self.is_superuser
        if kwargs.get("update_fields") is not None and "role" in kwargs["update_fields"]:
            kwargs["update_fields"] = {*kwargs["update_fields"], "is_staff"}
        super().save(*args, **kwargs)

    def get_full_name(self) -> str:
        return self.name or self.email

    def get_short_name(self) -> str:
        return self.name.split(" ")[0] if self.name else self.email

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.ROLE_ADMIN

    @property
    def is_author_role(self) -> bool:
        return self.role == self.ROLE_AUTHOR

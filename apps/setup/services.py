"""
Setup Services - Municipal CMS Platform
First-run wizard: administrator account, site identity and homepage seeding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework.authtoken.models import Token

from apps.common.constants import (
    ADMIN_NAME_MAX_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    SITE_NAME_MAX_LENGTH,
    SITE_TAGLINE_MAX_LENGTH,
)
from apps.common.security_decorators import audit_service_call, monitor_performance
from apps.common.types import Err, Ok, Result, ServiceError, conflict, invalid
from apps.content.page_builder import SectionService
from apps.content.services import PageCreationRequest, PageService
from apps.content.section_configs import SECTION_TYPES
from apps.settings.services import SettingsService
from apps.users.models import User
from apps.users.services import UserCreationRequest, UserService

from .institution_templates import (
    DEFAULT_INSTITUTION_TYPE,
    InstitutionTemplate,
    get_all_institution_types,
    get_institution_template,
)
from .models import SetupState

logger = logging.getLogger(__name__)

HOMEPAGE_TITLE = "Почетна"


@dataclass
class SetupCompletionRequest:
    """Parameter object for the setup wizard submission"""

    site_name: str
    admin_name: str
    admin_email: str
    admin_password: str
    contact_email: str
    site_tagline: str = ""
    institution_type: str = DEFAULT_INSTITUTION_TYPE


@dataclass
class SetupCompletion:
    user: User
    token: str
    homepage_id: int | None
    sections_created: int


class SetupService:
    """🧭 First-run setup state and completion"""

    CACHE_KEY: ClassVar[str] = "cms_setup:completed"
    CACHE_TIMEOUT: ClassVar[int] = 300

    # ===============================================================================
    # STATE
    # ===============================================================================

    @classmethod
    def is_completed(cls) -> bool:
        """Cached completion flag used by the setup gate on every API request"""
        completed = cache.get(cls.CACHE_KEY)
        if completed is None:
            completed = SetupState.objects.filter(pk=SetupState.SINGLETON_ID, is_completed=True).exists()
            cache.set(cls.CACHE_KEY, completed, cls.CACHE_TIMEOUT)
        return bool(completed)

    @classmethod
    def clear_cache(cls) -> None:
        cache.delete(cls.CACHE_KEY)

    @staticmethod
    def has_admin() -> bool:
        return User.objects.filter(role=User.ROLE_ADMIN, is_active=True).exists()

    @classmethod
    def status(cls) -> dict[str, Any]:
        state = SetupState.objects.filter(pk=SetupState.SINGLETON_ID).first()
        completed = bool(state and state.is_completed)
        return {
            "isCompleted": completed,
            "isSetupCompleted": completed,
            "completedAt": state.completed_at if state else None,
            "hasAdmin": cls.has_admin(),
            "institutionType": (state.institution_type if state else "") or None,
        }

    @classmethod
    def check_admin(cls) -> dict[str, bool]:
        has_admin = cls.has_admin()
        return {"hasAdmin": has_admin, "exists": has_admin}

    @staticmethod
    def templates() -> list[dict[str, str]]:
        return get_all_institution_types()

    # ===============================================================================
    # COMPLETION
    # ===============================================================================

    @staticmethod
    def validate(request: SetupCompletionRequest) -> Err[ServiceError] | None:
        if not (request.site_name or "").strip():
            return invalid(_("Site name is required"), "siteName")
        if len(request.site_name.strip()) > SITE_NAME_MAX_LENGTH:
            return invalid(_("Site name is too long"), "siteName")
        if len((request.site_tagline or "").strip()) > SITE_TAGLINE_MAX_LENGTH:
            return invalid(_("Site tagline is too long"), "siteTagline")
        if not (request.admin_name or "").strip():
            return invalid(_("Administrator name is required"), "adminName")
        if len(request.admin_name.strip()) > ADMIN_NAME_MAX_LENGTH:
            return invalid(_("Administrator name is too long"), "adminName")

        for field_name, value in (("adminEmail", request.admin_email), ("contactEmail", request.contact_email)):
            try:
                validate_email((value or "").strip())
            except ValidationError:
                return invalid(_("Enter a valid email address"), field_name)

        password = request.admin_password or ""
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            return invalid(
                _("Password must be between %(min)d and %(max)d characters")
                % {"min": PASSWORD_MIN_LENGTH, "max": PASSWORD_MAX_LENGTH},
                "adminPassword",
            )

        if get_institution_template(request.institution_type) is None:
            return invalid(_("Unknown institution type"), "institutionType")
        return None

    @staticmethod
    def _seed_settings(request: SetupCompletionRequest, template: InstitutionTemplate) -> Result[int, Any]:
        SettingsService.ensure_defaults()
        return SettingsService.bulk_update(
            [
                {"key": "siteName", "value": request.site_name.strip()},
                {"key": "siteTagline", "value": (request.site_tagline or "").strip()},
                {"key": "contactEmail", "value": request.contact_email.strip()},
                {"key": "institutionType", "value": template.type},
                {"key": "primaryColor", "value": template.primary_color},
                {"key": "secondaryColor", "value": template.secondary_color},
                {"key": "fontFamily", "value": template.font_family},
            ]
        ).map(len)

    @staticmethod
    def _seed_homepage(template: InstitutionTemplate, author: User) -> Result[tuple[int, int], ServiceError]:
        restricts = set(template.allowed_section_types) != set(SECTION_TYPES)
        created = PageService.create(
            PageCreationRequest(
                title=HOMEPAGE_TITLE,
                status="published",
                use_page_builder=bool(template.predefined_sections),
                is_homepage=True,
                allowed_section_types=template.homepage_section_types if restricts else [],
            ),
            author=author,
        )
        if created.is_err():
            return created
        page = created.unwrap()
        sections = SectionService.create_predefined(
            page, [section.as_dict() for section in template.predefined_sections]
        )
        return Ok((page.pk, len(sections)))

    @classmethod
    @monitor_performance(max_duration_seconds=10.0, alert_threshold=3.0)
    @audit_service_call("setup_complete")
    def complete(cls, request: SetupCompletionRequest) -> Result[SetupCompletion, ServiceError]:
        """
        🧭 Run the wizard in one transaction.

        Creates the administrator, seeds settings from the institution template,
        creates the published homepage with the template's sections and marks setup
        completed. Any failure rolls everything back.
        """
        if error := cls.validate(request):
            return error
        template = get_institution_template(request.institution_type)

        with transaction.atomic():
            state, _created = SetupState.objects.select_for_update().get_or_create(pk=SetupState.SINGLETON_ID)
            if state.is_completed:
                return conflict(_("Setup has already been completed"))

            user_result = UserService.create_user(
                UserCreationRequest(
                    email=request.admin_email.strip().lower(),
                    name=request.admin_name.strip(),
                    password=request.admin_password,
                    role=User.ROLE_ADMIN,
                )
            )
            if user_result.is_err():
                transaction.set_rollback(True)
                return user_result
            user = user_result.unwrap()

            seeded = cls._seed_settings(request, template)
            if seeded.is_err():
                transaction.set_rollback(True)
                errors = seeded.unwrap_err()
                logger.error(f"🔥 [Setup] Settings seeding failed: {errors}")
                return invalid(
                    _("Settings could not be saved"),
                    details={"errors": [f"{e.key}: {e.message}" for e in errors]},
                )

            homepage = cls._seed_homepage(template, user)
            if homepage.is_err():
                transaction.set_rollback(True)
                return homepage
            homepage_id, sections_created = homepage.unwrap()

            state.is_completed = True
            state.completed_at = timezone.now()
            state.institution_type = template.type
            state.save()

            token, _token_created = Token.objects.get_or_create(user=user)

        cls.clear_cache()
        SettingsService.clear_all_cache()
        logger.info(
            f"🎉 [Setup] Completed for {request.site_name!r} ({template.type}); "
            f"admin {user.email}, {sections_created} homepage sections"
        )
        return Ok(
            SetupCompletion(user=user, token=token.key, homepage_id=homepage_id, sections_created=sections_created)
        )

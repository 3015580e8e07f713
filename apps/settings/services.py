"""
Site Settings service layer for the Municipal CMS Platform
Typed key/value configuration with caching, validation and import/export.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from django.core.cache import cache
from django.db import transaction
from django.db.models import QuerySet
from django.utils.translation import gettext as _

from apps.common.security_decorators import atomic_with_retry, audit_service_call, monitor_performance
from apps.common.types import Err, Ok, Result, ServiceError, invalid, not_found
from apps.common.utils import snake_to_camel

from .encryption import encrypt_value
from .models import BOOLEAN_VALUES, SiteSetting, parse_value

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_MISSING = object()


@dataclass(frozen=True)
class SettingDefinition:
    """📝 Registry entry for a known setting"""

    key: str
    default: str
    type: str = SiteSetting.TYPE_TEXT
    category: str = "general"
    label: str = ""
    is_public: bool = True
    is_sensitive: bool = False
    options: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class SettingValidationError:
    """🚨 Setting validation error details"""

    key: str
    message: str
    code: str = "validation_error"


def _definitions(*items: SettingDefinition) -> dict[str, SettingDefinition]:
    return {item.key: item for item in items}


class SettingsService:
    """⚙️ Site settings management with caching and validation"""

    CACHE_PREFIX: ClassVar[str] = "cms_setting"
    CACHE_TIMEOUT: ClassVar[int] = 3600
    CACHE_VERSION: ClassVar[int] = 1

    DEFAULT_SETTINGS: ClassVar[dict[str, SettingDefinition]] = _definitions(
        # General
        SettingDefinition("siteName", "", label="Назив сајта"),
        SettingDefinition("siteTagline", "", label="Слоган"),
        SettingDefinition("siteDescription", "", label="Опис сајта"),
        SettingDefinition("siteLogo", "", SiteSetting.TYPE_FILE, label="Лого"),
        SettingDefinition(
            "institutionType",
            "municipality",
            SiteSetting.TYPE_SELECT,
            label="Тип институције",
            options=("museum", "municipality", "school", "cultural_center", "hospital", "library"),
        ),
        SettingDefinition("postsPerPage", "10", SiteSetting.TYPE_NUMBER, label="Објава по страни"),
        SettingDefinition("allowRegistration", "false", SiteSetting.TYPE_BOOLEAN, label="Дозволи регистрацију"),
        # Contact
        SettingDefinition("contactEmail", "", category="contact", label="Е-пошта"),
        SettingDefinition("contactPhone", "", category="contact", label="Телефон"),
        SettingDefinition("contactAddress", "", category="contact", label="Адреса"),
        SettingDefinition("workingHours", "", category="contact", label="Радно време"),
        # Social
        SettingDefinition("facebookUrl", "", category="social", label="Facebook"),
        SettingDefinition("instagramUrl", "", category="social", label="Instagram"),
        SettingDefinition("twitterUrl", "", category="social", label="Twitter"),
        SettingDefinition("youtubeUrl", "", category="social", label="YouTube"),
        SettingDefinition("linkedinUrl", "", category="social", label="LinkedIn"),
        # SEO
        SettingDefinition("metaTitle", "", category="seo", label="Meta наслов"),
        SettingDefinition("metaDescription", "", category="seo", label="Meta опис"),
        SettingDefinition("metaKeywords", "", category="seo", label="Кључне речи"),
        # Email
        SettingDefinition("smtpHost", "", category="email", label="SMTP сервер", is_public=False),
        SettingDefinition("smtpPort", "587", SiteSetting.TYPE_NUMBER, "email", "SMTP порт", is_public=False),
        SettingDefinition("smtpUser", "", category="email", label="SMTP корисник", is_public=False),
        SettingDefinition(
            "smtpPassword", "", category="email", label="SMTP лозинка", is_public=False, is_sensitive=True
        ),
        SettingDefinition("smtpFrom", "", category="email", label="Пошиљалац", is_public=False),
        # Appearance
        SettingDefinition("primaryColor", "#1E40AF", SiteSetting.TYPE_COLOR, "appearance", "Примарна боја"),
        SettingDefinition("secondaryColor", "#3B82F6", SiteSetting.TYPE_COLOR, "appearance", "Секундарна боја"),
        SettingDefinition("fontFamily", "Inter", category="appearance", label="Фонт"),
        # Advanced
        SettingDefinition("maintenanceMode", "false", SiteSetting.TYPE_BOOLEAN, "advanced", "Режим одржавања"),
        SettingDefinition(
            "maintenanceMessage",
            "Сајт је тренутно у режиму одржавања.",
            category="advanced",
            label="Порука одржавања",
        ),
        SettingDefinition("customCss", "", category="advanced", label="Прилагођени CSS"),
    )

    # ===============================================================================
    # CACHE HELPERS
    # ===============================================================================

    @classmethod
    def _get_cache_key(cls, key: str) -> str:
        return f"{cls.CACHE_PREFIX}:{key}"

    @classmethod
    def clear_cache(cls, key: str) -> None:
        cache.delete(cls._get_cache_key(key), version=cls.CACHE_VERSION)
        logger.debug("🧹 [Settings] Cleared cache for key: %s", key)

    @classmethod
    def clear_all_cache(cls) -> None:
        keys = set(SiteSetting.objects.values_list("key", flat=True)) | set(cls.DEFAULT_SETTINGS)
        cache.delete_many([cls._get_cache_key(key) for key in keys], version=cls.CACHE_VERSION)
        logger.info("🧹 [Settings] Cleared %d cached settings", len(keys))

    # ===============================================================================
    # READS
    # ===============================================================================

    @classmethod
    def ensure_defaults(cls) -> int:
        """Create rows for registry settings that do not exist yet; returns the number created"""
        existing = set(SiteSetting.objects.values_list("key", flat=True))
        missing = [cls._new_from_definition(d) for key, d in cls.DEFAULT_SETTINGS.items() if key not in existing]
        if missing:
            SiteSetting.objects.bulk_create(missing, ignore_conflicts=True)
            logger.info("✅ [Settings] Seeded %d default settings", len(missing))
        return len(missing)

    @classmethod
    def _new_from_definition(cls, definition: SettingDefinition) -> SiteSetting:
        return SiteSetting(
            key=definition.key,
            value=definition.default,
            type=definition.type,
            category=definition.category,
            label=definition.label,
            is_public=definition.is_public,
            is_sensitive=definition.is_sensitive,
            options=list(definition.options),
            sort_order=list(cls.DEFAULT_SETTINGS).index(definition.key),
        )

    @classmethod
    def get_all(cls, public_only: bool = False) -> QuerySet[SiteSetting]:
        cls.ensure_defaults()
        queryset = SiteSetting.objects.all()
        if public_only:
            queryset = queryset.filter(is_public=True, is_sensitive=False)
        return queryset

    @classmethod
    def get_by_category(cls, category: str) -> Result[QuerySet[SiteSetting], ServiceError]:
        if category not in dict(SiteSetting.CATEGORY_CHOICES):
            return invalid(_("Unknown settings category: %(c)s") % {"c": category}, "category")
        return Ok(cls.get_all().filter(category=category))

    @classmethod
    def get(cls, key: str) -> Result[SiteSetting, ServiceError]:
        setting = SiteSetting.objects.filter(key=key).first()
        if setting is None:
            definition = cls.DEFAULT_SETTINGS.get(key)
            if definition is None:
                return not_found(_("Setting not found: %(key)s") % {"key": key})
            setting = cls._new_from_definition(definition)
            setting.save()
        return Ok(setting)

    @classmethod
    @monitor_performance()
    def get_value(cls, key: str, default: Any = None) -> Any:
        """🔍 Typed setting value with caching; registry default when the row is missing"""
        cache_key = cls._get_cache_key(key)
        cached = cache.get(cache_key, _MISSING, version=cls.CACHE_VERSION)
        if cached is not _MISSING:
            return cached

        setting = SiteSetting.objects.filter(key=key).first()
        if setting is not None:
            value = setting.get_typed_value()
            # Sensitive values never go through the cache
            if not setting.is_sensitive:
                cache.set(cache_key, value, timeout=cls.CACHE_TIMEOUT, version=cls.CACHE_VERSION)
            return value

        definition = cls.DEFAULT_SETTINGS.get(key)
        if definition is None:
            return default
        return parse_value(definition.default, definition.type)

    @classmethod
    def is_maintenance_mode(cls) -> bool:
        return bool(cls.get_value("maintenanceMode", False))

    @classmethod
    def get_maintenance_message(cls) -> str:
        return str(cls.get_value("maintenanceMessage", "") or "")

    @classmethod
    def get_structured(cls, public_only: bool = False) -> dict[str, dict[str, Any]]:
        """Nested ``{category: {camelKey: typedValue}}`` view of all settings"""
        structured: dict[str, dict[str, Any]] = {category: {} for category, _label in SiteSetting.CATEGORY_CHOICES}
        for setting in cls.get_all(public_only=public_only):
            if setting.is_sensitive:
                continue
            structured.setdefault(setting.category, {})[snake_to_camel(setting.key)] = setting.get_typed_value()
        return structured

    @classmethod
    def export(cls) -> dict[str, str]:
        """Flat ``{key: raw value}`` mapping; sensitive settings are left out"""
        return {setting.key: setting.value for setting in cls.get_all() if not setting.is_sensitive}

    # ===============================================================================
    # VALIDATION
    # ===============================================================================

    @staticmethod
    def normalize_value(value: Any) -> str:
        """Coerce JSON-decoded request values to the stored text form"""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, dict | list):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    @staticmethod
    def validate_value(setting: SiteSetting, value: str) -> str | None:
        """Return an error message when ``value`` does not fit the setting type"""
        if setting.type == SiteSetting.TYPE_NUMBER:
            try:
                number = float(value)
            except ValueError:
                return _("Value must be a number")
            if not math.isfinite(number):
                return _("Value must be a finite number")
        elif setting.type == SiteSetting.TYPE_BOOLEAN:
            if value.strip().lower() not in BOOLEAN_VALUES:
                return _("Value must be true or false")
        elif setting.type == SiteSetting.TYPE_JSON:
            try:
                json.loads(value)
            except json.JSONDecodeError:
                return _("Value must be valid JSON")
        elif setting.type == SiteSetting.TYPE_COLOR:
            if not _COLOR_PATTERN.match(value):
                return _("Value must be a hex color (#RGB or #RRGGBB)")
        elif setting.type == SiteSetting.TYPE_SELECT and setting.options and value not in setting.options:
            return _("Value must be one of: %(options)s") % {"options": ", ".join(setting.options)}
        return None

    # ===============================================================================
    # WRITES
    # ===============================================================================

    @classmethod
    def _apply(cls, setting: SiteSetting, value: str) -> SiteSetting:
        if setting.type == SiteSetting.TYPE_BOOLEAN:
            value = "true" if value.strip().lower() in {"true", "1"} else "false"
        setting.value = encrypt_value(value) if setting.is_sensitive else value
        setting.save()
        cls.clear_cache(setting.key)
        return setting

    @classmethod
    @atomic_with_retry()
    @audit_service_call("setting_update")
    def update(cls, key: str, value: Any, user: Any = None) -> Result[SiteSetting, ServiceError]:
        """📝 Update one setting; unknown keys outside the registry are rejected"""
        found = cls.get(key)
        if found.is_err():
            return found
        setting = found.unwrap()

        text = cls.normalize_value(value)
        if message := cls.validate_value(setting, text):
            return invalid(message, key)

        cls._apply(setting, text)
        logger.info(
            "✅ [Settings] Updated %s = %s by %s",
            key,
            setting.get_display_value(),
            getattr(user, "email", None) or "system",
        )
        return Ok(setting)

    @classmethod
    @monitor_performance()
    def bulk_update(
        cls, items: list[dict[str, Any]], user: Any = None
    ) -> Result[list[SiteSetting], list[SettingValidationError]]:
        """📦 All-or-nothing update of ``[{key, value}, ...]``"""
        errors: list[SettingValidationError] = []
        staged: list[tuple[SiteSetting, str]] = []

        for item in items:
            key = str(item.get("key", ""))
            found = cls.get(key)
            if found.is_err():
                errors.append(SettingValidationError(key=key, message=found.error.message, code="not_found"))
                continue
            setting = found.unwrap()
            text = cls.normalize_value(item.get("value"))
            if message := cls.validate_value(setting, text):
                errors.append(SettingValidationError(key=key, message=message))
                continue
            staged.append((setting, text))

        if errors:
            logger.warning("⚠️ [Settings] Bulk update rejected: %d invalid values", len(errors))
            return Err(errors)

        with transaction.atomic():
            updated = [cls._apply(setting, text) for setting, text in staged]

        logger.info(
            "✅ [Settings] Bulk updated %d settings by %s",
            len(updated),
            getattr(user, "email", None) or "system",
        )
        return Ok(updated)

    @classmethod
    @atomic_with_retry()
    def reset_category(cls, category: str | None = None) -> Result[list[SiteSetting], ServiceError]:
        """🔄 Restore registry defaults for one category (all categories when None)"""
        if category is not None and category not in dict(SiteSetting.CATEGORY_CHOICES):
            return invalid(_("Unknown settings category: %(c)s") % {"c": category}, "category")

        reset: list[SiteSetting] = []
        for definition in cls.DEFAULT_SETTINGS.values():
            if category is not None and definition.category != category:
                continue
            setting = cls.get(definition.key).unwrap()
            reset.append(cls._apply(setting, definition.default))

        logger.info("🔄 [Settings] Reset %d settings in %s", len(reset), category or "all categories")
        return Ok(reset)

    @classmethod
    def import_settings(cls, mapping: dict[str, Any], user: Any = None) -> Result[int, list[SettingValidationError]]:
        """📥 Import a ``{key: value}`` mapping produced by export()"""
        if not isinstance(mapping, dict):
            return Err([SettingValidationError(key="", message=_("Import data must be an object"))])
        return cls.bulk_update([{"key": k, "value": v} for k, v in mapping.items()], user=user).map(len)

    @classmethod
    def upload_file(cls, key: str, file: UploadedFile, user: Any = None) -> Result[SiteSetting, ServiceError]:
        """📤 Store a file through the media library and point the setting at it"""
        from apps.media.services import MediaService, MediaUploadRequest  # noqa: PLC0415

        found = cls.get(key)
        if found.is_err():
            return found
        setting = found.unwrap()
        if setting.type != SiteSetting.TYPE_FILE:
            return invalid(_("Setting %(key)s does not accept files") % {"key": key}, key)

        uploaded = MediaService.upload(file, MediaUploadRequest(alt=setting.label or key, is_public=True), user=user)
        if uploaded.is_err():
            return uploaded

        cls._apply(setting, uploaded.unwrap().url)
        logger.info("📤 [Settings] %s now points to %s", key, setting.value)
        return Ok(setting)

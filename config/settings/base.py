"""
Django settings for the Municipal CMS Platform - Base Configuration.
"""

import os
from pathlib import Path
from typing import Any

# ===============================================================================
# CORE DJANGO SETTINGS
# ===============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Application definition
DJANGO_APPS: list[str] = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

THIRD_PARTY_APPS: list[str] = [
    "rest_framework",
    "rest_framework.authtoken",  # 🔐 Token authentication for the dashboard and frontend
    "django_filters",
    "django_extensions",
    "ipware",
    "django_q",  # Async task processing (relof index recalculation)
]

LOCAL_APPS: list[str] = [
    "apps.common",
    "apps.users",
    "apps.settings",  # ⚙️ Site configuration key/value store
    "apps.content",  # 📰 Posts, pages, categories, page builder
    "apps.media",  # 🖼️ Media library
    "apps.galleries",
    "apps.public_services",  # 🏛️ Citizen services catalog
    "apps.organization",  # 🏢 Organizational structure & directors
    "apps.mailer",
    "apps.setup",  # 🧙 First-run setup wizard
    "apps.relof",  # 📊 Transparency index
    "apps.activity",
    "apps.api",  # 🚀 Centralized API endpoints
    "apps.api_client",  # 🔗 Python client for the CMS API
]

INSTALLED_APPS: list[str] = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE: list[str] = [
    "apps.common.middleware.RequestIDMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "apps.common.middleware.SecurityHeadersMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.locale.LocaleMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "apps.setup.middleware.SetupRequiredMiddleware",  # 412 until the setup wizard has run
    "apps.settings.middleware.MaintenanceModeMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [
            BASE_DIR / "templates",
        ],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

# ===============================================================================
# DATABASE CONFIGURATION
# ===============================================================================

DATABASES: dict[str, dict[str, Any]] = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "civic_cms"),
        "USER": os.environ.get("DB_USER", "civic_cms"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "development_password"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "CONN_MAX_AGE": 60,
        "OPTIONS": {
            "application_name": "civic_cms",
        },
    }
}

# ===============================================================================
# AUTHENTICATION & AUTHORIZATION
# ===============================================================================

AUTH_USER_MODEL = "users.User"

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
        "OPTIONS": {
            "min_length": 6,  # Setup wizard accepts 6..50 characters
        },
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
]

# Argon2 first, PBKDF2 kept for imported accounts
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.Argon2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher",
]

# ===============================================================================
# INTERNATIONALIZATION & LOCALIZATION
# ===============================================================================

LANGUAGE_CODE = "sr"  # Serbian (Cyrillic) default
TIME_ZONE = "Europe/Belgrade"
USE_I18N = True
USE_TZ = True

LANGUAGES = [
    ("sr", "Српски"),
    ("sr-latn", "Srpski (latinica)"),
    ("en", "English"),
]

LOCALE_PATHS = [
    BASE_DIR / "locale",
]

# ===============================================================================
# STATIC FILES & MEDIA
# ===============================================================================

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "uploads"

# ===============================================================================
# CACHE CONFIGURATION (Database-backed cache - no Redis needed) 💾
# ===============================================================================

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.db.DatabaseCache",
        "LOCATION": "django_cache_table",
        "KEY_PREFIX": "civic_cms",
        "OPTIONS": {
            "MAX_ENTRIES": 10000,
            "CULL_FREQUENCY": 3,
        },
        "TIMEOUT": 300,
        "VERSION": 1,
    }
}

# ===============================================================================
# SESSION & COOKIE SETTINGS
# ===============================================================================

SESSION_ENGINE = "django.contrib.sessions.backends.db"
SESSION_COOKIE_AGE = 86400  # 24 hours
SESSION_COOKIE_HTTPONLY = True

CSRF_COOKIE_HTTPONLY = True
CSRF_TRUSTED_ORIGINS: list[str] = [
    origin for origin in os.environ.get("CSRF_TRUSTED_ORIGINS", "").split(",") if origin
]

# ===============================================================================
# ADDITIONAL SECURITY SETTINGS
# ===============================================================================

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# File upload limits
FILE_UPLOAD_MAX_MEMORY_SIZE = 10485760  # 10MB
DATA_UPLOAD_MAX_MEMORY_SIZE = 52428800  # 50MB (multi-image gallery uploads)
FILE_UPLOAD_PERMISSIONS = 0o644

# ===============================================================================
# EMAIL CONFIGURATION 📧
# ===============================================================================

EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST = os.environ.get("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.environ.get("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.environ.get("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = True
EMAIL_TIMEOUT = int(os.environ.get("EMAIL_TIMEOUT", "30"))

DEFAULT_FROM_EMAIL = os.environ.get("DEFAULT_FROM_EMAIL", "CMS <noreply@localhost>")
SERVER_EMAIL = os.environ.get("SERVER_EMAIL", "server@localhost")

# ===============================================================================
# DJANGO REST FRAMEWORK
# ===============================================================================

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        # Token auth for the Next.js frontend and dashboard
        "rest_framework.authentication.TokenAuthentication",
        # Session auth for the browsable API
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_PAGINATION_CLASS": "apps.api.core.pagination.StandardResultsSetPagination",
    "PAGE_SIZE": 10,
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
    ],
    "DEFAULT_THROTTLE_CLASSES": [
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ],
    "DEFAULT_THROTTLE_RATES": {
        "anon": "300/hour",  # Public site visitors
        "user": "3000/hour",  # Dashboard editors
        "burst": "60/min",  # Search endpoints
        "auth": "5/min",  # Login & contact form
    },
}

# ===============================================================================
# DEFAULT AUTO FIELD
# ===============================================================================

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ===============================================================================
# SECURITY SETTINGS (Base - override in prod.py)
# ===============================================================================

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY")
if not SECRET_KEY:
    # Development fallback - never use this in production
    import warnings

    warnings.warn(
        "🚨 SECURITY WARNING: Using default SECRET_KEY. Set DJANGO_SECRET_KEY environment variable for production!",
        UserWarning,
        stacklevel=2,
    )
    SECRET_KEY = "django-insecure-dev-key-only-change-in-production-or-tests"  # noqa: S105


def validate_production_secret_key() -> None:
    """Validate SECRET_KEY meets production security requirements"""
    if SECRET_KEY and SECRET_KEY.startswith("django-insecure-"):
        raise ValueError(
            "🔥 CRITICAL SECURITY ERROR: Cannot use insecure SECRET_KEY in production! "
            "Generate a secure key: python -c 'from django.core.management.utils import get_random_secret_key; print(get_random_secret_key())'"
        )


# Fernet key for sensitive settings (SMTP password etc.)
# Generate with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'
SETTINGS_ENCRYPTION_KEY = os.environ.get("SETTINGS_ENCRYPTION_KEY")

# ===============================================================================
# SECURE IP DETECTION CONFIGURATION 🔒
# ===============================================================================

# Trust no proxy headers by default (safe for development)
IPWARE_TRUSTED_PROXY_LIST: list[str] = []

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# ===============================================================================
# RATE LIMITING CONFIGURATION 🔒
# ===============================================================================

RATELIMIT_KEY = "apps.users.ratelimit_keys.user_or_ip"
RATELIMIT_USE_CACHE = "default"
RATELIMIT_ENABLE = True

# ===============================================================================
# DJANGO-Q2 ASYNC TASK PROCESSING 🚀
# ===============================================================================

Q_CLUSTER_BASE = {
    "name": "civic-cms-cluster",
    "timeout": 300,
    "retry": 600,
    "save_limit": 500,
    "catch_up": False,
    "orm": "default",
    "bulk": 5,
    "queue_limit": 50,
}

Q_CLUSTER = {
    **Q_CLUSTER_BASE,
    "workers": 2,
    "recycle": 500,
    "sync": False,
}

# ===============================================================================
# CMS CONFIGURATION 📰
# ===============================================================================

# Answer API calls with 412 until the setup wizard has completed
SETUP_GATE_ENABLED = os.environ.get("SETUP_GATE_ENABLED", "true").lower() == "true"

# Public frontend base URL (used in newsletter unsubscribe links)
CMS_FRONTEND_URL = os.environ.get("CMS_FRONTEND_URL", "http://localhost:3000")

# Media library
CMS_MEDIA_MAX_UPLOAD_MB = float(os.environ.get("CMS_MEDIA_MAX_UPLOAD_MB", "25"))

# Bilingual search
CMS_SEARCH_MIN_QUERY_LENGTH = int(os.environ.get("CMS_SEARCH_MIN_QUERY_LENGTH", "3"))
CMS_SEARCH_POST_LIMIT = int(os.environ.get("CMS_SEARCH_POST_LIMIT", "5"))
CMS_SEARCH_PAGE_LIMIT = int(os.environ.get("CMS_SEARCH_PAGE_LIMIT", "3"))

# Public listings
CMS_HOMEPAGE_POSTS_LIMIT = int(os.environ.get("CMS_HOMEPAGE_POSTS_LIMIT", "6"))
CMS_PAGE_POSTS_LIMIT = int(os.environ.get("CMS_PAGE_POSTS_LIMIT", "6"))

# Python API client defaults (apps.api_client)
CMS_API_BASE_URL = os.environ.get("CMS_API_BASE_URL", "http://localhost:8000/api")
CMS_API_TIMEOUT = int(os.environ.get("CMS_API_TIMEOUT", "30"))

# ===============================================================================
# RELOF INDEX CONFIGURATION 📊
# ===============================================================================

RELOF_AUTO_RECALCULATE = os.environ.get("RELOF_AUTO_RECALCULATE", "true").lower() == "true"
RELOF_RECALCULATE_DEBOUNCE_SECONDS = int(os.environ.get("RELOF_RECALCULATE_DEBOUNCE_SECONDS", "60"))
RELOF_SCORE_DROP_ALERT = float(os.environ.get("RELOF_SCORE_DROP_ALERT", "5"))
RELOF_NOTIFICATION_RECIPIENTS: list[str] = [
    email for email in os.environ.get("RELOF_NOTIFICATION_RECIPIENTS", "").split(",") if email
]

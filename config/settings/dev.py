"""
Development settings for the Municipal CMS Platform
Fast iteration with debugging tools enabled.
"""

import logging
import os
import sys

from .base import *  # noqa: F403

# ===============================================================================
# DEVELOPMENT FLAGS
# ===============================================================================

DEBUG = True

# ===============================================================================
# DEVELOPMENT APPS & MIDDLEWARE
# ===============================================================================

INSTALLED_APPS += [
    "debug_toolbar",
]

MIDDLEWARE.insert(1, "debug_toolbar.middleware.DebugToolbarMiddleware")

# The Next.js dev server posts JSON without CSRF tokens
MIDDLEWARE = [mw for mw in MIDDLEWARE if "CsrfViewMiddleware" not in mw]

# ===============================================================================
# DATABASE FOR DEVELOPMENT (SQLite for speed)
# ===============================================================================

if os.environ.get("USE_POSTGRES") != "true":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": str(BASE_DIR / "db.sqlite3"),
        }
    }

# ===============================================================================
# DEBUG TOOLBAR CONFIGURATION
# ===============================================================================

INTERNAL_IPS = [
    "127.0.0.1",
    "localhost",
]

is_testing = (
    "test" in sys.argv
    or "pytest" in sys.modules
    or os.environ.get("PYTEST_CURRENT_TEST")
    or "TESTING" in os.environ
)

DEBUG_TOOLBAR_CONFIG = {
    "SHOW_TOOLBAR_CALLBACK": lambda request: DEBUG and not is_testing,
    "SHOW_COLLAPSED": True,
    "IS_RUNNING_TESTS": False,
}

if is_testing:
    INSTALLED_APPS = [app for app in INSTALLED_APPS if app != "debug_toolbar"]
    MIDDLEWARE = [mw for mw in MIDDLEWARE if "debug_toolbar" not in mw]
    RATELIMIT_ENABLE = False
    REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
else:
    RATELIMIT_ENABLE = os.environ.get("RATELIMIT_ENABLE", "true").lower() == "true"

if not RATELIMIT_ENABLE:
    REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []

# ===============================================================================
# EMAIL BACKEND (Console for development)
# ===============================================================================

EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
DEFAULT_FROM_EMAIL = "dev@localhost"

# ===============================================================================
# CACHE (In-memory cache for development)
# ===============================================================================

if os.environ.get("USE_DB_CACHE") != "true":
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "civic-cms-cache",
        }
    }

# ===============================================================================
# TASK QUEUE (Run relof recalculation inline unless a cluster is running)
# ===============================================================================

Q_CLUSTER = {
    **Q_CLUSTER_BASE,
    "workers": 1,
    "sync": os.environ.get("DJANGO_Q_SYNC", "true").lower() == "true",
}

# ===============================================================================
# LOGGING CONFIGURATION - Enhanced with Request ID Tracing
# ===============================================================================


class _ServiceNameFilter(logging.Filter):
    """Inject a fixed service tag into every log record (dev-only)."""

    def __init__(self, service_name: str = "CMS") -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, "service_name", self.service_name)  # noqa: B010
        return True


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "unified": {
            "()": "colorlog.ColoredFormatter",
            "format": "{asctime} {log_color}{levelname:<8}{reset} {service_name} {name:<40} {message} [{request_id}]",
            "datefmt": "%Y-%m-%d %H:%M:%S",
            "style": "{",
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
    },
    "filters": {
        "add_request_id": {
            "()": "apps.common.logging.RequestIDFilter",
        },
        "add_service_name": {
            "()": _ServiceNameFilter,
            "service_name": "CMS",
        },
        "redact_sensitive": {
            "()": "apps.common.logging.SensitiveDataFilter",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "unified",
            "filters": ["add_request_id", "add_service_name", "redact_sensitive"],
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "INFO",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps": {
            "handlers": ["console"],
            "level": "DEBUG",
            "propagate": False,
        },
    },
}

# ===============================================================================
# HOSTS & CORS (Relaxed for local development)
# ===============================================================================

ALLOWED_HOSTS = ["*"]
CSRF_TRUSTED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SESSION_COOKIE_SAMESITE = "Lax"
X_FRAME_OPTIONS = "SAMEORIGIN"

SECRET_KEY = "django-insecure-dev-key-change-for-production"

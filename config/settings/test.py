"""
Test settings for the Municipal CMS Platform
Fast, isolated testing environment.
"""

import os
import sys

from .base import *  # noqa: F403

# ===============================================================================
# TEST FLAGS
# ===============================================================================

DEBUG = False

MIDDLEWARE = [
    "apps.common.middleware.RequestIDMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "apps.setup.middleware.SetupRequiredMiddleware",
    "apps.settings.middleware.MaintenanceModeMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# ===============================================================================
# TEST DATABASE (In-memory for speed)
# ===============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "OPTIONS": {
            "timeout": 20,
        },
        "TEST": {
            "NAME": ":memory:",
            "SERIALIZE": False,
        },
    }
}

# ===============================================================================
# TEST CACHE
# ===============================================================================

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "test-cache",
    }
}

# ===============================================================================
# TEST EMAIL BACKEND
# ===============================================================================

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# ===============================================================================
# DISABLE MIGRATIONS FOR FASTER TESTS
# ===============================================================================


class DisableMigrations:
    def __contains__(self, item: str) -> bool:
        return True

    def __getitem__(self, item: str) -> None:
        return None


MIGRATION_MODULES = DisableMigrations()

# ===============================================================================
# PASSWORD HASHER (Fast for tests)
# ===============================================================================

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",  # Fast but insecure (test only)
]

# ===============================================================================
# LOGGING (Minimal for tests)
# ===============================================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "add_request_id": {
            "()": "apps.common.logging.RequestIDFilter",
        },
    },
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "CRITICAL",
    },
}

# ===============================================================================
# MEDIA (Temporary upload directory)
# ===============================================================================

MEDIA_ROOT = BASE_DIR / ".test-uploads"

# ===============================================================================
# LOCALIZATION
# ===============================================================================

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Europe/Belgrade"
USE_I18N = True
USE_TZ = True

# ===============================================================================
# SECURITY (Relaxed for tests)
# ===============================================================================

SECRET_KEY = "django-test-key-not-secure"
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]
SETTINGS_ENCRYPTION_KEY = "iuTrSBoKchmRt7RiySTHNuANNDmWe_xIqZWtMQaLMXs="

TESTING = True

RATELIMIT_ENABLE = False

# Disable DRF throttling in tests to prevent 429s from rapid API calls
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
# Views that set throttle_classes explicitly still throttle; keep their rates out of reach
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    "anon": "100000/hour",
    "user": "100000/hour",
    "burst": "100000/min",
    "auth": "100000/min",
}

# ===============================================================================
# TASK QUEUE (Synchronous for tests)
# ===============================================================================

Q_CLUSTER = {
    **Q_CLUSTER_BASE,
    "sync": True,
}

# Individual tests enable it with @override_settings
RELOF_AUTO_RECALCULATE = False

# Setup-required gate is exercised explicitly by the setup tests
SETUP_GATE_ENABLED = False

# Force single-process test execution (in-memory SQLite)
if "test" in sys.argv or ("pytest" in sys.argv[0] if sys.argv else False):
    os.environ.setdefault("DJANGO_TEST_PROCESSES", "1")

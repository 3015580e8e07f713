"""
Encryption utilities for sensitive site settings (SMTP password).
"""

import logging

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "enc:"


def _get_fernet() -> Fernet:
    key = getattr(settings, "SETTINGS_ENCRYPTION_KEY", None)
    if not key:
        raise ImproperlyConfigured(
            "SETTINGS_ENCRYPTION_KEY must be set to store sensitive settings. "
            "Generate one with: from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
        )
    return Fernet(key.encode() if isinstance(key, str) else key)


def encrypt_value(value: str) -> str:
    """Encrypt a setting value for database storage"""
    if not value:
        return ""
    return ENCRYPTED_PREFIX + _get_fernet().encrypt(value.encode("utf-8")).decode("ascii")


def decrypt_value(stored: str) -> str:
    """Decrypt a stored value; values stored before encryption was enabled pass through"""
    if not stored or not stored.startswith(ENCRYPTED_PREFIX):
        return stored
    try:
        return _get_fernet().decrypt(stored[len(ENCRYPTED_PREFIX) :].encode("ascii")).decode("utf-8")
    except InvalidToken:
        logger.error("🔥 [Settings] Failed to decrypt sensitive setting (key rotated?)")
        return ""

"""
Logging infrastructure for the Municipal CMS Platform.

- Thread-local request context (request id, user, ip) set by RequestIDMiddleware
- RequestIDFilter: injects the context into every log record
- SensitiveDataFilter: redacts credentials from log messages

Usage:
    logger = logging.getLogger(__name__)
    logger.info("📊 [Relof] Score recalculated: %s", score)
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, ClassVar

# Thread-local storage for request context
_request_context = threading.local()

_CONTEXT_FIELDS = ("request_id", "user_id", "user_email", "ip_address")

# =============================================================================
# REQUEST CONTEXT FUNCTIONS
# =============================================================================


def set_request_context(**kwargs: Any) -> None:
    """Set request context for the current thread"""
    for key, value in kwargs.items():
        setattr(_request_context, key, value)


def clear_request_context() -> None:
    """Clear request context for the current thread"""
    for attr in _CONTEXT_FIELDS:
        if hasattr(_request_context, attr):
            delattr(_request_context, attr)


# =============================================================================
# LOG FILTERS
# =============================================================================


class RequestIDFilter(logging.Filter):
    """
    Add request ID and context to log records.

    Formatters can reference %(request_id)s even for records emitted
    outside a request (management commands, django-q workers): those get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = getattr(_request_context, "request_id", None) or "-"  # type: ignore[attr-defined]
        if not hasattr(record, "user_id"):
            record.user_id = getattr(_request_context, "user_id", None)  # type: ignore[attr-defined]
        if not hasattr(record, "user_email"):
            record.user_email = getattr(_request_context, "user_email", None)  # type: ignore[attr-defined]
        if not hasattr(record, "ip_address"):
            record.ip_address = getattr(_request_context, "ip_address", None)  # type: ignore[attr-defined]
        return True


class SensitiveDataFilter(logging.Filter):
    """
    Redact values that follow sensitive words in log messages.

    ``"login password=hunter2"`` becomes ``"login password=[REDACTED]"``.
    """

    SENSITIVE_WORDS: ClassVar[list[str]] = [
        "password",
        "passwd",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "smtp_password",
    ]

    REDACTION_TEXT = "[REDACTED]"

    _pattern: ClassVar[re.Pattern[str]] = re.compile(
        r"(?P<key>"
        + "|".join(re.escape(word) for word in SENSITIVE_WORDS)
        + r")(?P<sep>\s*[:=]\s*)(?P<value>[^\s,;]+)",
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.redact(record.msg)
        return True

    @classmethod
    def redact(cls, message: str) -> str:
        return cls._pattern.sub(lambda m: f"{m.group('key')}{m.group('sep')}{cls.REDACTION_TEXT}", message)

"""
Service-layer decorators for the Municipal CMS Platform
Transactions with retry, audit trail and performance monitoring.
"""

import functools
import logging
import time
from collections.abc import Callable
from typing import Any

from django.db import DatabaseError, transaction
from django.utils import timezone

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("apps.activity.audit")

# ===============================================================================
# ATOMIC BUSINESS LOGIC DECORATORS
# ===============================================================================


def atomic_with_retry(max_retries: int = 3, delay: float = 0.1) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Atomic transaction with retry on database errors (lock contention, serialization)
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exception: DatabaseError | None = None

            for attempt in range(max_retries):
                try:
                    with transaction.atomic():
                        return func(*args, **kwargs)

                except DatabaseError as e:
                    last_exception = e
                    if attempt < max_retries - 1:
                        time.sleep(delay * (attempt + 1))
                        logger.warning(f"🔄 [Service] Retry {attempt + 1} for {func.__name__}: {e}")
                    else:
                        logger.error(f"🔥 [Service] All retries failed for {func.__name__}: {e}")

            if last_exception is not None:
                raise last_exception
            raise RuntimeError("All retry attempts failed but no exception was captured")

        return wrapper

    return decorator


# ===============================================================================
# AUDIT & MONITORING DECORATORS
# ===============================================================================


def _find_acting_user(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    for key in ("user", "acting_user", "uploaded_by", "author"):
        if kwargs.get(key) is not None:
            return kwargs[key]
    return None


def audit_service_call(
    event_type: str, extract_details: Callable[..., dict[str, Any]] | None = None
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Audit trail for service method calls.

    Emits ``<event_type>_success`` / ``<event_type>_failed`` records on the
    ``apps.activity.audit`` logger. A returned ``Err`` counts as a failure.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = timezone.now()
            user = _find_acting_user(args, kwargs)

            details: dict[str, Any] = {}
            if extract_details:
                try:
                    details = extract_details(*args, **kwargs)
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    logger.warning(f"⚠️ [Audit] Failed to extract audit details: {e}")

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                audit_logger.warning(
                    f"🚨 [Audit] {event_type}_failed",
                    extra={
                        "event": f"{event_type}_failed",
                        "method": func.__name__,
                        "duration_ms": (timezone.now() - start_time).total_seconds() * 1000,
                        "error": str(e)[:200],
                        "actor_id": getattr(user, "pk", None),
                        **details,
                    },
                )
                raise

            outcome = "failed" if getattr(result, "is_err", lambda: False)() else "success"
            audit_logger.info(
                f"📝 [Audit] {event_type}_{outcome}",
                extra={
                    "event": f"{event_type}_{outcome}",
                    "method": func.__name__,
                    "duration_ms": (timezone.now() - start_time).total_seconds() * 1000,
                    "actor_id": getattr(user, "pk", None),
                    **details,
                },
            )
            return result

        return wrapper

    return decorator


# ===============================================================================
# PERFORMANCE MONITORING DECORATORS
# ===============================================================================


def monitor_performance(
    max_duration_seconds: float = 5.0, alert_threshold: float = 2.0
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Monitor method performance and alert on slow operations
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                logger.error(f"🔥 [Performance] Failed operation {func.__name__} after {duration:.2f}s: {e}")
                raise

            duration = time.time() - start_time
            if duration > max_duration_seconds:
                logger.error(f"🐢 [Performance] Extremely slow operation {func.__name__}: {duration:.2f}s")
            elif duration > alert_threshold:
                logger.warning(f"⚠️ [Performance] Slow operation {func.__name__}: {duration:.2f}s")

            return result

        return wrapper

    return decorator

"""
Relof index background tasks.

Content changes queue a debounced recalculation through Django-Q2; a daily
schedule keeps the history populated on quiet sites.
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django_q.models import Schedule
from django_q.tasks import async_task, schedule

logger = logging.getLogger(__name__)

# Task configuration
TASK_TIME_LIMIT = 300  # 5 minutes
DEBOUNCE_CACHE_KEY = "relof:recalculation_pending"
DAILY_SCHEDULE_NAME = "relof-daily-recalculation"


def recalculate_score_task(reason: str = "scheduled") -> dict[str, Any]:
    """Recalculate the index and store a snapshot."""
    from .services import RelofIndexService  # noqa: PLC0415

    cache.delete(DEBOUNCE_CACHE_KEY)
    result = RelofIndexService.recalculate(reason)
    if result.is_err():
        logger.error(f"🔥 [Relof] Recalculation failed: {result.unwrap_err()}")
        return {"success": False, "error": str(result.unwrap_err())}

    new_score = result.unwrap()["newScore"]["totalScore"]
    logger.info(f"✅ [Relof] Background recalculation ({reason}) finished: {new_score}%")
    return {"success": True, "score": new_score}


def recalculate_score_async(reason: str = "manual") -> str:
    """Queue a recalculation task."""
    return async_task("apps.relof.tasks.recalculate_score_task", reason, timeout=TASK_TIME_LIMIT)


def schedule_recalculation(reason: str) -> bool:
    """
    Queue a recalculation after a content change.

    Changes within the debounce window collapse into one task, queued once the
    surrounding transaction commits. Returns True when a task was queued.
    """
    if not getattr(settings, "RELOF_AUTO_RECALCULATE", False):
        return False

    if not cache.add(DEBOUNCE_CACHE_KEY, reason, timeout=settings.RELOF_RECALCULATE_DEBOUNCE_SECONDS):
        logger.debug("⏭️ [Relof] Recalculation already pending, skipping %s", reason)
        return False

    transaction.on_commit(lambda: recalculate_score_async(reason))
    logger.info(f"⏱️ [Relof] Recalculation queued after {reason}")
    return True


# ===============================================================================
# SCHEDULED TASKS SETUP
# ===============================================================================


def setup_relof_scheduled_tasks() -> dict[str, str]:
    """Create the daily recalculation schedule when it does not exist yet."""
    if Schedule.objects.filter(name=DAILY_SCHEDULE_NAME).exists():
        return {"daily_recalculation": "already_exists"}

    schedule(
        "apps.relof.tasks.recalculate_score_task",
        "scheduled",
        schedule_type=Schedule.CRON,
        cron="0 3 * * *",  # 3 AM daily
        name=DAILY_SCHEDULE_NAME,
        cluster=settings.Q_CLUSTER.get("name"),
    )
    logger.info("📅 [Relof] Daily recalculation scheduled")
    return {"daily_recalculation": "created"}

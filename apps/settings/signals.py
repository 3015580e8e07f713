"""
Site Settings signals for the Municipal CMS Platform
Cache invalidation and activity feed entries.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService

from .models import SiteSetting
from .services import SettingsService

logger = logging.getLogger(__name__)


@receiver(post_save, sender=SiteSetting)
def handle_setting_saved(sender: Any, instance: SiteSetting, created: bool, **kwargs: Any) -> None:
    """🔄 Clear the cached value and record the change"""
    SettingsService.clear_cache(instance.key)
    if created:
        return

    ActivityService.record_update(
        "settings_updated",
        instance.label or instance.key,
        object_id=instance.key,
        metadata={"category": instance.category},
        url="/dashboard/settings",
    )
    logger.info("✅ [Settings Signal] Setting %s updated: %s", instance.key, instance.get_display_value())


@receiver(post_delete, sender=SiteSetting)
def handle_setting_deleted(sender: Any, instance: SiteSetting, **kwargs: Any) -> None:
    SettingsService.clear_cache(instance.key)
    logger.warning("🗑️ [Settings Signal] Setting %s deleted", instance.key)

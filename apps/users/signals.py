"""
User signals - activity feed entries for account changes
"""

import logging
from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService

from .models import User

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def record_user_saved(sender: type[User], instance: User, created: bool, **kwargs: Any) -> None:
    update_fields = kwargs.get("update_fields")
    # Login timestamps are not editorial activity
    if update_fields and set(update_fields) <= {"last_login"}:
        return

    ActivityService.record(
        "user",
        "created" if created else "updated",
        instance.name or instance.email,
        object_id=instance.pk,
        status="active" if instance.is_active else "inactive",
        url=f"/dashboard/users/{instance.pk}",
    )


@receiver(post_delete, sender=User)
def record_user_deleted(sender: type[User], instance: User, **kwargs: Any) -> None:
    ActivityService.record("user", "deleted", instance.name or instance.email, object_id=instance.pk)

"""
Media signals - activity entries and relof recalculation
"""

from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService
from apps.relof.tasks import schedule_recalculation

from .models import Media


@receiver(post_save, sender=Media)
def handle_media_saved(sender: Any, instance: Media, created: bool, **kwargs: Any) -> None:
    ActivityService.record(
        "media",
        "uploaded" if created else "updated",
        instance.original_name,
        user=instance.uploaded_by,
        object_id=instance.pk,
        metadata={"category": instance.category, "mimeType": instance.mime_type},
        url="/dashboard/media",
    )
    if instance.is_public:
        schedule_recalculation("media_uploaded" if created else "media_updated")


@receiver(post_delete, sender=Media)
def handle_media_deleted(sender: Any, instance: Media, **kwargs: Any) -> None:
    ActivityService.record("media", "deleted", instance.original_name, object_id=instance.pk)
    schedule_recalculation("media_deleted")

"""
Gallery signals - activity entries and relof recalculation
"""

from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService
from apps.relof.tasks import schedule_recalculation

from .models import Gallery


@receiver(post_save, sender=Gallery)
def handle_gallery_saved(sender: Any, instance: Gallery, created: bool, **kwargs: Any) -> None:
    update_fields = kwargs.get("update_fields")
    # Cover changes are recorded through the image upload itself
    if update_fields and set(update_fields) <= {"cover_image", "updated_at"}:
        return
    ActivityService.record(
        "gallery",
        "created" if created else "updated",
        instance.title,
        user=instance.author,
        object_id=instance.pk,
        status=instance.status,
        url=f"/dashboard/galleries/{instance.pk}",
    )
    schedule_recalculation("gallery_changed")


@receiver(post_delete, sender=Gallery)
def handle_gallery_deleted(sender: Any, instance: Gallery, **kwargs: Any) -> None:
    ActivityService.record("gallery", "deleted", instance.title, object_id=instance.pk)
    schedule_recalculation("gallery_deleted")

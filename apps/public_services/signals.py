"""
Service catalog signals - activity entries and relof recalculation
"""

from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService
from apps.relof.tasks import schedule_recalculation

from .models import Service, ServiceDocument


@receiver(post_save, sender=Service)
def handle_service_saved(sender: Any, instance: Service, created: bool, **kwargs: Any) -> None:
    update_fields = kwargs.get("update_fields")
    if update_fields and set(update_fields) <= {"request_count", "view_count"}:
        return
    ActivityService.record(
        "service",
        "created" if created else "updated",
        instance.name,
        object_id=instance.pk,
        status=instance.status,
        url=f"/dashboard/services/{instance.pk}",
    )
    schedule_recalculation("service_changed")


@receiver(post_delete, sender=Service)
def handle_service_deleted(sender: Any, instance: Service, **kwargs: Any) -> None:
    ActivityService.record("service", "deleted", instance.name, object_id=instance.pk)
    schedule_recalculation("service_deleted")


@receiver(post_save, sender=ServiceDocument)
def handle_service_document_saved(sender: Any, instance: ServiceDocument, created: bool, **kwargs: Any) -> None:
    if created:
        ActivityService.record_update(
            "service_document_uploaded",
            instance.title,
            object_id=instance.pk,
            metadata={"serviceId": instance.service_id},
        )

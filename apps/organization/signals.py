"""
Organization signals - activity entries and relof recalculation
"""

from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService
from apps.relof.tasks import schedule_recalculation

from .models import Director, OrganizationalUnit


@receiver(post_save, sender=OrganizationalUnit)
def handle_unit_saved(sender: Any, instance: OrganizationalUnit, created: bool, **kwargs: Any) -> None:
    ActivityService.record_update(
        "org_unit_created" if created else "org_unit_updated",
        instance.name,
        object_id=instance.pk,
        url="/dashboard/organizational-structure",
    )
    schedule_recalculation("org_unit_changed")


@receiver(post_delete, sender=OrganizationalUnit)
def handle_unit_deleted(sender: Any, instance: OrganizationalUnit, **kwargs: Any) -> None:
    ActivityService.record_update("org_unit_deleted", instance.name, object_id=instance.pk)
    schedule_recalculation("org_unit_deleted")


@receiver(post_save, sender=Director)
def handle_director_saved(sender: Any, instance: Director, created: bool, **kwargs: Any) -> None:
    ActivityService.record_update(
        "director_created" if created else "director_updated",
        instance.full_name,
        object_id=instance.pk,
        url=f"/dashboard/directors/{instance.pk}",
    )
    schedule_recalculation("director_changed")


@receiver(post_delete, sender=Director)
def handle_director_deleted(sender: Any, instance: Director, **kwargs: Any) -> None:
    ActivityService.record_update("director_deleted", instance.full_name, object_id=instance.pk)
    schedule_recalculation("director_deleted")

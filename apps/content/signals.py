"""
Content signals for the Municipal CMS Platform
Activity feed entries and relof index recalculation on content changes.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.activity.services import ActivityService
from apps.relof.tasks import schedule_recalculation

from .models import STATUS_PUBLISHED, Category, Page, Post

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Post)
def handle_post_saved(sender: Any, instance: Post, created: bool, **kwargs: Any) -> None:
    update_fields = kwargs.get("update_fields")
    # View counter bumps are not editorial changes
    if update_fields and set(update_fields) <= {"view_count"}:
        return

    if created:
        action = "published" if instance.status == STATUS_PUBLISHED else "created"
    else:
        action = "updated"
    ActivityService.record(
        "post",
        action,
        instance.title,
        user=instance.author,
        object_id=instance.pk,
        status=instance.status,
        url=f"/dashboard/posts/{instance.pk}",
    )
    schedule_recalculation(f"post_{action}")


@receiver(post_delete, sender=Post)
def handle_post_deleted(sender: Any, instance: Post, **kwargs: Any) -> None:
    ActivityService.record("post", "deleted", instance.title, object_id=instance.pk)
    schedule_recalculation("post_deleted")


@receiver(post_save, sender=Page)
def handle_page_saved(sender: Any, instance: Page, created: bool, **kwargs: Any) -> None:
    ActivityService.record(
        "page",
        "created" if created else "updated",
        instance.title,
        user=instance.author,
        object_id=instance.pk,
        status=instance.status,
        url=f"/dashboard/pages/{instance.pk}",
    )
    schedule_recalculation("page_changed")


@receiver(post_delete, sender=Page)
def handle_page_deleted(sender: Any, instance: Page, **kwargs: Any) -> None:
    ActivityService.record("page", "deleted", instance.title, object_id=instance.pk)
    schedule_recalculation("page_deleted")


@receiver(post_save, sender=Category)
def handle_category_saved(sender: Any, instance: Category, created: bool, **kwargs: Any) -> None:
    ActivityService.record(
        "category",
        "created" if created else "updated",
        instance.name,
        object_id=instance.pk,
        url="/dashboard/categories",
    )


@receiver(post_delete, sender=Category)
def handle_category_deleted(sender: Any, instance: Category, **kwargs: Any) -> None:
    ActivityService.record("category", "deleted", instance.name, object_id=instance.pk)

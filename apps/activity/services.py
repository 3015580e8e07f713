"""
Activity feed services for the Municipal CMS Platform
Records content changes and feeds the dashboard.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.apps import apps
from django.db.models import QuerySet

from apps.common.constants import RECENT_ACTIVITY_LIMIT

from .models import ActivityLog

logger = logging.getLogger(__name__)

# Substring -> activity type, first match wins
_UPDATE_TYPE_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("post",), "post"),
    (("page",), "page"),
    (("media", "document"), "media"),
    (("user",), "user"),
    (("category",), "category"),
    (("gallery",), "gallery"),
    (("service",), "service"),
    (("director", "org_unit"), "organization"),
    (("settings",), "settings"),
)

_ACTIONS: tuple[str, ...] = ("created", "updated", "deleted", "uploaded", "published")


class ActivityService:
    """📜 Recent activity feed"""

    # Model labels counted on the dashboard summary
    SUMMARY_MODELS: ClassVar[dict[str, str]] = {
        "posts": "content.Post",
        "pages": "content.Page",
        "media": "media.Media",
        "users": "users.User",
        "galleries": "galleries.Gallery",
        "services": "public_services.Service",
    }

    @staticmethod
    def map_update_type(update_type: str) -> tuple[str, str]:
        """
        Map a free-form update string such as ``post_created`` or
        ``media_uploaded`` onto ``(type, action)``.

        Unknown strings map to ``("system", "updated")``.
        """
        value = (update_type or "").lower()

        activity_type = "system"
        for needles, mapped in _UPDATE_TYPE_RULES:
            if any(needle in value for needle in needles):
                activity_type = mapped
                break

        action = next((candidate for candidate in _ACTIONS if candidate in value), "updated")
        return activity_type, action

    @classmethod
    def record(  # noqa: PLR0913
        cls,
        type: str,  # noqa: A002
        action: str,
        title: str,
        user: Any = None,
        object_id: Any = "",
        metadata: dict[str, Any] | None = None,
        status: str = "",
        url: str = "",
    ) -> ActivityLog:
        actor = user if getattr(user, "pk", None) else None
        entry = ActivityLog.objects.create(
            type=type,
            action=action,
            title=(title or "Unknown")[:255],
            object_id=str(object_id or ""),
            user=actor,
            metadata=metadata or {},
            status=status,
            url=url,
        )
        logger.debug(f"📜 [Activity] {type}:{action} {entry.title}")
        return entry

    @classmethod
    def record_update(cls, update_type: str, title: str, **kwargs: Any) -> ActivityLog:
        """Record an entry from an update string (``settings_updated``)"""
        activity_type, action = cls.map_update_type(update_type)
        return cls.record(activity_type, action, title, **kwargs)

    @staticmethod
    def recent(limit: int = RECENT_ACTIVITY_LIMIT, type: str | None = None) -> QuerySet[ActivityLog]:  # noqa: A002
        queryset = ActivityLog.objects.select_related("user")
        if type:
            queryset = queryset.filter(type=type)
        return queryset[: max(1, limit)]

    @classmethod
    def dashboard_summary(cls) -> dict[str, Any]:
        """Counts per content type plus the latest activity entries"""
        counts = {key: apps.get_model(label).objects.count() for key, label in cls.SUMMARY_MODELS.items()}

        post_model = apps.get_model("content.Post")
        counts["publishedPosts"] = post_model.objects.filter(status="published").count()
        counts["draftPosts"] = post_model.objects.filter(status="draft").count()

        return {
            "counts": counts,
            "recentActivity": list(cls.recent()),
        }

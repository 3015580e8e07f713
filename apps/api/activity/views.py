# ===============================================================================
# ACTIVITY & DASHBOARD API VIEWS 📜
# ===============================================================================

from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.request import Request
from rest_framework.response import Response

from apps.activity.models import ActivityLog
from apps.activity.services import ActivityService
from apps.api.core import BurstAPIThrottle, IsStaffMember
from apps.common.constants import RECENT_ACTIVITY_LIMIT

from .serializers import ActivityLogSerializer

MAX_ACTIVITY_LIMIT = 100


@api_view(["GET"])
@permission_classes([IsStaffMember])
@throttle_classes([BurstAPIThrottle])
def recent_activity_api(request: Request) -> Response:
    """GET /api/activity/recent?limit=10&type=post"""
    try:
        limit = int(request.query_params.get("limit", RECENT_ACTIVITY_LIMIT))
    except (TypeError, ValueError):
        limit = RECENT_ACTIVITY_LIMIT
    activity_type = request.query_params.get("type") or None
    if activity_type not in dict(ActivityLog.TYPE_CHOICES):
        activity_type = None

    entries = ActivityService.recent(limit=min(max(limit, 1), MAX_ACTIVITY_LIMIT), type=activity_type)
    return Response(ActivityLogSerializer(entries, many=True).data)


@api_view(["GET"])
@permission_classes([IsStaffMember])
def dashboard_summary_api(request: Request) -> Response:
    """GET /api/dashboard/summary"""
    summary = ActivityService.dashboard_summary()
    summary["recentActivity"] = ActivityLogSerializer(summary["recentActivity"], many=True).data
    return Response(summary)

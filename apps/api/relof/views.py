# ===============================================================================
# RELOF INDEX API VIEWS 📊
# ===============================================================================

from __future__ import annotations

import logging
from typing import ClassVar

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import IsAdminRole, IsStaffMember, StandardAPIThrottle, result_response, success_response
from apps.relof.services import RelofIndexService
from apps.relof.tasks import recalculate_score_async

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")
DEFAULT_HISTORY_DAYS = 30
MAX_HISTORY_DAYS = 365


def _int_param(request: Request, name: str, default: int | None = None) -> int | None:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


class RelofIndexViewSet(viewsets.ViewSet):
    """
    📊 Transparency (Relof) index

    GET  /api/relof-index/dashboard
    POST /api/relof-index/recalculate  {reason?}   ?async=true queues a background task
    POST /api/relof-index/notify
    GET  /api/relof-index/requirements?category=&status=&priority=&search=
    GET  /api/relof-index/recommendations?priority=&limit=
    GET  /api/relof-index/statistics?period=7d|30d|90d
    GET  /api/relof-index/history?days=30
    GET  /api/relof-index/categories
    """

    permission_classes: ClassVar = [IsStaffMember]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    @action(detail=False, methods=["get"])
    def dashboard(self, request: Request) -> Response:
        return result_response(RelofIndexService.dashboard())

    @action(detail=False, methods=["post"])
    def recalculate(self, request: Request) -> Response:
        reason = str(request.data.get("reason") or "manual")
        if request.query_params.get("async", "").lower() in TRUTHY:
            task_id = recalculate_score_async(reason)
            logger.info(f"⏱️ [Relof] Recalculation task {task_id} queued by {request.user}")
            return success_response(status.HTTP_202_ACCEPTED, taskId=task_id, message="Recalculation queued")

        result = RelofIndexService.recalculate(reason)
        return result_response(result, lambda payload: {"success": True, **payload})

    @action(detail=False, methods=["post"], permission_classes=[IsAdminRole])
    def notify(self, request: Request) -> Response:
        return result_response(RelofIndexService.trigger_notification())

    @action(detail=False, methods=["get"])
    def requirements(self, request: Request) -> Response:
        params = request.query_params
        return result_response(
            RelofIndexService.requirements(
                category=params.get("category") or None,
                status=params.get("status") or None,
                priority=params.get("priority") or None,
                search=params.get("search") or None,
            )
        )

    @action(detail=False, methods=["get"])
    def recommendations(self, request: Request) -> Response:
        limit = _int_param(request, "limit")
        return result_response(
            RelofIndexService.recommendations(
                priority=request.query_params.get("priority") or None,
                limit=limit if limit and limit > 0 else None,
            )
        )

    @action(detail=False, methods=["get"])
    def statistics(self, request: Request) -> Response:
        return result_response(RelofIndexService.statistics(request.query_params.get("period", "30d")))

    @action(detail=False, methods=["get"])
    def history(self, request: Request) -> Response:
        days = _int_param(request, "days", DEFAULT_HISTORY_DAYS) or DEFAULT_HISTORY_DAYS
        return Response(RelofIndexService.history(min(days, MAX_HISTORY_DAYS)))

    @action(detail=False, methods=["get"])
    def categories(self, request: Request) -> Response:
        return Response(RelofIndexService.category_breakdown())

"""
Relof Index Services - Municipal CMS Platform
Transparency index scoring, snapshots, trends and recommendations.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, ClassVar

from django.conf import settings
from django.db.models import QuerySet
from django.utils import timezone
from django.utils.translation import gettext as _

from apps.common.constants import (
    RELOF_COLOR_FAILING,
    RELOF_COLOR_THRESHOLDS,
    RELOF_GRADE_FAILING,
    RELOF_GRADE_THRESHOLDS,
)
from apps.common.security_decorators import audit_service_call, monitor_performance
from apps.common.transliteration import enhanced_search
from apps.common.types import Err, Ok, Result, ServiceError, invalid

from .models import RelofScore
from .requirements import (
    CATEGORIES,
    PRIORITIES,
    PRIORITY_CRITICAL,
    PRIORITY_RANK,
    REQUIREMENTS_BY_KEY,
    STATUS_FULFILLED,
    STATUS_MISSING,
    STATUS_OUTDATED,
    STATUS_PARTIAL,
    STATUSES,
    evaluate_all,
)

logger = logging.getLogger(__name__)


def needs_calculation() -> Err[ServiceError]:
    return Err(
        ServiceError(
            _("The Relof index has not been calculated yet"),
            code="not_found",
            details={"needsCalculation": True},
        )
    )


def _round(value: float | Decimal) -> float:
    return round(float(value), 2)


def score_results(results: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Aggregate requirement results into category and total scores.

    A category percentage is earned / available points. The total score is the
    weight-averaged category percentage over categories that have requirements.
    """
    category_scores: dict[str, dict[str, Any]] = {}
    for key, category in CATEGORIES.items():
        items = [result for result in results if result["category"] == key]
        earned = sum(result["earnedPoints"] for result in items)
        available = sum(result["points"] for result in items)
        category_scores[key] = {
            "category": key,
            "displayName": category.display_name,
            "weight": category.weight,
            "score": _round(earned),
            "maxScore": available,
            "percentage": _round(earned / available * 100) if available else 0.0,
            "requirements": {
                "total": len(items),
                "fulfilled": sum(1 for r in items if r["status"] == STATUS_FULFILLED),
                "partial": sum(1 for r in items if r["status"] == STATUS_PARTIAL),
                "missing": sum(1 for r in items if r["status"] == STATUS_MISSING),
                "outdated": sum(1 for r in items if r["status"] == STATUS_OUTDATED),
            },
        }

    weighted = [(c["weight"], c["percentage"]) for c in category_scores.values() if c["maxScore"]]
    total_weight = sum(weight for weight, _percentage in weighted)
    total_score = sum(weight * percentage for weight, percentage in weighted) / total_weight if total_weight else 0.0

    return {
        "totalScore": _round(total_score),
        "earnedPoints": _round(sum(r["earnedPoints"] for r in results)),
        "maxScore": sum(r["points"] for r in results),
        "categoryScores": category_scores,
    }


class RelofIndexService:
    """📊 Relof transparency index"""

    PERIOD_DAYS: ClassVar[dict[str, int]] = {"7d": 7, "30d": 30, "90d": 90}
    DASHBOARD_HISTORY_DAYS: ClassVar[int] = 30
    DASHBOARD_RECOMMENDATIONS: ClassVar[int] = 3
    TOP_ISSUES: ClassVar[int] = 3

    # ===============================================================================
    # GRADING
    # ===============================================================================

    @staticmethod
    def grade(score: float) -> str:
        for threshold, label in RELOF_GRADE_THRESHOLDS:
            if score >= threshold:
                return label
        return RELOF_GRADE_FAILING

    @staticmethod
    def color(score: float) -> str:
        for threshold, color in RELOF_COLOR_THRESHOLDS:
            if score >= threshold:
                return color
        return RELOF_COLOR_FAILING

    # ===============================================================================
    # EVALUATION
    # ===============================================================================

    @staticmethod
    @monitor_performance(max_duration_seconds=10.0, alert_threshold=3.0)
    def evaluate() -> list[dict[str, Any]]:
        """Results of every requirement against the current site data"""
        return evaluate_all()

    @classmethod
    def calculate(cls) -> dict[str, Any]:
        results = cls.evaluate()
        return {**score_results(results), "requirements": results}

    @staticmethod
    def latest() -> RelofScore | None:
        return RelofScore.objects.order_by("-calculated_at", "-pk").first()

    @classmethod
    def serialize_score(cls, snapshot: RelofScore) -> dict[str, Any]:
        return {
            "id": snapshot.pk,
            "totalScore": snapshot.score,
            "grade": cls.grade(snapshot.score),
            "color": cls.color(snapshot.score),
            "earnedPoints": _round(snapshot.earned_points),
            "maxScore": snapshot.max_score,
            "categoryScores": snapshot.category_scores,
            "reason": snapshot.reason,
            "calculatedAt": snapshot.calculated_at,
        }

    # ===============================================================================
    # RECALCULATION
    # ===============================================================================

    @classmethod
    @monitor_performance(max_duration_seconds=15.0, alert_threshold=5.0)
    @audit_service_call("relof_recalculate")
    def recalculate(cls, reason: str = "manual") -> Result[dict[str, Any], ServiceError]:
        """🔄 Store a new snapshot; a drop past the alert threshold notifies the recipients"""
        previous = cls.latest()
        calculation = cls.calculate()

        snapshot = RelofScore.objects.create(
            total_score=Decimal(str(calculation["totalScore"])),
            max_score=calculation["maxScore"],
            earned_points=Decimal(str(calculation["earnedPoints"])),
            category_scores=calculation["categoryScores"],
            requirement_results=calculation["requirements"],
            reason=(reason or "")[:255],
        )

        previous_score = previous.score if previous else None
        change = _round(snapshot.score - previous_score) if previous_score is not None else None
        logger.info(
            f"📊 [Relof] Recalculated ({reason}): {snapshot.score}% "
            f"(previous {previous_score if previous_score is not None else 'n/a'})"
        )

        if change is not None and -change >= settings.RELOF_SCORE_DROP_ALERT:
            logger.warning(f"⚠️ [Relof] Score dropped by {-change} points")
            cls.trigger_notification()

        return Ok({"newScore": cls.serialize_score(snapshot), "previousScore": previous_score, "change": change})

    # ===============================================================================
    # DASHBOARD
    # ===============================================================================

    @classmethod
    def _change(cls, snapshots: list[RelofScore]) -> float:
        if len(snapshots) < 2:  # noqa: PLR2004
            return 0.0
        return _round(snapshots[0].score - snapshots[1].score)

    @classmethod
    def dashboard(cls) -> Result[dict[str, Any], ServiceError]:
        recent = list(RelofScore.objects.order_by("-calculated_at", "-pk")[:2])
        if not recent:
            return needs_calculation()
        current = recent[0]
        results = current.requirement_results or []

        since = timezone.now() - timedelta(days=cls.DASHBOARD_HISTORY_DAYS)
        history = [
            {"date": snapshot.calculated_at, "score": snapshot.score}
            for snapshot in cls.history_queryset(since)
        ]
        change = cls._change(recent)
        is_improving = None if len(recent) < 2 else change > 0  # noqa: PLR2004

        pending = cls._recommendations_from(results)
        critical = [r for r in results if r["priority"] == PRIORITY_CRITICAL and r["status"] != STATUS_FULFILLED]

        return Ok(
            {
                "score": {
                    "current": current.score,
                    "grade": cls.grade(current.score),
                    "color": cls.color(current.score),
                    "change": change,
                    "calculatedAt": current.calculated_at,
                },
                "trends": {"isImproving": is_improving, "history": history},
                "quickStats": {
                    "totalRequirements": len(results),
                    "fulfilledRequirements": sum(1 for r in results if r["status"] == STATUS_FULFILLED),
                    "criticalIssues": len(critical),
                    "pendingRecommendations": len(pending),
                },
                "system": {"serverReady": True, "totalConnections": 0, "subscribedClients": 0},
                "alerts": {"critical": critical, "recommendations": pending[: cls.DASHBOARD_RECOMMENDATIONS]},
            }
        )

    # ===============================================================================
    # REQUIREMENTS & RECOMMENDATIONS
    # ===============================================================================

    @classmethod
    def requirements(
        cls,
        category: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
    ) -> Result[dict[str, Any], ServiceError]:
        """Live requirement results grouped by category"""
        if category and category not in CATEGORIES:
            return invalid(_("Unknown category"), "category")
        if status and status not in STATUSES:
            return invalid(_("Unknown status"), "status")
        if priority and priority not in PRIORITIES:
            return invalid(_("Unknown priority"), "priority")

        query = (search or "").strip()
        grouped: dict[str, list[dict[str, Any]]] = {}
        total = 0
        for result in cls.evaluate():
            if category and result["category"] != category:
                continue
            if status and result["status"] != status:
                continue
            if priority and result["priority"] != priority:
                continue
            if query and not any(
                enhanced_search(text, query)
                for text in (result["name"], result["description"], *result["specificIssues"])
            ):
                continue
            grouped.setdefault(result["category"], []).append(result)
            total += 1

        return Ok({"requirements": grouped, "total": total, "lastUpdated": timezone.now()})

    @staticmethod
    def _recommendations_from(results: list[dict[str, Any]]) -> list[dict[str, Any]]:
        recommendations = []
        for result in results:
            if result["status"] == STATUS_FULFILLED:
                continue
            requirement = REQUIREMENTS_BY_KEY.get(result["key"])
            issues = result.get("specificIssues") or []
            recommendations.append(
                {
                    "requirement": result["key"],
                    "title": result["name"],
                    "description": "; ".join(issues) if issues else result["description"],
                    "category": result["category"],
                    "priority": result["priority"],
                    "status": result["status"],
                    "actionItems": list(requirement.action_items) if requirement else [],
                    "estimatedImpact": _round(result["points"] - result["earnedPoints"]),
                }
            )
        recommendations.sort(key=lambda r: (PRIORITY_RANK.get(r["priority"], len(PRIORITIES)), -r["estimatedImpact"]))
        return recommendations

    @classmethod
    def recommendations(
        cls, priority: str | None = None, limit: int | None = None
    ) -> Result[dict[str, Any], ServiceError]:
        if priority and priority not in PRIORITIES:
            return invalid(_("Unknown priority"), "priority")

        recommendations = cls._recommendations_from(cls.evaluate())
        if priority:
            recommendations = [r for r in recommendations if r["priority"] == priority]
        if limit:
            recommendations = recommendations[:limit]

        return Ok(
            {
                "recommendations": recommendations,
                "totalEstimatedImpact": _round(sum(r["estimatedImpact"] for r in recommendations)),
                "lastUpdated": timezone.now(),
            }
        )

    # ===============================================================================
    # HISTORY & STATISTICS
    # ===============================================================================

    @staticmethod
    def history_queryset(since: Any) -> QuerySet[RelofScore]:
        return RelofScore.objects.filter(calculated_at__gte=since).order_by("calculated_at", "pk")

    @classmethod
    def history(cls, days: int = 30) -> list[dict[str, Any]]:
        since = timezone.now() - timedelta(days=max(1, days))
        return [
            {
                "id": snapshot.pk,
                "totalScore": snapshot.score,
                "grade": cls.grade(snapshot.score),
                "reason": snapshot.reason,
                "calculatedAt": snapshot.calculated_at,
            }
            for snapshot in cls.history_queryset(since)
        ]

    @classmethod
    def statistics(cls, period: str = "30d") -> Result[dict[str, Any], ServiceError]:
        days = cls.PERIOD_DAYS.get(period)
        if days is None:
            return invalid(_("Period must be one of 7d, 30d, 90d"), "period")

        current = cls.latest()
        if current is None:
            return needs_calculation()

        snapshots = list(cls.history_queryset(timezone.now() - timedelta(days=days))) or [current]
        scores = [snapshot.score for snapshot in snapshots]
        first, last = scores[0], scores[-1]
        trend = _round(last - first)
        best = max(snapshots, key=lambda s: s.score)
        worst = min(snapshots, key=lambda s: s.score)

        return Ok(
            {
                "period": period,
                "current": {"score": current.score, "calculatedAt": current.calculated_at},
                "trends": {
                    "trend": trend,
                    "isImproving": trend > 0,
                    "improvementRate": _round(trend / first * 100) if first else 0.0,
                    "averageScore": _round(sum(scores) / len(scores)),
                },
                "extremes": {
                    "bestScore": {"score": best.score, "date": best.calculated_at},
                    "worstScore": {"score": worst.score, "date": worst.calculated_at},
                },
                "dataPoints": len(snapshots),
            }
        )

    @classmethod
    def category_breakdown(cls) -> list[dict[str, Any]]:
        calculation = cls.calculate()
        breakdown = []
        for key, category_score in calculation["categoryScores"].items():
            issues = [
                r for r in calculation["requirements"] if r["category"] == key and r["status"] != STATUS_FULFILLED
            ]
            issues.sort(key=lambda r: PRIORITY_RANK.get(r["priority"], len(PRIORITIES)))
            breakdown.append(
                {
                    "category": key,
                    "displayName": category_score["displayName"],
                    "weight": category_score["weight"],
                    "scores": {
                        "score": category_score["score"],
                        "maxScore": category_score["maxScore"],
                        "percentage": category_score["percentage"],
                    },
                    "requirements": category_score["requirements"],
                    "topIssues": [
                        {
                            "name": r["name"],
                            "status": r["status"],
                            "priority": r["priority"],
                            "issues": r["specificIssues"],
                        }
                        for r in issues[: cls.TOP_ISSUES]
                    ],
                }
            )
        return breakdown

    # ===============================================================================
    # NOTIFICATIONS
    # ===============================================================================

    @staticmethod
    def notification_recipients() -> list[str]:
        from apps.settings.services import SettingsService  # noqa: PLC0415

        recipients = list(settings.RELOF_NOTIFICATION_RECIPIENTS)
        if not recipients:
            contact = SettingsService.get_value("contactEmail")
            if contact:
                recipients = [str(contact)]
        return recipients

    @classmethod
    @audit_service_call("relof_notify")
    def trigger_notification(cls) -> Result[dict[str, Any], ServiceError]:
        """📧 Email the current score and open critical items to the configured recipients"""
        from apps.mailer.services import MailerService  # noqa: PLC0415

        current = cls.latest()
        if current is None:
            return needs_calculation()

        recipients = cls.notification_recipients()
        if not recipients:
            return Ok({"success": False, "message": _("No notification recipients are configured")})

        critical = [
            r["name"]
            for r in current.requirement_results or []
            if r["priority"] == PRIORITY_CRITICAL and r["status"] != STATUS_FULFILLED
        ]
        subject = f"Релоф индекс: {current.score}% ({cls.grade(current.score)})"
        lines = [f"Тренутни Релоф индекс износи {current.score}% ({cls.grade(current.score)})."]
        if critical:
            lines.append("")
            lines.append("Критични захтеви који нису испуњени:")
            lines.extend(f"- {name}" for name in critical)
        body = "\n".join(lines)

        sent = sum(1 for recipient in recipients if MailerService.send_email(recipient, subject, body))
        logger.info(f"📧 [Relof] Notification sent to {sent}/{len(recipients)} recipients")
        if not sent:
            return Ok({"success": False, "message": _("Notification could not be delivered")})
        return Ok({"success": True, "message": _("Notification sent to %(n)d recipients") % {"n": sent}})

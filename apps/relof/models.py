"""
Relof index models for the Municipal CMS Platform
"""

from __future__ import annotations

from typing import ClassVar

from django.db import models
from django.utils.translation import gettext_lazy as _


class RelofScore(models.Model):
    """📊 Snapshot of the transparency index at one point in time"""

    total_score = models.DecimalField(_("total score"), max_digits=5, decimal_places=2)
    max_score = models.PositiveIntegerField(_("maximum points"), default=0)
    earned_points = models.DecimalField(_("earned points"), max_digits=7, decimal_places=2, default=0)
    category_scores = models.JSONField(_("category scores"), default=dict)
    requirement_results = models.JSONField(_("requirement results"), default=list)
    reason = models.CharField(_("reason"), max_length=255, blank=True)
    calculated_at = models.DateTimeField(_("calculated at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "relof_scores"
        verbose_name = _("Relof score")
        verbose_name_plural = _("Relof scores")
        ordering: ClassVar[tuple[str, ...]] = ("-calculated_at",)
        get_latest_by = "calculated_at"

    def __str__(self) -> str:
        return f"📊 {self.total_score}% ({self.calculated_at:%Y-%m-%d %H:%M})"

    @property
    def score(self) -> float:
        return float(self.total_score)

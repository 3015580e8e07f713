"""
Setup models for the Municipal CMS Platform
"""

from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class SetupState(models.Model):
    """🧭 Single-row record of the first-run wizard"""

    SINGLETON_ID = 1

    is_completed = models.BooleanField(_("completed"), default=False)
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)
    institution_type = models.CharField(_("institution type"), max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "setup_state"
        verbose_name = _("Setup state")
        verbose_name_plural = _("Setup state")

    def __str__(self) -> str:
        return f"🧭 Setup {'completed' if self.is_completed else 'pending'}"

    def save(self, *args, **kwargs) -> None:
        self.pk = self.SINGLETON_ID
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> SetupState:
        state, _created = cls.objects.get_or_create(pk=cls.SINGLETON_ID)
        return state

"""
Mailer models for the Municipal CMS Platform
Contact form messages, newsletter subscribers and email templates.
"""

from __future__ import annotations

import secrets
from typing import ClassVar

from django.db import models
from django.utils.translation import gettext_lazy as _


def generate_unsubscribe_token() -> str:
    return secrets.token_urlsafe(32)


class ContactMessage(models.Model):
    """✉️ Message sent through the public contact form"""

    name = models.CharField(_("name"), max_length=100)
    email = models.EmailField(_("email"))
    phone = models.CharField(_("phone"), max_length=50, blank=True)
    subject = models.CharField(_("subject"), max_length=200)
    message = models.TextField(_("message"))
    is_read = models.BooleanField(_("read"), default=False)
    replied_at = models.DateTimeField(_("replied at"), null=True, blank=True)
    reply_message = models.TextField(_("reply"), blank=True)
    ip_address = models.GenericIPAddressField(_("IP address"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "contact_messages"
        verbose_name = _("Contact message")
        verbose_name_plural = _("Contact messages")
        ordering: ClassVar[tuple[str, ...]] = ("-created_at",)

    def __str__(self) -> str:
        return f"✉️ {self.subject} ({self.email})"


class NewsletterSubscriber(models.Model):
    """📬 Newsletter subscription; ``token`` authorizes one-click unsubscribe"""

    email = models.EmailField(_("email"), unique=True)
    name = models.CharField(_("name"), max_length=100, blank=True)
    is_active = models.BooleanField(_("active"), default=True)
    token = models.CharField(_("token"), max_length=64, unique=True, default=generate_unsubscribe_token)
    subscribed_at = models.DateTimeField(_("subscribed at"), auto_now_add=True)
    unsubscribed_at = models.DateTimeField(_("unsubscribed at"), null=True, blank=True)

    class Meta:
        db_table = "newsletter_subscribers"
        verbose_name = _("Newsletter subscriber")
        verbose_name_plural = _("Newsletter subscribers")
        ordering: ClassVar[tuple[str, ...]] = ("-subscribed_at",)

    def __str__(self) -> str:
        return f"📬 {self.email}{'' if self.is_active else ' (unsubscribed)'}"


class EmailTemplate(models.Model):
    """📝 Reusable email with ``{{variable}}`` placeholders"""

    name = models.CharField(_("name"), max_length=100, unique=True)
    subject = models.CharField(_("subject"), max_length=200)
    body = models.TextField(_("body"))
    description = models.TextField(_("description"), blank=True)
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "email_templates"
        verbose_name = _("Email template")
        verbose_name_plural = _("Email templates")
        ordering: ClassVar[tuple[str, ...]] = ("name",)

    def __str__(self) -> str:
        return f"📝 {self.name}"

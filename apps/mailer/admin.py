"""
Django admin configuration for the mailer
"""

from typing import ClassVar

from django.contrib import admin

from .models import ContactMessage, EmailTemplate, NewsletterSubscriber


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("subject", "name", "email", "is_read", "replied_at", "created_at")
    list_filter: ClassVar[tuple[str, ...]] = ("is_read",)
    search_fields: ClassVar[tuple[str, ...]] = ("subject", "email", "name")


@admin.register(NewsletterSubscriber)
class NewsletterSubscriberAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("email", "name", "is_active", "subscribed_at")
    list_filter: ClassVar[tuple[str, ...]] = ("is_active",)
    exclude: ClassVar[tuple[str, ...]] = ("token",)


@admin.register(EmailTemplate)
class EmailTemplateAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("name", "subject", "is_active", "updated_at")

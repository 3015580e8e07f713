# ===============================================================================
# MAILER API SERIALIZERS ✉️
# ===============================================================================

from __future__ import annotations

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.mailer.models import ContactMessage, EmailTemplate, NewsletterSubscriber


class ContactMessageSerializer(CamelCaseModelSerializer):
    class Meta:
        model = ContactMessage
        fields = (
            "id",
            "name",
            "email",
            "phone",
            "subject",
            "message",
            "is_read",
            "replied_at",
            "reply_message",
            "ip_address",
            "created_at",
        )
        read_only_fields = fields


class ContactSubmissionSerializer(CamelCaseSerializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField()


class ContactReadSerializer(CamelCaseSerializer):
    is_read = serializers.BooleanField(default=True)


class ContactReplySerializer(CamelCaseSerializer):
    message = serializers.CharField()


class NewsletterSubscriberSerializer(CamelCaseModelSerializer):
    class Meta:
        model = NewsletterSubscriber
        fields = ("id", "email", "name", "is_active", "subscribed_at", "unsubscribed_at")
        read_only_fields = fields


class SubscribeSerializer(CamelCaseSerializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class NewsletterSendSerializer(CamelCaseSerializer):
    subject = serializers.CharField(max_length=200)
    body = serializers.CharField()


class EmailTemplateSerializer(CamelCaseModelSerializer):
    class Meta:
        model = EmailTemplate
        fields = ("id", "name", "subject", "body", "description", "is_active", "created_at", "updated_at")
        read_only_fields = ("id", "created_at", "updated_at")


class EmailTemplateWriteSerializer(CamelCaseSerializer):
    name = serializers.CharField(max_length=100)
    subject = serializers.CharField(max_length=200)
    body = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class TemplateRenderSerializer(CamelCaseSerializer):
    context = serializers.DictField(required=False, default=dict)

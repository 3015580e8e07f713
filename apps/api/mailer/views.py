# ===============================================================================
# MAILER API VIEWS ✉️
# ===============================================================================

from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.db.models import QuerySet
from django_ratelimit.decorators import ratelimit
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import (
    AuthThrottle,
    BaseAPIViewSet,
    IsAdminRole,
    IsStaffMember,
    StandardAPIThrottle,
    StandardResultsSetPagination,
    error_response,
    result_response,
    success_response,
    validation_error_response,
)
from apps.common.request_ip import get_safe_client_ip
from apps.mailer.models import ContactMessage, EmailTemplate, NewsletterSubscriber
from apps.mailer.services import ContactSubmission, MailerService

from .serializers import (
    ContactMessageSerializer,
    ContactReadSerializer,
    ContactReplySerializer,
    ContactSubmissionSerializer,
    EmailTemplateSerializer,
    EmailTemplateWriteSerializer,
    NewsletterSendSerializer,
    NewsletterSubscriberSerializer,
    SubscribeSerializer,
    TemplateRenderSerializer,
)

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


# ===============================================================================
# PUBLIC FORMS 📝
# ===============================================================================


def _rate_limited() -> Response:
    return Response(
        {"success": False, "error": "Too many requests. Please try again later."},
        status=status.HTTP_429_TOO_MANY_REQUESTS,
    )


@ratelimit(key="apps.users.ratelimit_keys.user_or_ip", rate="5/m", method="POST", block=False)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([AuthThrottle])
def contact_submit_api(request: Request) -> Response:
    """
    ✉️ Public contact form

    POST /api/contact  {name, email, phone?, subject, message}
    """
    if getattr(request, "limited", False):
        logger.warning(f"🚫 [Mailer] Contact form rate limit hit from {get_safe_client_ip(request)}")
        return _rate_limited()

    serializer = ContactSubmissionSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = MailerService.submit_contact(
        ContactSubmission(**serializer.validated_data, ip_address=get_safe_client_ip(request))
    )
    if result.is_err():
        return error_response(result.unwrap_err())
    return success_response(status.HTTP_201_CREATED, message="Message received", id=result.unwrap().pk)


@ratelimit(key="apps.users.ratelimit_keys.user_or_ip", rate="5/m", method="POST", block=False)
@api_view(["POST"])
@permission_classes([AllowAny])
@throttle_classes([AuthThrottle])
def newsletter_subscribe_api(request: Request) -> Response:
    """POST /api/newsletter/subscribe  {email, name?}"""
    if getattr(request, "limited", False):
        return _rate_limited()

    serializer = SubscribeSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    result = MailerService.subscribe(serializer.validated_data["email"], serializer.validated_data["name"])
    return result_response(
        result, lambda subscriber: {"success": True, "email": subscriber.email}, status_code=status.HTTP_201_CREATED
    )


@api_view(["GET", "POST"])
@permission_classes([AllowAny])
def newsletter_unsubscribe_api(request: Request, token: str) -> Response:
    """GET|POST /api/newsletter/unsubscribe/{token}"""
    result = MailerService.unsubscribe(token)
    return result_response(result, lambda subscriber: {"success": True, "email": subscriber.email})


# ===============================================================================
# CONTACT INBOX 📥
# ===============================================================================


class ContactMessageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    📥 Contact inbox for staff

    GET    /api/contacts?unread=true
    GET    /api/contacts/{id}
    PATCH  /api/contacts/{id}/read  {isRead}
    POST   /api/contacts/{id}/reply {message}
    DELETE /api/contacts/{id}
    """

    serializer_class = ContactMessageSerializer
    permission_classes: ClassVar = [IsStaffMember]
    pagination_class = StandardResultsSetPagination
    throttle_classes: ClassVar = [StandardAPIThrottle]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[ContactMessage]:
        unread_only = self.request.query_params.get("unread", "").lower() in TRUTHY
        return MailerService.contacts(unread_only=unread_only)

    def perform_destroy(self, instance: ContactMessage) -> None:
        MailerService.delete_contact(instance)

    @action(detail=True, methods=["patch", "post"])
    def read(self, request: Request, pk: str | None = None) -> Response:
        serializer = ContactReadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        contact = MailerService.mark_read(self.get_object(), serializer.validated_data["is_read"])
        return Response(ContactMessageSerializer(contact).data)

    @action(detail=True, methods=["post"])
    def reply(self, request: Request, pk: str | None = None) -> Response:
        serializer = ContactReplySerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = MailerService.reply(self.get_object(), serializer.validated_data["message"])
        return result_response(result, lambda contact: ContactMessageSerializer(contact).data)


# ===============================================================================
# NEWSLETTER ADMINISTRATION 📨
# ===============================================================================


class NewsletterViewSet(viewsets.GenericViewSet):
    """
    📨 Newsletter subscribers and sending

    GET  /api/newsletter/subscribers?activeOnly=true
    POST /api/newsletter/send  {subject, body}
    """

    serializer_class = NewsletterSubscriberSerializer
    permission_classes: ClassVar = [IsAdminRole]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get_queryset(self) -> QuerySet[NewsletterSubscriber]:
        if self.request.query_params.get("activeOnly", "").lower() in TRUTHY:
            return MailerService.active_subscribers()
        return MailerService.subscribers()

    @action(detail=False, methods=["get"])
    def subscribers(self, request: Request) -> Response:
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    @action(detail=False, methods=["post"])
    def send(self, request: Request) -> Response:
        serializer = NewsletterSendSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = MailerService.send_newsletter(serializer.validated_data["subject"], serializer.validated_data["body"])
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(sent=result.unwrap())


# ===============================================================================
# EMAIL TEMPLATES 📄
# ===============================================================================


class EmailTemplateViewSet(BaseAPIViewSet):
    """
    📄 Editable email templates

    CRUD  /api/email-templates
    POST  /api/email-templates/{id}/render  {context}
    """

    serializer_class = EmailTemplateSerializer
    permission_classes: ClassVar = [IsAdminRole]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[EmailTemplate]:
        return MailerService.templates()

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = EmailTemplateWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(MailerService.create_template(**serializer.validated_data), status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        template = self.get_object()
        serializer = EmailTemplateWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(MailerService.update_template(template, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        MailerService.delete_template(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def render(self, request: Request, pk: str | None = None) -> Response:
        serializer = TemplateRenderSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return result_response(MailerService.render(self.get_object(), serializer.validated_data["context"]))

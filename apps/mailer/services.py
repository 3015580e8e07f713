"""
Mailer services for the Municipal CMS Platform
Contact form inbox, newsletter subscriptions and template rendering.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.mail import BadHeaderError, EmailMultiAlternatives
from django.core.validators import validate_email
from django.db.models import QuerySet
from django.template import Context, Template, TemplateSyntaxError
from django.utils import timezone
from django.utils.html import strip_tags
from django.utils.translation import gettext as _

from apps.common.security_decorators import audit_service_call, monitor_performance
from apps.common.types import Err, Ok, Result, ServiceError, conflict, invalid, not_found
from apps.settings.services import SettingsService

from .models import ContactMessage, EmailTemplate, NewsletterSubscriber, generate_unsubscribe_token

logger = logging.getLogger(__name__)

# Context keys never exposed to editable templates
_BLOCKED_CONTEXT_KEYS = frozenset({"password", "token", "api_key", "secret"})


def render_template_string(template_content: str, context: dict[str, Any]) -> Result[str, ServiceError]:
    """Render ``{{variable}}`` placeholders with the Django template engine"""
    safe_context = {key: value for key, value in context.items() if key.lower() not in _BLOCKED_CONTEXT_KEYS}
    try:
        rendered = Template(template_content).render(Context(safe_context))
    except TemplateSyntaxError as e:
        logger.error(f"🔥 [Mailer] Template rendering error: {e}")
        return invalid(_("Invalid template syntax: %(error)s") % {"error": e}, "body")
    return Ok(rendered)


@dataclass
class ContactSubmission:
    """Public contact form payload"""

    name: str
    email: str
    subject: str
    message: str
    phone: str = ""
    ip_address: str | None = None


class MailerService:
    """✉️ Contact inbox and newsletter"""

    TEMPLATE_FIELDS = ("name", "subject", "body", "description", "is_active")

    # ===============================================================================
    # SENDING
    # ===============================================================================

    @staticmethod
    def from_address() -> str:
        return SettingsService.get_value("smtpFrom") or settings.DEFAULT_FROM_EMAIL

    @classmethod
    def send_email(cls, recipient: str, subject: str, body: str, html_body: str | None = None) -> bool:
        """Send one message through the configured backend; False when delivery failed"""
        message = EmailMultiAlternatives(
            subject=subject,
            body=body,
            from_email=cls.from_address(),
            to=[recipient],
        )
        if html_body:
            message.attach_alternative(html_body, "text/html")
        try:
            message.send(fail_silently=False)
        except (smtplib.SMTPException, BadHeaderError, OSError) as e:
            logger.error(f"🔥 [Email] Failed to send email to {recipient}: {e}")
            return False
        logger.info(f"📧 [Email] Sent '{subject}' to {recipient}")
        return True

    # ===============================================================================
    # CONTACT MESSAGES
    # ===============================================================================

    @staticmethod
    @audit_service_call("contact_submit")
    def submit_contact(submission: ContactSubmission) -> Result[ContactMessage, ServiceError]:
        for field_name in ("name", "subject", "message"):
            if not (getattr(submission, field_name) or "").strip():
                return invalid(_("This field is required"), field_name)
        email = (submission.email or "").strip()
        try:
            validate_email(email)
        except ValidationError:
            return invalid(_("Enter a valid email address"), "email")

        contact = ContactMessage.objects.create(
            name=submission.name.strip()[:100],
            email=email,
            phone=(submission.phone or "").strip(),
            subject=submission.subject.strip()[:200],
            message=strip_tags(submission.message).strip(),
            ip_address=submission.ip_address,
        )
        logger.info(f"✉️ [Mailer] Contact message {contact.pk} from {contact.email}")
        return Ok(contact)

    @staticmethod
    def contacts(unread_only: bool = False) -> QuerySet[ContactMessage]:
        queryset = ContactMessage.objects.all()
        if unread_only:
            queryset = queryset.filter(is_read=False)
        return queryset.order_by("-created_at")

    @staticmethod
    def get_contact(contact_id: int) -> Result[ContactMessage, ServiceError]:
        contact = ContactMessage.objects.filter(pk=contact_id).first()
        if contact is None:
            return not_found(_("Message not found"))
        return Ok(contact)

    @staticmethod
    def mark_read(contact: ContactMessage, is_read: bool = True) -> ContactMessage:
        contact.is_read = is_read
        contact.save(update_fields=["is_read"])
        return contact

    @staticmethod
    def delete_contact(contact: ContactMessage) -> int:
        contact_id = contact.pk
        contact.delete()
        return contact_id

    @classmethod
    @audit_service_call("contact_reply")
    def reply(cls, contact: ContactMessage, message: str) -> Result[ContactMessage, ServiceError]:
        if not (message or "").strip():
            return invalid(_("Reply message is required"), "message")

        subject = f"Re: {contact.subject}"
        body = f"{message.strip()}\n\n---\n{contact.name} <{contact.email}>:\n{contact.message}"
        if not cls.send_email(contact.email, subject, body):
            return Err(ServiceError(_("Reply could not be sent"), code="delivery_failed"))

        contact.reply_message = message.strip()
        contact.replied_at = timezone.now()
        contact.is_read = True
        contact.save(update_fields=["reply_message", "replied_at", "is_read"])
        return Ok(contact)

    # ===============================================================================
    # NEWSLETTER
    # ===============================================================================

    @staticmethod
    @audit_service_call("newsletter_subscribe")
    def subscribe(email: str, name: str = "") -> Result[NewsletterSubscriber, ServiceError]:
        """Subscribe an address; an unsubscribed address is re-activated"""
        email = (email or "").strip().lower()
        try:
            validate_email(email)
        except ValidationError:
            return invalid(_("Enter a valid email address"), "email")

        subscriber = NewsletterSubscriber.objects.filter(email=email).first()
        if subscriber is None:
            subscriber = NewsletterSubscriber.objects.create(email=email, name=(name or "").strip())
            logger.info(f"📬 [Newsletter] New subscriber {email}")
            return Ok(subscriber)

        if subscriber.is_active:
            return conflict(_("This address is already subscribed"), "email")

        subscriber.is_active = True
        subscriber.unsubscribed_at = None
        subscriber.token = generate_unsubscribe_token()
        if name:
            subscriber.name = name.strip()
        subscriber.save()
        logger.info(f"📬 [Newsletter] Re-activated subscriber {email}")
        return Ok(subscriber)

    @staticmethod
    def unsubscribe(token: str) -> Result[NewsletterSubscriber, ServiceError]:
        subscriber = NewsletterSubscriber.objects.filter(token=token).first()
        if subscriber is None:
            return not_found(_("Subscription not found"))
        if subscriber.is_active:
            subscriber.is_active = False
            subscriber.unsubscribed_at = timezone.now()
            subscriber.save(update_fields=["is_active", "unsubscribed_at"])
            logger.info(f"📭 [Newsletter] {subscriber.email} unsubscribed")
        return Ok(subscriber)

    @staticmethod
    def subscribers() -> QuerySet[NewsletterSubscriber]:
        return NewsletterSubscriber.objects.order_by("-subscribed_at")

    @staticmethod
    def active_subscribers() -> QuerySet[NewsletterSubscriber]:
        return NewsletterSubscriber.objects.filter(is_active=True).order_by("-subscribed_at")

    @staticmethod
    def unsubscribe_url(subscriber: NewsletterSubscriber) -> str:
        return f"{settings.CMS_FRONTEND_URL.rstrip('/')}/newsletter/unsubscribe/{subscriber.token}"

    @classmethod
    @monitor_performance(max_duration_seconds=60.0, alert_threshold=10.0)
    @audit_service_call("newsletter_send")
    def send_newsletter(cls, subject: str, body: str) -> Result[int, ServiceError]:
        """One message per active subscriber; returns how many were delivered"""
        if not (subject or "").strip() or not (body or "").strip():
            return invalid(_("Subject and body are required"))

        sent = 0
        for subscriber in cls.active_subscribers():
            rendered = render_template_string(body, {"name": subscriber.name, "email": subscriber.email})
            if rendered.is_err():
                return rendered
            text = f"{rendered.unwrap()}\n\n---\n{_('Unsubscribe')}: {cls.unsubscribe_url(subscriber)}"
            if cls.send_email(subscriber.email, subject, text):
                sent += 1

        logger.info(f"📨 [Newsletter] Sent '{subject}' to {sent} subscribers")
        return Ok(sent)

    # ===============================================================================
    # EMAIL TEMPLATES
    # ===============================================================================

    @staticmethod
    def templates() -> QuerySet[EmailTemplate]:
        return EmailTemplate.objects.order_by("name")

    @staticmethod
    def get_template(template_id: int) -> Result[EmailTemplate, ServiceError]:
        template = EmailTemplate.objects.filter(pk=template_id).first()
        if template is None:
            return not_found(_("Template not found"))
        return Ok(template)

    @classmethod
    def _validate_template(cls, fields: dict[str, Any], instance_pk: int | None = None) -> Err[ServiceError] | None:
        for required in ("name", "subject", "body"):
            if required in fields and not (fields[required] or "").strip():
                return invalid(_("This field is required"), required)
        if "name" in fields and EmailTemplate.objects.filter(name=fields["name"]).exclude(pk=instance_pk).exists():
            return conflict(_("A template with this name already exists"), "name")
        for field_name in ("subject", "body"):
            if field_name in fields:
                rendered = render_template_string(fields[field_name], {})
                if rendered.is_err():
                    return rendered
        return None

    @classmethod
    def create_template(cls, **fields: Any) -> Result[EmailTemplate, ServiceError]:
        data = {name: fields.get(name, "") for name in ("name", "subject", "body")}
        if error := cls._validate_template(data):
            return error
        template = EmailTemplate.objects.create(
            **data,
            description=fields.get("description", ""),
            is_active=fields.get("is_active", True),
        )
        return Ok(template)

    @classmethod
    def update_template(cls, template: EmailTemplate, **fields: Any) -> Result[EmailTemplate, ServiceError]:
        if error := cls._validate_template(fields, instance_pk=template.pk):
            return error
        for name in cls.TEMPLATE_FIELDS:
            if name in fields:
                setattr(template, name, fields[name])
        template.save()
        return Ok(template)

    @staticmethod
    def delete_template(template: EmailTemplate) -> int:
        template_id = template.pk
        template.delete()
        return template_id

    @staticmethod
    def render(template: EmailTemplate, context: dict[str, Any]) -> Result[dict[str, str], ServiceError]:
        """``{subject, body}`` with placeholders filled from ``context``"""
        subject = render_template_string(template.subject, context)
        if subject.is_err():
            return subject
        body = render_template_string(template.body, context)
        if body.is_err():
            return body
        return Ok({"subject": subject.unwrap(), "body": body.unwrap()})

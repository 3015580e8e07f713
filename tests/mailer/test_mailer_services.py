"""
Tests for MailerService: contact inbox, newsletter and email templates.
"""

import smtplib
from unittest import mock

from django.core import mail
from django.test import SimpleTestCase, TestCase, override_settings

from apps.mailer.models import ContactMessage, NewsletterSubscriber
from apps.mailer.services import ContactSubmission, MailerService, render_template_string


def submit(**overrides):
    data = {"name": "Марко", "email": "marko@example.rs", "subject": "Питање", "message": "Радно време?"}
    data.update(overrides)
    return MailerService.submit_contact(ContactSubmission(**data))


class RenderTemplateTestCase(SimpleTestCase):
    def test_placeholders(self):
        self.assertEqual(render_template_string("Здраво {{ name }}", {"name": "Ана"}).unwrap(), "Здраво Ана")

    def test_secret_keys_are_not_exposed(self):
        rendered = render_template_string("[{{ password }}][{{ token }}]", {"password": "x", "token": "y"})
        self.assertEqual(rendered.unwrap(), "[][]")

    def test_syntax_error(self):
        self.assertEqual(render_template_string("{% if %}", {}).unwrap_err().field, "body")


class ContactTestCase(TestCase):
    def test_submit_strips_markup(self):
        contact = submit(message="<b>Хитно</b> питање", ip_address="10.0.0.1").unwrap()

        self.assertEqual(contact.message, "Хитно питање")
        self.assertEqual(contact.ip_address, "10.0.0.1")
        self.assertFalse(contact.is_read)

    def test_submit_strips_email(self):
        contact = submit(email="  ana@example.rs ").unwrap()

        self.assertEqual(contact.email, "ana@example.rs")

    def test_submit_validation(self):
        self.assertEqual(submit(email="nope").unwrap_err().field, "email")
        self.assertEqual(submit(subject=" ").unwrap_err().field, "subject")
        self.assertFalse(ContactMessage.objects.exists())

    def test_unread_filter_and_mark_read(self):
        first = submit().unwrap()
        submit(subject="Друго").unwrap()

        MailerService.mark_read(first)

        self.assertEqual(MailerService.contacts(unread_only=True).count(), 1)
        self.assertEqual(MailerService.contacts().count(), 2)

    def test_reply_sends_email(self):
        contact = submit().unwrap()

        replied = MailerService.reply(contact, "Од 7 до 15 часова").unwrap()

        self.assertTrue(replied.is_read)
        self.assertIsNotNone(replied.replied_at)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Re: Питање")
        self.assertEqual(mail.outbox[0].to, ["marko@example.rs"])
        self.assertIn("Радно време?", mail.outbox[0].body)

    def test_reply_requires_message(self):
        contact = submit().unwrap()
        self.assertEqual(MailerService.reply(contact, "  ").unwrap_err().field, "message")

    def test_failed_delivery_keeps_message_unreplied(self):
        contact = submit().unwrap()

        failure = smtplib.SMTPException("down")
        with mock.patch("apps.mailer.services.EmailMultiAlternatives.send", side_effect=failure):
            result = MailerService.reply(contact, "Одговор")

        self.assertEqual(result.unwrap_err().code, "delivery_failed")
        contact.refresh_from_db()
        self.assertIsNone(contact.replied_at)

    @override_settings(DEFAULT_FROM_EMAIL="opstina@example.rs")
    def test_from_address_falls_back_to_settings(self):
        self.assertEqual(MailerService.from_address(), "opstina@example.rs")


class NewsletterTestCase(TestCase):
    def test_subscribe_normalises_email(self):
        subscriber = MailerService.subscribe(" Ana@Example.RS ", "Ана").unwrap()
        self.assertEqual(subscriber.email, "ana@example.rs")
        self.assertTrue(subscriber.is_active)

    def test_duplicate_subscription_conflicts(self):
        MailerService.subscribe("ana@example.rs")
        self.assertEqual(MailerService.subscribe("ana@example.rs").unwrap_err().http_status, 409)

    def test_unsubscribe_and_reactivate(self):
        subscriber = MailerService.subscribe("ana@example.rs").unwrap()
        old_token = subscriber.token

        MailerService.unsubscribe(old_token).unwrap()
        subscriber.refresh_from_db()
        self.assertFalse(subscriber.is_active)
        self.assertIsNotNone(subscriber.unsubscribed_at)

        again = MailerService.subscribe("ana@example.rs", "Ана").unwrap()
        self.assertTrue(again.is_active)
        self.assertNotEqual(again.token, old_token)
        self.assertEqual(NewsletterSubscriber.objects.count(), 1)

    def test_unknown_token(self):
        self.assertEqual(MailerService.unsubscribe("missing").unwrap_err().http_status, 404)

    def test_send_newsletter_to_active_subscribers(self):
        MailerService.subscribe("ana@example.rs", "Ана")
        MailerService.subscribe("jovan@example.rs", "Јован")
        inactive = MailerService.subscribe("bivsi@example.rs").unwrap()
        MailerService.unsubscribe(inactive.token)

        sent = MailerService.send_newsletter("Вести", "Поштовани {{ name }},").unwrap()

        self.assertEqual(sent, 2)
        bodies = {message.to[0]: message.body for message in mail.outbox}
        self.assertTrue(bodies["ana@example.rs"].startswith("Поштовани Ана,"))
        self.assertIn("/newsletter/unsubscribe/", bodies["jovan@example.rs"])
        self.assertNotIn("bivsi@example.rs", bodies)

    def test_send_newsletter_requires_content(self):
        self.assertTrue(MailerService.send_newsletter("", "body").is_err())


class EmailTemplateTestCase(TestCase):
    def test_create_and_render(self):
        template = MailerService.create_template(
            name="welcome", subject="Добродошли {{ name }}", body="Поздрав, {{ name }}!"
        ).unwrap()

        rendered = MailerService.render(template, {"name": "Ана"}).unwrap()

        self.assertEqual(rendered, {"subject": "Добродошли Ана", "body": "Поздрав, Ана!"})

    def test_template_validation(self):
        MailerService.create_template(name="welcome", subject="S", body="B")

        duplicate = MailerService.create_template(name="welcome", subject="S", body="B")
        blank_subject = MailerService.create_template(name="x", subject="", body="B")
        broken_body = MailerService.create_template(name="y", subject="S", body="{% for %}")

        self.assertEqual(duplicate.unwrap_err().http_status, 409)
        self.assertEqual(blank_subject.unwrap_err().field, "subject")
        self.assertEqual(broken_body.unwrap_err().field, "body")

    def test_update_keeps_own_name(self):
        template = MailerService.create_template(name="welcome", subject="S", body="B").unwrap()

        updated = MailerService.update_template(template, name="welcome", body="Нови").unwrap()

        self.assertEqual(updated.body, "Нови")

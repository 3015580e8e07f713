"""
Contact form, newsletter and email template endpoints.
"""

from django.core import mail
from django.test import TestCase

from apps.mailer.models import ContactMessage, NewsletterSubscriber
from apps.mailer.services import ContactSubmission, MailerService
from tests.factories.users import api_client_for, create_admin, create_author


class PublicFormsAPITestCase(TestCase):
    def test_contact_submission(self):
        response = api_client_for().post(
            "/api/contact",
            {"name": "Марко", "email": "marko@example.rs", "subject": "Питање", "message": "Текст"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["success"])
        contact = ContactMessage.objects.get(pk=response.data["id"])
        self.assertEqual(contact.ip_address, "127.0.0.1")

    def test_public_forms_accept_trailing_slash(self):
        client = api_client_for()

        contact = client.post(
            "/api/contact/",
            {"name": "Марко", "email": "marko@example.rs", "subject": "Питање", "message": "Текст"},
            format="json",
        )
        subscribed = client.post("/api/newsletter/subscribe/", {"email": "ana@example.rs"}, format="json")

        self.assertEqual(contact.status_code, 201)
        self.assertEqual(subscribed.status_code, 201)

    def test_contact_validation(self):
        response = api_client_for().post("/api/contact", {"name": "Марко", "email": "bad"}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertIn("email", response.data["errors"])

    def test_subscribe_and_unsubscribe(self):
        client = api_client_for()

        created = client.post("/api/newsletter/subscribe", {"email": "ana@example.rs"}, format="json")
        duplicate = client.post("/api/newsletter/subscribe", {"email": "ana@example.rs"}, format="json")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data, {"success": True, "email": "ana@example.rs"})
        self.assertEqual(duplicate.status_code, 409)

        token = NewsletterSubscriber.objects.get().token
        self.assertEqual(client.get(f"/api/newsletter/unsubscribe/{token}").status_code, 200)
        self.assertFalse(NewsletterSubscriber.objects.get().is_active)
        self.assertEqual(client.get("/api/newsletter/unsubscribe/unknown").status_code, 404)


class ContactInboxAPITestCase(TestCase):
    def setUp(self):
        self.client = api_client_for(create_author())
        submission = ContactSubmission(name="Ана", email="ana@example.rs", subject="Тема", message="Порука")
        self.contact = MailerService.submit_contact(submission).unwrap()

    def test_inbox_requires_staff(self):
        self.assertEqual(api_client_for().get("/api/contacts").status_code, 401)

    def test_inbox_is_paginated(self):
        response = self.client.get("/api/contacts", {"unread": "true"})

        self.assertEqual(response.data["meta"]["total"], 1)
        self.assertEqual(response.data["data"][0]["subject"], "Тема")

    def test_mark_read(self):
        response = self.client.patch(f"/api/contacts/{self.contact.pk}/read", {"isRead": True}, format="json")

        self.assertTrue(response.data["isRead"])
        self.assertEqual(self.client.get("/api/contacts", {"unread": "true"}).data["meta"]["total"], 0)

    def test_reply(self):
        response = self.client.post(f"/api/contacts/{self.contact.pk}/reply", {"message": "Хвала"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["replyMessage"], "Хвала")
        self.assertEqual(len(mail.outbox), 1)

    def test_delete(self):
        self.assertEqual(self.client.delete(f"/api/contacts/{self.contact.pk}").status_code, 204)
        self.assertFalse(ContactMessage.objects.exists())


class NewsletterAdminAPITestCase(TestCase):
    def setUp(self):
        self.admin = api_client_for(create_admin())
        MailerService.subscribe("ana@example.rs", "Ана")

    def test_authors_cannot_manage_newsletter(self):
        author = api_client_for(create_author())
        self.assertEqual(author.get("/api/newsletter/subscribers").status_code, 403)

    def test_subscribers_and_send(self):
        subscribers = self.admin.get("/api/newsletter/subscribers", {"activeOnly": "true"})
        sent = self.admin.post("/api/newsletter/send", {"subject": "Вести", "body": "Здраво {{ name }}"}, format="json")

        self.assertEqual(subscribers.data[0]["email"], "ana@example.rs")
        self.assertEqual(sent.data, {"success": True, "sent": 1})
        self.assertTrue(mail.outbox[0].body.startswith("Здраво Ана"))

    def test_email_templates(self):
        created = self.admin.post(
            "/api/email-templates", {"name": "reply", "subject": "Re: {{ subject }}", "body": "Б"}, format="json"
        )
        rendered = self.admin.post(
            f"/api/email-templates/{created.data['id']}/render", {"context": {"subject": "Тема"}}, format="json"
        )
        duplicate = self.admin.post(
            "/api/email-templates", {"name": "reply", "subject": "S", "body": "B"}, format="json"
        )

        self.assertEqual(created.status_code, 201)
        self.assertEqual(rendered.data["subject"], "Re: Тема")
        self.assertEqual(duplicate.status_code, 409)

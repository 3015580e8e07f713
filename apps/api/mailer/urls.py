# ===============================================================================
# MAILER API URLS ✉️
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter, optional_slash_path

from . import views

router = OptionalSlashRouter()
router.register("contacts", views.ContactMessageViewSet, basename="contacts")
router.register("newsletter", views.NewsletterViewSet, basename="newsletter")
router.register("email-templates", views.EmailTemplateViewSet, basename="email-templates")

urlpatterns = [
    *optional_slash_path("contact", views.contact_submit_api, name="contact-submit"),
    *optional_slash_path("newsletter/subscribe", views.newsletter_subscribe_api, name="newsletter-subscribe"),
    *optional_slash_path(
        "newsletter/unsubscribe/<str:token>", views.newsletter_unsubscribe_api, name="newsletter-unsubscribe"
    ),
    path("", include(router.urls)),
]

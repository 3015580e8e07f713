# ===============================================================================
# SETUP WIZARD API URLS 🧭
# ===============================================================================

from apps.api.core import optional_slash_path

from . import views

urlpatterns = [
    *optional_slash_path("setup/status", views.setup_status_api, name="setup-status"),
    *optional_slash_path("setup/check-admin", views.check_admin_api, name="setup-check-admin"),
    *optional_slash_path("setup/templates", views.setup_templates_api, name="setup-templates"),
    *optional_slash_path("setup/complete", views.complete_setup_api, name="setup-complete"),
]

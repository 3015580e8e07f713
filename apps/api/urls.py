# ===============================================================================
# MUNICIPAL CMS API MAIN URLS 🚀
# ===============================================================================
#
# Central API routing for all CMS domains.
# This file is the single entry point for all API endpoints.
#
# URL Structure:
#   /api/auth/                      → Token login, profile, logout
#   /api/users/                     → User administration
#   /api/settings/                  → Site settings store
#   /api/posts/ pages/ categories/  → Content, page builder, search, public resolution
#   /api/media/ galleries/          → Media library and photo galleries
#   /api/services/                  → Citizen services catalog
#   /api/organizational-structure/  → Units and directors
#   /api/contact newsletter/        → Contact inbox, newsletter, email templates
#   /api/setup/                     → First-run wizard
#   /api/relof-index/               → Transparency index
#   /api/activity/ dashboard/       → Activity feed and dashboard counts
#
# Every domain module carries its own full prefixes, so each one is included
# at the API root.
#

from django.urls import include, path

app_name = "api"

# ===============================================================================
# API ROUTING 📍
# ===============================================================================

urlpatterns = [
    path("", include("apps.api.auth.urls")),
    path("", include("apps.api.users.urls")),
    path("", include("apps.api.settings.urls")),
    path("", include("apps.api.content.urls")),
    path("", include("apps.api.media.urls")),
    path("", include("apps.api.galleries.urls")),
    path("", include("apps.api.services.urls")),
    path("", include("apps.api.organization.urls")),
    path("", include("apps.api.mailer.urls")),
    path("", include("apps.api.setup.urls")),
    path("", include("apps.api.relof.urls")),
    path("", include("apps.api.activity.urls")),
]

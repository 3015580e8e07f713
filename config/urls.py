"""
URL configuration for the Municipal CMS Platform
Headless backend: Django admin plus the JSON API consumed by the frontend.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django admin interface
    path("admin/", admin.site.urls),
    # Centralized API endpoints
    path("api/", include("apps.api.urls")),
]

# ===============================================================================
# DEVELOPMENT URLS (Debug toolbar, static files)
# ===============================================================================

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

    # Debug toolbar
    if "debug_toolbar" in settings.INSTALLED_APPS:
        import debug_toolbar  # type: ignore[import-untyped]

        urlpatterns = [path("__debug__/", include(debug_toolbar.urls)), *urlpatterns]
